from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, TypeVar, Union

from utils.binary_handler import BIG_ENDIAN, LITTLE_ENDIAN, BinaryHandler, BinaryReadError
from utils.hash_name_manager import HashNameManager
from .condition import ConditionTable
from .name_table import NameTable
from .param_define import ParamDefineTable
from .param_solver import ParamSolver
from .user_data import AssetCallTable, ReadContext, ResActionTriggerTable, ResTriggerBase, UserDataHeader
from .xlink_document import (
    XLinkAction, XLinkActionSlot, XLinkAssetEntry, XLinkConditionEntry, XLinkProperty,
    XLinkTriggerActionEntry, XLinkTriggerEntry, XLinkUserEntry,
)
from .xlink_types import (
    NO_OFFSET, XLINK_MAGIC, DuplicateEntryName, MalformedIndexRange, MalformedOffset,
    SignatureMismatch, XLinkHeaderVariant,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class XLinkHeader:
    file_size: int = 0
    version: int = 0
    num_res_param: int = 0
    num_res_asset_param: int = 0
    num_res_trigger_overwrite_param: int = 0
    trigger_overwrite_param_table_pos: int = 0
    local_property_name_ref_table_pos: int = 0
    num_local_property_name_ref_table: int = 0
    num_local_property_enum_name_ref_table: int = 0
    num_direct_value_table: int = 0
    num_random_table: int = 0
    num_curve_table: int = 0
    num_curve_point_table: int = 0
    ex_region_pos: int = 0
    num_user: int = 0
    condition_table_pos: int = 0
    name_table_pos: int = 0

    def read(self, handler: BinaryHandler):
        magic = handler.read_bytes(4)
        if magic != XLINK_MAGIC:
            raise SignatureMismatch(f"Invalid XLink magic {magic!r}", "Header", 0)
        self.file_size = handler.read_uint32()
        self.version = handler.read_uint32()
        self.num_res_param = handler.read_uint32()
        self.num_res_asset_param = handler.read_uint32()
        self.num_res_trigger_overwrite_param = handler.read_uint32()
        self.trigger_overwrite_param_table_pos = handler.read_uint32()
        self.local_property_name_ref_table_pos = handler.read_uint32()
        self.num_local_property_name_ref_table = handler.read_uint32()
        self.num_local_property_enum_name_ref_table = handler.read_uint32()
        self.num_direct_value_table = handler.read_uint32()
        self.num_random_table = handler.read_uint32()
        self.num_curve_table = handler.read_uint32()
        self.num_curve_point_table = handler.read_uint32()
        self.ex_region_pos = handler.read_uint32()
        self.num_user = handler.read_uint32()
        self.condition_table_pos = handler.read_uint32()
        self.name_table_pos = handler.read_uint32()


@dataclass
class XLinkFile:
    """An XLink binary decoded into user entries.

    The raw tables are kept next to the assembled entries so that tools can
    inspect offsets the entries do not carry.
    """
    header_variant: XLinkHeaderVariant = XLinkHeaderVariant.ELinkBOTW
    byte_order: str = LITTLE_ENDIAN
    header: XLinkHeader = field(default_factory=XLinkHeader)
    user_data_hashes: List[int] = field(default_factory=list)
    user_data: List[UserDataHeader] = field(default_factory=list)
    param_define_table: ParamDefineTable = field(default_factory=ParamDefineTable)
    local_name_properties: List[str] = field(default_factory=list)
    local_name_enum_properties: List[str] = field(default_factory=list)
    asset_param_table_pos: int = 0
    direct_table_pos: int = 0
    entries: List[XLinkUserEntry] = field(default_factory=list)

    @staticmethod
    def can_handle(data: bytes) -> bool:
        return len(data) >= 4 and bytes(data[:4]) == XLINK_MAGIC

    @contextmanager
    def _section(self, name: str):
        try:
            yield
        except BinaryReadError as e:
            raise MalformedOffset(str(e), name, e.position) from e

    def read(self, data: bytes) -> bool:
        handler = BinaryHandler(data, byte_order=self.byte_order)
        header = self.header

        with self._section("Header"):
            header.read(handler)
        logger.debug(
            f"XLink v{header.version}: {header.num_user} users, "
            f"name table 0x{header.name_table_pos:X}, condition table 0x{header.condition_table_pos:X}"
        )

        names = NameTable(header.name_table_pos)
        ctx = ReadContext(names=names, header_variant=self.header_variant)

        with self._section("UserDataTable"):
            self._read_user_data_table(handler, ctx)

        with self._section("ParamDefineTable"):
            self.param_define_table = ParamDefineTable()
            self.param_define_table.read(handler)
        self.asset_param_table_pos = handler.tell

        with self._section("LocalPropertyNameRefTable"):
            handler.seek(header.local_property_name_ref_table_pos)
            self.local_name_properties = names.read_names(handler, header.num_local_property_name_ref_table)
            self.local_name_enum_properties = names.read_names(handler, header.num_local_property_enum_name_ref_table)
        self.direct_table_pos = handler.tell
        logger.debug(
            f"Asset param table 0x{self.asset_param_table_pos:X}, direct value table 0x{self.direct_table_pos:X}"
        )

        solver = ParamSolver(handler, self.direct_table_pos, names)
        self.entries = []
        for usd in self.user_data:
            with self._section(f"UserData[{usd.name}]"):
                self.entries.append(self._build_user_entry(handler, usd, solver, names))
        return True

    def _read_user_data_table(self, handler: BinaryHandler, ctx: ReadContext):
        count = self.header.num_user
        self.user_data_hashes = handler.read_uint32s(count)
        lookup = HashNameManager.instance()
        self.user_data = []
        for name_hash in self.user_data_hashes:
            offset = handler.read_uint32()
            with handler.seek_temp(offset):
                usd = UserDataHeader(name=lookup.lookup(name_hash), name_hash=name_hash)
                usd.read(handler, ctx)
            self.user_data.append(usd)

    def _build_user_entry(self, handler: BinaryHandler, usd: UserDataHeader,
                          solver: ParamSolver, names: NameTable) -> XLinkUserEntry:
        entry = XLinkUserEntry(name=usd.name)
        asset_params = self.param_define_table.asset_params
        call_table = usd.asset_call_table
        sorted_ids = usd.sorted_asset_id_table
        pos = usd.start_offset
        assets: List[Optional[XLinkAssetEntry]] = [None] * len(call_table)

        # XLink sorts assets by hash when compiling, walk them in authoring order
        for asset_idx in sorted_ids:
            asset = _at(call_table, asset_idx, "AssetCallTable", pos)
            if assets[asset_idx] is not None:
                raise MalformedIndexRange(
                    f"Asset index {asset_idx} appears twice in the sorted table", "SortedAssetIdTable", pos,
                )
            values = solver.solve(asset_params, self.asset_param_table_pos, asset.param_start_pos, wide_mask=True)
            asset_entry = XLinkAssetEntry(
                name=asset.name,
                parent_index=asset.parent_index,
                parameters={p.name: v for p, v in zip(asset_params, values)},
            )
            if asset.condition_pos != NO_OFFSET:
                asset_entry.condition = self._read_condition(handler, usd, asset_idx, asset.condition_pos, names)
            assets[asset_idx] = asset_entry

        for asset_idx in sorted_ids:
            asset = call_table[asset_idx]
            if asset.is_root:
                entry.assets.append(assets[asset_idx])
                continue
            _check_parent_chain(call_table, asset_idx, pos)
            parent = assets[asset.parent_index]
            if parent is None:
                raise MalformedIndexRange(
                    f"Asset {asset.name!r} has parent {asset.parent_index} missing from the sorted table",
                    "AssetCallTable", pos,
                )
            parent.children.append(assets[asset_idx])

        action_triggers = self._solve_triggers(usd.action_triggers, solver)
        property_triggers = self._solve_triggers(usd.property_triggers, solver)
        entry.always_triggers.extend(self._solve_triggers(usd.always_triggers, solver))

        for prop in usd.properties:
            _add_unique(entry.properties, prop.name, XLinkProperty(
                triggers=_range(property_triggers, prop.trigger_start_idx, prop.trigger_end_idx,
                                "PropertyTriggers", pos),
            ), "Properties", pos)

        for slot_table in usd.action_slots:
            slot = XLinkActionSlot()
            _add_unique(entry.action_slots, slot_table.name, slot, "ActionSlots", pos)
            for action_table in _range(usd.actions, slot_table.start_idx, slot_table.end_idx, "Actions", pos):
                _add_unique(slot.actions, action_table.name, XLinkAction(
                    triggers=_range(action_triggers, action_table.trigger_start_idx,
                                    action_table.trigger_end_idx, "ActionTriggers", pos),
                ), f"ActionSlots[{slot_table.name}]", pos)
        return entry

    def _read_condition(self, handler: BinaryHandler, usd: UserDataHeader, asset_idx: int,
                        condition_pos: int, names: NameTable) -> Optional[XLinkConditionEntry]:
        container = usd.get_container(asset_idx)
        if container is None:
            return None
        with handler.seek_temp(self.header.condition_table_pos + condition_pos):
            cond_table = ConditionTable().read(handler, names)
        return XLinkConditionEntry(
            type=container.type,
            weight=cond_table.weight,
            name=container.watch_property_name,
            value=cond_table.value,
            watch_property_id=container.watch_property_id,
            id=container.id,
            property_type=cond_table.property_type,
            compare_type=cond_table.compare_type,
            is_solved=cond_table.is_solved == 1,
            is_global=cond_table.is_global == 1,
        )

    def _solve_triggers(self, triggers: Sequence[ResTriggerBase], solver: ParamSolver) -> List[XLinkTriggerEntry]:
        trigger_params = self.param_define_table.trigger_params
        solved: List[XLinkTriggerEntry] = []
        for trigger in triggers:
            values = solver.solve(
                trigger_params, self.header.trigger_overwrite_param_table_pos,
                trigger.override_param_pos, wide_mask=False,
            )
            if isinstance(trigger, ResActionTriggerTable):
                trigger_entry = XLinkTriggerActionEntry(
                    start_frame=trigger.start_frame, end_frame=trigger.end_frame,
                )
            else:
                trigger_entry = XLinkTriggerEntry()
            trigger_entry.name = str(trigger.guid)
            trigger_entry.parameters = {p.name: v for p, v in zip(trigger_params, values)}
            solved.append(trigger_entry)
        return solved


def _at(items: Sequence[T], index: int, section: str, offset: Optional[int] = None) -> T:
    if not 0 <= index < len(items):
        raise MalformedIndexRange(f"Index {index} out of range for {len(items)} entries", section, offset)
    return items[index]


def _range(items: Sequence[T], start: int, end: int, section: str, offset: Optional[int] = None) -> List[T]:
    """Items ``start..end``, both ends included."""
    if end < start:
        return []
    if start < 0 or end >= len(items):
        raise MalformedIndexRange(
            f"Range [{start}, {end}] out of range for {len(items)} entries", section, offset,
        )
    return list(items[start:end + 1])


def _add_unique(target: Dict[str, T], name: str, value: T, section: str, offset: Optional[int] = None):
    if name in target:
        raise DuplicateEntryName(f"Duplicate name {name!r}", section, offset)
    target[name] = value


def _check_parent_chain(call_table: Sequence[AssetCallTable], asset_idx: int, offset: int):
    """Follow parent links up to a root, failing on a cycle or a dangling index."""
    seen = set()
    idx = asset_idx
    while not call_table[idx].is_root:
        if idx in seen:
            raise MalformedIndexRange(
                f"Asset {call_table[asset_idx].name!r} leads into a parent cycle", "AssetCallTable", offset,
            )
        seen.add(idx)
        idx = call_table[idx].parent_index
        _at(call_table, idx, "AssetCallTable", offset)


def decode_xlink(data: bytes, header_variant: Union[XLinkHeaderVariant, str, int],
                 big_endian: bool = False) -> XLinkFile:
    xlink = XLinkFile(
        header_variant=XLinkHeaderVariant.parse(header_variant),
        byte_order=BIG_ENDIAN if big_endian else LITTLE_ENDIAN,
    )
    xlink.read(data)
    return xlink
