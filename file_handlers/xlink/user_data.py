"""
User data tables of an XLink binary.

Every user data header owns its asset call table, container table and the
action/property/trigger tables that hang off it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Type, TypeVar

from utils.binary_handler import BinaryHandler
from .name_table import NameTable
from .xlink_types import ContainerKind, NO_OFFSET, USER_HEADER_SKIP, XLinkHeaderVariant


@dataclass
class ReadContext:
    names: NameTable
    header_variant: XLinkHeaderVariant


class XLinkSection(ABC):

    @abstractmethod
    def read(self, handler: BinaryHandler, ctx: ReadContext):
        pass


T = TypeVar("T", bound=XLinkSection)


def read_section_list(handler: BinaryHandler, ctx: ReadContext, cls: Type[T], count: int) -> List[T]:
    items: List[T] = []
    for _ in range(count):
        item = cls()
        item.read(handler, ctx)
        items.append(item)
    return items


@dataclass
class AssetCallTable(XLinkSection):
    name: str = ""
    asset_id: int = 0
    flag: int = 0
    field8: int = 0
    parent_index: int = -1
    field10: int = 0
    name_hash: int = 0
    param_start_pos: int = NO_OFFSET
    condition_pos: int = NO_OFFSET

    def read(self, handler: BinaryHandler, ctx: ReadContext):
        self.name = ctx.names.read(handler)
        self.asset_id = handler.read_int16()
        self.flag = handler.read_uint16()
        self.field8 = handler.read_int32()
        self.parent_index = handler.read_int32()
        self.field10 = handler.read_int32()
        self.name_hash = handler.read_uint32()
        self.param_start_pos = handler.read_uint32()
        self.condition_pos = handler.read_uint32()

    @property
    def is_root(self) -> bool:
        return self.parent_index == -1


@dataclass
class ContainerTable(XLinkSection):
    type: int = 0
    # inclusive range into the asset call table
    children_start_index: int = 0
    children_end_index: int = 0
    watch_property_name: Optional[str] = None
    watch_property_id: int = 0
    id: int = 0

    def read(self, handler: BinaryHandler, ctx: ReadContext):
        self.type = handler.read_uint32()
        self.children_start_index = handler.read_int32()
        self.children_end_index = handler.read_int32()
        if self.type == ContainerKind.Switch:
            self.watch_property_name = ctx.names.read(handler)
            self.watch_property_id = handler.read_int32()
            self.id = handler.read_int32()

    def contains(self, asset_index: int) -> bool:
        return self.children_start_index <= asset_index <= self.children_end_index


@dataclass
class ResActionSlotTable(XLinkSection):
    name: str = ""
    start_idx: int = 0
    end_idx: int = 0

    def read(self, handler: BinaryHandler, ctx: ReadContext):
        self.name = ctx.names.read(handler)
        self.start_idx = handler.read_uint16()
        self.end_idx = handler.read_uint16()


@dataclass
class ResActionTable(XLinkSection):
    name: str = ""
    trigger_start_idx: int = 0
    trigger_end_idx: int = 0

    def read(self, handler: BinaryHandler, ctx: ReadContext):
        self.name = ctx.names.read(handler)
        self.trigger_start_idx = handler.read_uint32()
        self.trigger_end_idx = handler.read_uint32()


@dataclass
class ResTriggerBase(XLinkSection):
    guid: int = 0
    asset_ctb_pos: int = 0
    flag: int = 0
    override_param_pos: int = NO_OFFSET

    def read(self, handler: BinaryHandler, ctx: ReadContext):
        self.guid = handler.read_uint32()
        self.asset_ctb_pos = handler.read_uint32()
        self.flag = handler.read_uint32()
        self.override_param_pos = handler.read_uint32()


@dataclass
class ResActionTriggerTable(ResTriggerBase):
    start_frame: float = 0.0
    end_frame: float = 0.0

    def read(self, handler: BinaryHandler, ctx: ReadContext):
        self.guid = handler.read_uint32()
        self.asset_ctb_pos = handler.read_uint32()
        self.start_frame = float(handler.read_uint32())
        self.end_frame = float(handler.read_uint32())
        self.flag = handler.read_uint32()
        self.override_param_pos = handler.read_uint32()


@dataclass
class ResPropertyTable(XLinkSection):
    name: str = ""
    is_global: int = 0
    trigger_start_idx: int = 0
    trigger_end_idx: int = 0

    def read(self, handler: BinaryHandler, ctx: ReadContext):
        self.name = ctx.names.read(handler)
        self.is_global = handler.read_uint32()
        self.trigger_start_idx = handler.read_uint32()
        self.trigger_end_idx = handler.read_uint32()


@dataclass
class ResPropertyTriggerTable(ResTriggerBase):
    condition: int = 0

    def read(self, handler: BinaryHandler, ctx: ReadContext):
        self.guid = handler.read_uint32()
        self.asset_ctb_pos = handler.read_uint32()
        self.condition = handler.read_uint32()
        self.flag = handler.read_uint32()
        self.override_param_pos = handler.read_uint32()


@dataclass
class ResPropertyAlwaysTriggerTable(ResTriggerBase):
    pass


@dataclass
class UserDataHeader:
    name: str = ""
    name_hash: int = 0
    start_offset: int = 0
    is_setup: int = 0
    num_asset: int = 0
    num_random_container: int = 0
    trigger_table_pos: int = 0
    local_property_ref_names: List[str] = field(default_factory=list)
    sorted_asset_id_table: List[int] = field(default_factory=list)
    asset_call_table: List[AssetCallTable] = field(default_factory=list)
    container_table: List[ContainerTable] = field(default_factory=list)
    action_slots: List[ResActionSlotTable] = field(default_factory=list)
    actions: List[ResActionTable] = field(default_factory=list)
    action_triggers: List[ResActionTriggerTable] = field(default_factory=list)
    properties: List[ResPropertyTable] = field(default_factory=list)
    property_triggers: List[ResPropertyTriggerTable] = field(default_factory=list)
    always_triggers: List[ResPropertyAlwaysTriggerTable] = field(default_factory=list)

    def read(self, handler: BinaryHandler, ctx: ReadContext):
        pos = handler.tell
        self.start_offset = pos

        self.is_setup = handler.read_uint32()
        num_local_property = handler.read_uint32()
        num_call_table = handler.read_uint32()
        self.num_asset = handler.read_uint32()
        self.num_random_container = handler.read_uint32()
        num_action_slot = handler.read_uint32()
        num_action = handler.read_uint32()
        num_action_trigger = handler.read_uint32()
        num_property = handler.read_uint32()
        num_property_trigger = handler.read_uint32()
        num_always_trigger = handler.read_uint32()
        self.trigger_table_pos = handler.read_uint32()
        num_container = num_call_table - self.num_asset

        self.local_property_ref_names = ctx.names.read_names(handler, num_local_property)

        handler.skip(USER_HEADER_SKIP[ctx.header_variant])

        self.sorted_asset_id_table = handler.read_uint16s(num_call_table)
        handler.align(4)

        self.asset_call_table = read_section_list(handler, ctx, AssetCallTable, num_call_table)
        self.container_table = read_section_list(handler, ctx, ContainerTable, num_container)

        handler.seek(pos + self.trigger_table_pos)

        self.action_slots = read_section_list(handler, ctx, ResActionSlotTable, num_action_slot)
        self.actions = read_section_list(handler, ctx, ResActionTable, num_action)
        self.action_triggers = read_section_list(handler, ctx, ResActionTriggerTable, num_action_trigger)
        self.properties = read_section_list(handler, ctx, ResPropertyTable, num_property)
        self.property_triggers = read_section_list(handler, ctx, ResPropertyTriggerTable, num_property_trigger)
        self.always_triggers = read_section_list(handler, ctx, ResPropertyAlwaysTriggerTable, num_always_trigger)
        return self

    def get_container(self, asset_index: int) -> Optional[ContainerTable]:
        for container in self.container_table:
            if container.contains(asset_index):
                return container
        return None
