from dataclasses import dataclass, field
from typing import List

from utils.binary_handler import BinaryHandler
from .name_table import NameTable
from .xlink_document import ParamValue
from .xlink_types import (
    PARAM_DEFINE_ENTRY_SIZE, ParamType, ValueKind, UnknownParamType,
)


@dataclass(frozen=True)
class ParamDefineEntry:
    name: str
    type: ParamType
    default_value: ParamValue

    @classmethod
    def read(cls, handler: BinaryHandler, names: NameTable) -> "ParamDefineEntry":
        entry_pos = handler.tell
        name_pos = handler.read_uint32()
        type_tag = handler.read_uint32()
        try:
            param_type = ParamType(type_tag)
        except ValueError:
            raise UnknownParamType(f"Unknown param define type {type_tag}", names.section, entry_pos) from None

        if param_type in (ParamType.UInt32, ParamType.Enum, ParamType.Unknown):
            default = ParamValue(ValueKind.UInt32, handler.read_uint32())
        elif param_type == ParamType.Bool:
            default = ParamValue(ValueKind.Bool, handler.read_int32() != 0)
        elif param_type == ParamType.Float32:
            default = ParamValue(ValueKind.Float32, handler.read_float())
        else:
            default = ParamValue(ValueKind.String, names.resolve(handler, handler.read_uint32()))

        return cls(name=names.resolve(handler, name_pos), type=param_type, default_value=default)


@dataclass
class ParamDefineTable:
    """Parameter schemas for user, asset and trigger records.

    The index of a field in its list is the bit that marks an override
    for it in a record's presence mask.
    """
    user_params: List[ParamDefineEntry] = field(default_factory=list)
    asset_params: List[ParamDefineEntry] = field(default_factory=list)
    trigger_params: List[ParamDefineEntry] = field(default_factory=list)
    section_size: int = 0
    reserved: int = 0

    def read(self, handler: BinaryHandler):
        pos = handler.tell
        self.section_size = handler.read_uint32()
        num_user_params = handler.read_uint32()
        num_asset_params = handler.read_uint32()
        self.reserved = handler.read_uint32()
        num_trigger_params = handler.read_uint32()

        total = num_user_params + num_asset_params + num_trigger_params
        names = NameTable(handler.tell + total * PARAM_DEFINE_ENTRY_SIZE, "ParamDefineTable")

        self.user_params = [ParamDefineEntry.read(handler, names) for _ in range(num_user_params)]
        self.asset_params = [ParamDefineEntry.read(handler, names) for _ in range(num_asset_params)]
        self.trigger_params = [ParamDefineEntry.read(handler, names) for _ in range(num_trigger_params)]

        handler.seek(pos + self.section_size)
