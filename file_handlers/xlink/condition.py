from dataclasses import dataclass
from typing import Optional, Union

from utils.binary_handler import BinaryHandler
from .name_table import NameTable
from .xlink_types import ContainerKind, UnknownContainerKind


@dataclass
class ConditionTable:
    """One record of the condition table.

    Random containers only store a weight. Switch containers store a
    comparison against a watched property.
    """
    parent_container_type: int = 0
    weight: float = 0.0
    property_type: int = 0
    compare_type: int = 0
    value: Optional[Union[int, str]] = None
    local_enum_index: int = -1
    is_solved: int = 0
    is_global: int = 0

    def read(self, handler: BinaryHandler, names: NameTable):
        pos = handler.tell
        self.parent_container_type = handler.read_uint32()
        if self.parent_container_type in (ContainerKind.Random, ContainerKind.Random2):
            self.weight = handler.read_float()
        elif self.parent_container_type == ContainerKind.Switch:
            self.property_type = handler.read_uint32()
            self.compare_type = handler.read_uint32()
            raw_value = handler.read_uint32()
            self.local_enum_index = handler.read_int16()
            self.is_solved = handler.read_uint8()
            self.is_global = handler.read_uint8()

            if self.local_enum_index == -1:
                self.value = names.resolve(handler, raw_value)
            else:
                self.value = raw_value
        else:
            raise UnknownContainerKind(
                f"Unknown condition container type {self.parent_container_type}", "ConditionTable", pos
            )
        return self
