"""
Sparse parameter resolution.

A record stores a presence mask followed by one reference word per set bit.
Each reference word holds a 24-bit offset and an 8-bit value type. Fields
without a set bit take the schema default.
"""

import logging
from typing import List, Optional

from utils.binary_handler import BinaryHandler
from .bit_flag import count_right_on_bit, count_right_on_bit64
from .name_table import NameTable
from .param_define import ParamDefineEntry
from .xlink_document import ParamValue
from .xlink_types import NO_OFFSET, MalformedOffset, ParamType, ValueKind

logger = logging.getLogger(__name__)

REF_OFFSET_MASK = 0xFFFFFF
REF_TYPE_SHIFT = 24

REF_TYPE_DIRECT = 0
REF_TYPE_STRING = 1


class ParamSolver:

    def __init__(self, handler: BinaryHandler, direct_table_pos: int, names: NameTable):
        self.handler = handler
        self.direct_table_pos = direct_table_pos
        self.names = names

    def solve(self, params: List[ParamDefineEntry], table_pos: int, param_pos: int,
              wide_mask: bool) -> List[ParamValue]:
        """Resolve one value per schema field.

        ``wide_mask`` selects the 64-bit presence mask used by asset records;
        trigger records use a 32-bit mask.
        """
        values = [p.default_value for p in params]
        if param_pos == NO_OFFSET:
            return values

        handler = self.handler
        handler.seek(table_pos + param_pos)
        mask = handler.read_uint64() if wide_mask else handler.read_uint32()
        anchor = handler.tell

        for index, param in enumerate(params):
            if not mask & (1 << index):
                continue
            value = self._solve_value(anchor, mask, param, index, wide_mask)
            if value is not None:
                values[index] = value
        return values

    def _solve_value(self, anchor: int, mask: int, param: ParamDefineEntry,
                     index: int, wide_mask: bool) -> Optional[ParamValue]:
        handler = self.handler
        if wide_mask:
            slot = count_right_on_bit64(mask, index)
        else:
            slot = count_right_on_bit(mask, index)

        handler.seek(anchor + 4 * slot - 4)
        reference = handler.read_uint32()
        offset = reference & REF_OFFSET_MASK
        ref_type = reference >> REF_TYPE_SHIFT

        if ref_type > 5 or ref_type == 4:
            logger.debug(f"{param.name}: reserved reference type {ref_type}, using default")
            return None

        direct_pos = self.direct_table_pos + offset * 4
        if direct_pos > handler.size:
            logger.debug(f"{param.name}: direct value 0x{direct_pos:X} out of range, using default")
            return None

        if param.type == ParamType.String:
            return self._solve_name(param, offset)

        if param.type == ParamType.Enum:
            if ref_type == REF_TYPE_DIRECT:
                return self._read_direct(direct_pos, "I", ValueKind.UInt32, param)
            if ref_type == REF_TYPE_STRING:
                return self._solve_name(param, offset)
            return None

        if param.type == ParamType.Float32:
            return self._read_direct(direct_pos, "f", ValueKind.Float32, param)
        if param.type == ParamType.UInt32:
            return self._read_direct(direct_pos, "I", ValueKind.UInt32, param)
        if param.type == ParamType.Bool:
            value = self._read_direct(direct_pos, "I", ValueKind.UInt32, param)
            return None if value is None else ParamValue(ValueKind.Bool, value.value != 0)
        return None

    def _read_direct(self, pos: int, fmt: str, kind: ValueKind, param: ParamDefineEntry) -> Optional[ParamValue]:
        handler = self.handler
        if pos + 4 > handler.size:
            logger.debug(f"{param.name}: direct value 0x{pos:X} truncated, using default")
            return None
        handler.seek(pos)
        return ParamValue(kind, handler.read(fmt))

    def _solve_name(self, param: ParamDefineEntry, offset: int) -> Optional[ParamValue]:
        try:
            return ParamValue(ValueKind.String, self.names.resolve(self.handler, offset))
        except MalformedOffset as e:
            logger.debug(f"{param.name}: {e}, using default")
            return None
