from typing import List

from utils.binary_handler import BinaryHandler
from .xlink_types import MalformedOffset


class NameTable:
    """Zero-terminated UTF-8 strings addressed by offset from a fixed base."""

    def __init__(self, base: int, section: str = "NameTable"):
        self.base = base
        self.section = section

    def read(self, handler: BinaryHandler) -> str:
        """Read a 32-bit offset at the cursor and resolve it."""
        return self.resolve(handler, handler.read_uint32())

    def resolve(self, handler: BinaryHandler, offset: int) -> str:
        address = self.base + offset
        if address >= handler.size:
            raise MalformedOffset(
                f"Name offset {offset} resolves past end of data ({handler.size} bytes)",
                self.section, address,
            )
        with handler.seek_temp(address):
            try:
                return handler.read_string('utf-8')
            except UnicodeDecodeError as e:
                raise MalformedOffset(
                    f"Name at offset {offset} is not valid UTF-8: {e.reason}", self.section, address,
                ) from e

    def read_names(self, handler: BinaryHandler, count: int) -> List[str]:
        return [self.read(handler) for _ in range(count)]

    def __repr__(self) -> str:
        return f"NameTable(base=0x{self.base:X})"
