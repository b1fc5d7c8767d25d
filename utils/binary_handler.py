"""
Common binary file handling utilities.

This module provides a BinaryHandler cursor over an in-memory buffer that the
XLink reader and the test fixtures share. All multi-byte values use the byte
order chosen when the handler is created.
"""

import struct
from typing import Any, Union, List
from contextlib import contextmanager

LITTLE_ENDIAN = '<'
BIG_ENDIAN = '>'


class BinaryReadError(ValueError):
    """Raised when a read or seek would leave the buffer."""

    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.position = position


class BinaryHandler:

    def __init__(self, data: Union[bytes, bytearray], byte_order: str = LITTLE_ENDIAN):
        if byte_order not in (LITTLE_ENDIAN, BIG_ENDIAN):
            raise ValueError(f"Unknown byte order: {byte_order!r}")
        self.data = bytearray(data) if isinstance(data, bytes) else data
        self.position = 0
        self.byte_order = byte_order

    @property
    def tell(self) -> int:
        """Get current position in file."""
        return self.position

    @property
    def size(self) -> int:
        return len(self.data)

    def seek(self, pos: int):
        """Seek to absolute position."""
        if pos < 0:
            raise BinaryReadError(f"Cannot seek to negative position: {pos}", pos)
        if pos > len(self.data):
            raise BinaryReadError(f"Cannot seek to {pos} past end of data ({len(self.data)} bytes)", pos)
        self.position = pos

    @contextmanager
    def seek_temp(self, pos: int):
        """Context manager for temporary seek operations."""
        saved = self.position
        try:
            self.seek(pos)
            yield
        finally:
            self.position = saved

    def skip(self, count: int):
        self.position += count

    def align(self, alignment: int):
        padding = (alignment - (self.tell % alignment)) % alignment
        if padding > 0:
            self.skip(padding)

    def align_write(self, alignment: int):
        padding = (alignment - (self.tell % alignment)) % alignment
        if padding > 0:
            self.write_bytes(b'\x00' * padding)

    def read(self, fmt: str) -> Any:
        fmt = self.byte_order + fmt
        size = struct.calcsize(fmt)
        data = self.read_bytes(size)
        result = struct.unpack_from(fmt, data, 0)
        return result[0] if len(result) == 1 else result

    def write(self, fmt: str, *values):
        fmt = self.byte_order + fmt
        size = struct.calcsize(fmt)
        self._ensure_capacity(self.tell + size)
        struct.pack_into(fmt, self.data, self.tell, *values)
        self.position += size

    def read_bytes(self, count: int) -> bytes:
        available = len(self.data) - self.tell
        if available < count:
            raise BinaryReadError(
                f"Attempted to read {count} bytes but only {available} bytes available at position {self.tell}",
                self.tell,
            )
        result = self.data[self.tell:self.tell + count]
        self.position += count
        return bytes(result)

    def write_bytes(self, data: bytes):
        self._ensure_capacity(self.tell + len(data))
        self.data[self.tell:self.tell + len(data)] = data
        self.position += len(data)

    def _ensure_capacity(self, required: int):
        if required > len(self.data):
            self.data.extend(b'\x00' * (required - len(self.data)))

    def read_uint8(self) -> int:
        return self.read('B')

    def read_uint16(self) -> int:
        return self.read('H')

    def read_int16(self) -> int:
        return self.read('h')

    def read_int32(self) -> int:
        return self.read('i')

    def read_uint32(self) -> int:
        return self.read('I')

    def read_uint64(self) -> int:
        return self.read('Q')

    def read_float(self) -> float:
        return self.read('f')

    def read_uint16s(self, count: int) -> List[int]:
        if count == 0:
            return []
        return list(self.read(f'{count}H')) if count > 1 else [self.read('H')]

    def read_uint32s(self, count: int) -> List[int]:
        if count == 0:
            return []
        return list(self.read(f'{count}I')) if count > 1 else [self.read('I')]

    def write_uint8(self, value: int):
        self.write('B', value)

    def write_uint16(self, value: int):
        self.write('H', value)

    def write_int16(self, value: int):
        self.write('h', value)

    def write_int32(self, value: int):
        self.write('i', value)

    def write_uint32(self, value: int):
        self.write('I', value)

    def write_uint64(self, value: int):
        self.write('Q', value)

    def write_float(self, value: float):
        self.write('f', value)

    def read_string(self, encoding: str = 'utf-8') -> str:
        """Read a zero-terminated string at the cursor."""
        if self.tell >= len(self.data):
            raise BinaryReadError(f"String offset {self.tell} is past end of data ({len(self.data)} bytes)", self.tell)
        end = self.data.find(0, self.tell)
        if end == -1:
            end = len(self.data)
        result = self.data[self.tell:end].decode(encoding)
        self.position = end + 1
        return result

    def write_string(self, value: str, encoding: str = 'utf-8'):
        self.write_bytes(value.encode(encoding) + b'\x00')

    def write_at(self, offset: int, fmt: str, *values):
        saved_pos = self.position
        self.seek(offset)
        self.write(fmt, *values)
        self.position = saved_pos

    def get_bytes(self) -> bytes:
        return bytes(self.data)
