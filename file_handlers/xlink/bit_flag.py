"""Bit counting used to find the storage slot of a sparse parameter."""


def count_on_bit(x: int) -> int:
    x &= 0xFFFFFFFF
    x = x - ((x >> 1) & 0x55555555)
    x = (x & 0x33333333) + ((x >> 2) & 0x33333333)
    x = (x + (x >> 4)) & 0x0F0F0F0F
    x += x >> 8
    x += x >> 16
    return x & 0x3F


def count_on_bit64(x: int) -> int:
    x &= 0xFFFFFFFFFFFFFFFF
    return count_on_bit(x & 0xFFFFFFFF) + count_on_bit(x >> 32)


def count_right_on_bit(x: int, bit: int) -> int:
    """Number of set bits in ``x`` at positions ``0..bit`` inclusive."""
    mask = ((1 << bit) - 1) | (1 << bit)
    return count_on_bit(x & mask & 0xFFFFFFFF)


def count_right_on_bit64(x: int, bit: int) -> int:
    mask = ((1 << bit) - 1) | (1 << bit)
    return count_on_bit64(x & mask)
