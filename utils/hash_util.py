# XLink name hashing
# User data headers are stored as the CRC32 of their UTF-8 name.

import zlib


def compute_crc32(s: str) -> int:
    return zlib.crc32(s.encode('utf-8')) & 0xFFFFFFFF
