"""Content fingerprints used to detect document changes."""

import zlib


def checksum(text: str) -> int:
    """Return the CRC-32 (IEEE) of the UTF-8 encoded text as an unsigned 32-bit int."""
    return zlib.crc32(text.encode("utf-8")) & 0xFFFFFFFF
