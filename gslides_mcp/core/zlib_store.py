"""
Zlib stream writer that uses only stored (uncompressed) deflate blocks.

The output is a valid RFC 1950 stream readable by any inflate
implementation. No compression is attempted.
"""

import struct

ADLER_MOD = 65521

# CMF=0x78 (deflate, 32K window), FLG=0x01 (no dictionary, fastest); 0x7801 % 31 == 0
ZLIB_HEADER = b"\x78\x01"

MAX_STORED_BLOCK = 65535


def adler32(data: bytes) -> int:
    """
    Compute the Adler-32 checksum of a byte buffer.

    Args:
        data: Input bytes

    Returns:
        32-bit checksum, (b << 16) | a
    """
    a, b = 1, 0
    for byte in data:
        a = (a + byte) % ADLER_MOD
        b = (b + a) % ADLER_MOD
    return (b << 16) | a


def compress_zlib(data: bytes) -> bytes:
    """
    Wrap data in a zlib stream made of stored deflate blocks.

    Each block holds at most 65535 bytes; only the last one has BFINAL set.
    Empty input still produces one final, empty block so the stream is
    well formed.

    Args:
        data: Raw bytes

    Returns:
        Zlib stream: header, stored blocks, big-endian Adler-32 of data
    """
    data = bytes(data)
    out = bytearray(ZLIB_HEADER)

    offsets = list(range(0, len(data), MAX_STORED_BLOCK)) or [0]
    for offset in offsets:
        block = data[offset:offset + MAX_STORED_BLOCK]
        final = offset + MAX_STORED_BLOCK >= len(data)
        length = len(block)
        # BFINAL in bit 0, BTYPE=00; then LEN and NLEN little-endian
        out += struct.pack("<BHH", 1 if final else 0, length, length ^ 0xFFFF)
        out += block

    out += struct.pack(">I", adler32(data))
    return bytes(out)
