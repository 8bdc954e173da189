"""
Minimal PNG writer for 8-bit RGBA images.

Produces signature, IHDR, a single IDAT and IEND. Scanlines use filter
type 0 and the image data is wrapped by the stored-block zlib writer.
"""

import struct

from gslides_mcp.core.zlib_store import compress_zlib
from gslides_mcp.utils.exceptions import EncodingError

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

BIT_DEPTH = 8
COLOR_TYPE_RGBA = 6
BYTES_PER_PIXEL = 4


def _make_crc_table():
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            if c & 1:
                c = 0xEDB88320 ^ (c >> 1)
            else:
                c >>= 1
        table.append(c)
    return tuple(table)


CRC_TABLE = _make_crc_table()


def crc32(data: bytes) -> int:
    """IEEE CRC-32 (reflected polynomial 0xEDB88320) as used by PNG chunks."""
    crc = 0xFFFFFFFF
    for byte in data:
        crc = CRC_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


def write_chunk(chunk_type: bytes, data: bytes = b"") -> bytes:
    """
    Frame one PNG chunk.

    Args:
        chunk_type: Four ASCII bytes, e.g. b"IHDR"
        data: Chunk payload

    Returns:
        length (BE32) + type + data + CRC-32 of type+data (BE32)
    """
    if len(chunk_type) != 4:
        raise EncodingError(f"PNG chunk type must be 4 bytes, got {chunk_type!r}")
    body = bytes(chunk_type) + bytes(data)
    return struct.pack(">I", len(data)) + body + struct.pack(">I", crc32(body))


def encode_png(width: int, height: int, pixels: bytes) -> bytes:
    """
    Encode an RGBA pixel buffer as a PNG file.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        pixels: Row-major RGBA bytes, width * height * 4 long

    Returns:
        PNG file bytes
    """
    stride = width * BYTES_PER_PIXEL
    if width <= 0 or height <= 0 or len(pixels) != stride * height:
        raise EncodingError(
            f"pixel buffer of {len(pixels)} bytes does not match a {width}x{height} RGBA image"
        )

    ihdr = struct.pack(">IIBBBBB", width, height, BIT_DEPTH, COLOR_TYPE_RGBA, 0, 0, 0)

    raw = bytearray()
    for row in range(height):
        raw.append(0)  # filter type None
        raw += pixels[row * stride:(row + 1) * stride]

    return b"".join([
        PNG_SIGNATURE,
        write_chunk(b"IHDR", ihdr),
        write_chunk(b"IDAT", compress_zlib(bytes(raw))),
        write_chunk(b"IEND"),
    ])
