# ==============================================================================
# STANDALONE TGX FILES
# ==============================================================================
# Reader/writer for loose .tgx images (the ones in the game's gfx folder).
#
# TGX FILE FORMAT:
#   - Width  (4 bytes, uint32 little-endian)
#   - Height (4 bytes, uint32 little-endian)
#   - Run-length pixel stream (see rle.py) up to the end of the file
# ==============================================================================

import struct
from dataclasses import dataclass

from ..core.errors import MalformedStream

TGX_HEADER = struct.Struct('<II')


@dataclass
class TGXFile:
    """
    A loose TGX image.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        data: Encoded pixel stream (without the header)
    """
    width: int = 0
    height: int = 0
    data: bytes = b""

    @classmethod
    def from_bytes(cls, raw: bytes) -> 'TGXFile':
        if len(raw) < TGX_HEADER.size:
            raise MalformedStream(
                f"TGX file too small: {len(raw)} bytes (header is {TGX_HEADER.size})")
        width, height = TGX_HEADER.unpack_from(raw)
        return cls(width, height, bytes(raw[TGX_HEADER.size:]))

    def to_bytes(self) -> bytes:
        return TGX_HEADER.pack(self.width, self.height) + self.data

    @classmethod
    def load(cls, filepath: str) -> 'TGXFile':
        with open(filepath, 'rb') as f:
            return cls.from_bytes(f.read())

    def save(self, filepath: str):
        with open(filepath, 'wb') as f:
            f.write(self.to_bytes())
