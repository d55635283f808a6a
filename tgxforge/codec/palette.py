# ==============================================================================
# PALETTE TABLES AND INDEX LOOKUP
# ==============================================================================
# Palette support for archives that store pixels as 8-bit indices.
#
# PALETTE LAYOUT:
# ---------------
# An archive palette holds 10 color tables of 256 packed 16-bit colors.
# The raw block is 10 * 256 * 2 = 5120 bytes, little-endian.
#
#   - Table 0 is the primary table used when encoding
#   - Tables 1-9 are alternates (team colors and the like)
#   - The "active" table is the one used to resolve indices when decoding
#
# INDEX LOOKUP:
# -------------
# Several slots of the primary table can hold the same color. When the
# original artwork exists in all 10 color variants (one reference image
# per alternate table), the alternates can tell the slots apart: the slot
# that matches the reference pixel in alternate table j is the right one.
#
# USAGE EXAMPLE:
# --------------
#   palette = PaletteTable.from_bytes(raw_block)
#   indexer = PaletteIndexer(palette, reference_images)
#   index = indexer.find(color, position)
#   for event in indexer.events:
#       print(event)
# ==============================================================================

import struct
from typing import Dict, List, Optional, Sequence

from PIL import Image, ImageDraw

from ..core.errors import PaletteError, PaletteLookupAmbiguous, PaletteLookupMissing
from .color import encode_color, decode_color


# ==============================================================================
# CONSTANTS
# ==============================================================================

# Colors per table
PALETTE_COLOR_COUNT = 256

# Tables per palette (primary + 9 alternates)
PALETTE_TABLE_COUNT = 10

# Raw palette block size in bytes
PALETTE_SIZE = PALETTE_TABLE_COUNT * PALETTE_COLOR_COUNT * 2

# Reference images needed for disambiguation (one per alternate table)
REFERENCE_IMAGE_COUNT = PALETTE_TABLE_COUNT - 1


# ==============================================================================
# PALETTE TABLE
# ==============================================================================

class PaletteTable:
    """
    The 10 color tables of one archive palette.

    Attributes:
        tables (List[List[int]]): 10 tables of 256 packed colors
        active (int):             Table used to resolve indices on decode

    Usage:
        palette = PaletteTable.from_bytes(data)
        palette.cycle(1)                # next alternate, wraps after 9
        color = palette.color(12)       # slot 12 of the active table
    """

    def __init__(self, tables: Optional[Sequence[Sequence[int]]] = None, active: int = 0):
        if tables is None:
            # Grayscale ramp in every table
            ramp = [encode_color(i, i, i) for i in range(PALETTE_COLOR_COUNT)]
            tables = [ramp] * PALETTE_TABLE_COUNT

        if len(tables) != PALETTE_TABLE_COUNT:
            raise PaletteError(
                f"Palette needs {PALETTE_TABLE_COUNT} tables, got {len(tables)}")
        for number, table in enumerate(tables):
            if len(table) != PALETTE_COLOR_COUNT:
                raise PaletteError(
                    f"Palette table {number} has {len(table)} colors "
                    f"(expected {PALETTE_COLOR_COUNT})")

        self.tables: List[List[int]] = [[int(c) & 0xFFFF for c in t] for t in tables]
        self._active = 0
        self.active = active

    # ==========================================================================
    # LOADING
    # ==========================================================================

    @classmethod
    def from_bytes(cls, data: bytes) -> 'PaletteTable':
        """
        Build a palette from a raw 5120-byte block.

        Extra trailing bytes are ignored.

        Raises:
            PaletteError: If the block is too small
        """
        if len(data) < PALETTE_SIZE:
            raise PaletteError(
                f"Palette data too small: {len(data)} bytes (expected {PALETTE_SIZE})")

        values = struct.unpack(f'<{PALETTE_TABLE_COUNT * PALETTE_COLOR_COUNT}H',
                               data[:PALETTE_SIZE])
        tables = [
            list(values[i * PALETTE_COLOR_COUNT:(i + 1) * PALETTE_COLOR_COUNT])
            for i in range(PALETTE_TABLE_COUNT)
        ]
        return cls(tables)

    @classmethod
    def from_file(cls, file_path: str) -> 'PaletteTable':
        """Read a raw palette block from disk."""
        with open(file_path, 'rb') as f:
            return cls.from_bytes(f.read())

    def to_bytes(self) -> bytes:
        """Serialize all 10 tables back into a raw block."""
        flat = [c for table in self.tables for c in table]
        return struct.pack(f'<{len(flat)}H', *flat)

    # ==========================================================================
    # ACTIVE TABLE
    # ==========================================================================

    @property
    def active(self) -> int:
        return self._active

    @active.setter
    def active(self, value: int):
        if not 0 <= value < PALETTE_TABLE_COUNT:
            raise PaletteError(f"Palette table {value} out of range")
        self._active = value

    def cycle(self, step: int = 1) -> int:
        """
        Move the active table by ``step``.

        Overshooting past table 9 lands on table 0, and overshooting below
        table 0 lands on table 9, whatever the size of the step.

        Returns:
            The new active table number
        """
        target = self._active + step
        if target >= PALETTE_TABLE_COUNT:
            target = 0
        elif target < 0:
            target = PALETTE_TABLE_COUNT - 1
        self._active = target
        return self._active

    @property
    def primary(self) -> List[int]:
        return self.tables[0]

    def color(self, index: int, table: Optional[int] = None) -> int:
        """Packed color at ``index`` in ``table`` (default: active table)."""
        if table is None:
            table = self._active
        return self.tables[table][index]

    # ==========================================================================
    # UTILITY METHODS
    # ==========================================================================

    def to_image(self, table: Optional[int] = None, cell_size: int = 16) -> Image.Image:
        """
        Create a visual representation of one table.

        Creates a 16x16 grid showing all 256 colors.

        Args:
            table: Table number (default: active table)
            cell_size: Size of each color cell in pixels

        Returns:
            PIL.Image showing the palette
        """
        if table is None:
            table = self._active

        size = 16 * cell_size
        img = Image.new('RGBA', (size, size), (128, 128, 128, 255))
        draw = ImageDraw.Draw(img)

        for i, value in enumerate(self.tables[table]):
            row, col = divmod(i, 16)
            x1 = col * cell_size
            y1 = row * cell_size
            r, g, b, _ = decode_color(value)
            draw.rectangle((x1, y1, x1 + cell_size - 1, y1 + cell_size - 1),
                           fill=(r, g, b, 255))

        return img


# ==============================================================================
# PALETTE INDEXER
# ==============================================================================

class PaletteIndexer:
    """
    Resolves packed colors to palette indices.

    Lookups that cannot be resolved uniquely still return an index, but
    leave a PaletteLookupAmbiguous or PaletteLookupMissing record in
    ``events`` so callers can report them.

    Attributes:
        palette:          PaletteTable being searched
        reference_images: None, or 9 color sequences aligned with the image,
                          one per alternate table
        events:           Warning records collected so far
    """

    def __init__(self, palette: PaletteTable,
                 reference_images: Optional[Sequence[Sequence[int]]] = None):
        if reference_images is not None and len(reference_images) < REFERENCE_IMAGE_COUNT:
            raise PaletteError(
                f"Need {REFERENCE_IMAGE_COUNT} reference images, got {len(reference_images)}")

        self.palette = palette
        self.reference_images = reference_images
        self.events: List[object] = []

        # color -> ascending slot list, one map per table
        self._slots: List[Dict[int, List[int]]] = []
        for table in palette.tables:
            slots: Dict[int, List[int]] = {}
            for index, value in enumerate(table):
                slots.setdefault(value, []).append(index)
            self._slots.append(slots)

    def check_length(self, count: int):
        """
        Make sure every reference image covers ``count`` pixels.

        Raises:
            PaletteError: If a reference image has a different pixel count
        """
        if self.reference_images is None:
            return
        for number, reference in enumerate(self.reference_images[:REFERENCE_IMAGE_COUNT]):
            if len(reference) != count:
                raise PaletteError(
                    f"Reference image {number} has {len(reference)} pixels, "
                    f"image has {count}")

    def candidates(self, color: int, table: int = 0) -> List[int]:
        """All slots of ``table`` holding ``color``, in ascending order."""
        return self._slots[table].get(color, [])

    def find(self, color: int, position: int) -> int:
        """
        Get the palette index for a packed color.

        Without reference images the first matching slot of the primary
        table wins. With reference images, a color that matches zero or
        several primary slots is looked up in each alternate table using
        the reference pixel at the same position; the first table with a
        single match decides. A table with several matches only provides
        a fallback, and the last such fallback is used if nothing decides.

        Args:
            color: Packed color to look up
            position: Index of the pixel in the color sequence

        Returns:
            Palette index 0-255 (0 when nothing matched)
        """
        primary = self.candidates(color)

        if self.reference_images is None:
            if primary:
                return primary[0]
            self.events.append(PaletteLookupMissing(color, position))
            return 0

        if len(primary) == 1:
            return primary[0]

        index = 0
        fallback = False
        for number in range(REFERENCE_IMAGE_COUNT):
            reference = self.reference_images[number][position]
            matches = self.candidates(reference, number + 1)
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                index = matches[0]
                fallback = True

        if not primary and not fallback:
            self.events.append(PaletteLookupMissing(color, position, index))
        else:
            self.events.append(PaletteLookupAmbiguous(color, position, index, len(primary)))
        return index
