# ==============================================================================
# TILED OBJECT SPLITTER
# ==============================================================================
# Cuts a building diamond into the fixed-size tiles of a "tiles object"
# archive entry.
#
# GEOMETRY:
# ---------
# A building that covers N x N map cells is drawn as one diamond N * 30
# pixels wide. Every map cell is a 30 x 16 pixel diamond whose rows have
# these widths, top to bottom:
#
#   2 6 10 14 18 22 26 30 30 26 22 18 14 10 6 2
#
# Cells are taken from the bottom of the image upwards, one diagonal line
# at a time: 1 cell, 2 cells, ... N - 1 cells, then N, N - 1, ... 1. Lines
# are 8 pixels apart and cells inside a line 32 pixels apart.
#
# Once the widest line is reached, the outermost cells of every line also
# carry the part of the building drawn above them (the "border strip"),
# encoded with the regular run-length codec and appended to the cell's
# raw 512-byte diamond.
#
# OWNERSHIP:
# ----------
# Every pixel a cell reads is claimed in a mask parallel to the color
# sequence. Claimed pixels read back as transparent, so no pixel ends up
# in two cells. The caller's color sequence is never modified.
# ==============================================================================

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..core.datatypes import DataType
from ..core.errors import OutOfBounds
from .color import TRANSPARENT
from .rle import encode_colors


# ==============================================================================
# CONSTANTS
# ==============================================================================

TILE_WIDTH = 30
TILE_HEIGHT = 16

# Horizontal distance between cells of one line
TILE_SPACING = 32

# Vertical distance between lines
LINE_SPACING = 8

TILE_ROW_WIDTHS = (
    2, 6, 10, 14, 18, 22, 26, 30,
    30, 26, 22, 18, 14, 10, 6, 2,
)

# Rows at the bottom of a border strip that are kept even when empty
BORDER_KEEP_ROWS = 7

DIRECTION_NONE = 0
DIRECTION_LEFT_EDGE = 1
DIRECTION_LEFT = 2
DIRECTION_RIGHT = 3

DEFAULT_WRAP_WIDTH = 4000


# ==============================================================================
# DATA CLASSES
# ==============================================================================

@dataclass
class TileRecord:
    """
    One tile of a tiled object.

    Attributes:
        width:              Tile width (always 30)
        height:             16, or border strip rows + 9
        direction:          DIRECTION_* constant
        sub_parts:          Tiles in the whole building
        part_index:         Position of this tile in the building
        building_width:     Width of the attached border strip, 0 if none
        tile_offset:        Border strip rows - 7, clamped at 0
        horizontal_offset:  14 for right-hand border tiles
        data:               512 raw diamond bytes + encoded border strip
    """
    width: int = TILE_WIDTH
    height: int = TILE_HEIGHT
    direction: int = DIRECTION_NONE
    sub_parts: int = 0
    part_index: int = 0
    building_width: int = 0
    tile_offset: int = 0
    horizontal_offset: int = 0
    data: bytes = b""


@dataclass
class PlacementContext:
    """
    Where the next building goes on a sheet of several buildings.

    Buildings are laid out left to right. Once the running width passes
    ``wrap_width`` the next one starts a new line below the tallest
    building seen so far.
    """
    x_offset: int = 0
    y_offset: int = 0
    biggest_height: int = 0
    wrap_width: int = DEFAULT_WRAP_WIDTH

    def advance(self, width: int, height: int):
        self.x_offset += width
        if height > self.biggest_height:
            self.biggest_height = height
        if self.x_offset > self.wrap_width:
            self.x_offset = 0
            self.y_offset += self.biggest_height

    def reset(self):
        self.x_offset = 0
        self.y_offset = 0
        self.biggest_height = 0


# ==============================================================================
# HELPERS
# ==============================================================================

def diamond_width(part_count: int) -> int:
    """
    Get the diamond width (in cells) of a building from its tile count.

    A building N cells wide has 1 + 3 + 5 + ... + (2N - 1) = N * N tiles.

    Returns:
        N, or 0 if the count does not form a full diamond
    """
    taken = 0
    corner = 1
    while part_count - taken - corner > 0:
        taken += corner
        corner += 2
    if part_count - taken - corner == 0:
        return corner - corner // 2
    return 0


def tile_colors(tile: TileRecord) -> List[int]:
    """
    Expand the raw diamond of a tile into a 30 x 16 color sequence.

    Pixels outside the diamond are transparent. The border strip that
    may follow the diamond in ``tile.data`` is ignored.
    """
    colors = [TRANSPARENT] * (TILE_WIDTH * TILE_HEIGHT)
    pos = 0
    for y, span in enumerate(TILE_ROW_WIDTHS):
        start = y * TILE_WIDTH + TILE_WIDTH // 2 - span // 2
        for x in range(span):
            colors[start + x] = tile.data[pos] | (tile.data[pos + 1] << 8)
            pos += 2
    return colors


def _read(colors: Sequence[int], claimed: Optional[bytearray], index: int, width: int) -> int:
    if index < 0 or index >= len(colors):
        raise OutOfBounds(f"Tile pixel {index} outside the image",
                          index % width if width else -1,
                          index // width if width else -1)
    if claimed is not None and claimed[index]:
        return TRANSPARENT
    return colors[index]


def extract_border_strip(colors: Sequence[int],
                         image_width: int,
                         strip_width: int,
                         strip_height: int,
                         offset_x: int,
                         claimed: Optional[bytearray] = None) -> List[int]:
    """
    Cut the strip of building above a tile.

    The strip starts at the top of the image. Rows above the first row
    that holds a visible pixel are dropped; the bottom 7 rows are always
    kept.

    Returns:
        Color sequence, strip_width wide (empty if every row was dropped)
    """
    strip: List[int] = []
    started = False

    for y in range(strip_height):
        keep_row = y > strip_height - 1 - BORDER_KEEP_ROWS
        row = []
        for x in range(offset_x, offset_x + strip_width):
            value = _read(colors, claimed, image_width * y + x, image_width)
            if value != TRANSPARENT or keep_row:
                row.append(value)
                started = True
            else:
                row.append(TRANSPARENT)
        if started:
            strip.extend(row)

    return strip


def _attach_border(tile: TileRecord, payload: bytearray, colors, image_width: int,
                   strip_width: int, strip_height: int, offset_x: int, claimed):
    strip = extract_border_strip(colors, image_width, strip_width, strip_height,
                                 offset_x, claimed)
    if not strip:
        return

    rows = len(strip) // strip_width
    payload.extend(encode_colors(strip, strip_width, rows,
                                 data_type=DataType.TILES_OBJECT, animated=True))

    tile_offset = (rows + 10 - TILE_HEIGHT - 1) & 0xFFFF
    tile.tile_offset = 0 if tile_offset == 0xFFFF else tile_offset
    tile.height = rows + 9


# ==============================================================================
# SPLITTER
# ==============================================================================

def split_tiles(colors: Sequence[int],
                width: int,
                height: int,
                context: Optional[PlacementContext] = None) -> List[TileRecord]:
    """
    Split a building diamond into tiles.

    Args:
        colors: width * height packed colors of the whole building
        width: Image width, a multiple of 30 (cells) plus any spacing
        height: Image height
        context: Sheet placement state, advanced by this building

    Returns:
        TileRecord list in archive order

    Raises:
        OutOfBounds: If the diamond geometry reaches outside the image
    """
    if len(colors) != width * height:
        raise ValueError(
            f"Color sequence has {len(colors)} entries, expected {width}x{height}")

    claimed = bytearray(len(colors))
    tiles: List[TileRecord] = []

    part_width = width // TILE_WIDTH
    total_tiles = part_width * part_width

    saved_x = width // 2
    x_offset = saved_x
    y_offset = height - TILE_HEIGHT
    parts_per_line = 1
    counter = 0
    half_reached = False

    for part in range(total_tiles):
        counter += 1

        payload = bytearray()
        for y, span in enumerate(TILE_ROW_WIDTHS):
            start = width * (y + y_offset) + x_offset - span // 2
            for x in range(span):
                index = start + x
                value = _read(colors, claimed, index, width)
                payload.append(value & 0xFF)
                payload.append((value >> 8) & 0xFF)
                claimed[index] = 1

        tile = TileRecord(sub_parts=total_tiles, part_index=part)
        strip_height = y_offset + BORDER_KEEP_ROWS

        if total_tiles == 1:
            half_reached = True

        if half_reached:
            if counter == 1:
                if part == total_tiles - 1:
                    tile.building_width = TILE_WIDTH
                    tile.direction = DIRECTION_LEFT_EDGE
                else:
                    tile.building_width = 16
                    tile.direction = DIRECTION_LEFT
                _attach_border(tile, payload, colors, width, tile.building_width,
                               strip_height, x_offset - 15, claimed)
            elif counter == parts_per_line:
                tile.building_width = 16
                tile.direction = DIRECTION_RIGHT
                _attach_border(tile, payload, colors, width, tile.building_width,
                               strip_height, x_offset - 1, claimed)
                tile.horizontal_offset = 14

        tile.data = bytes(payload)
        tiles.append(tile)
        x_offset += TILE_SPACING

        if counter == parts_per_line:
            y_offset -= LINE_SPACING
            counter = 0
            x_offset = saved_x

            if parts_per_line == part_width - 1 and not half_reached:
                half_reached = True
                parts_per_line += 2
                x_offset = -1

            if not half_reached:
                parts_per_line += 1
                x_offset -= 16
            else:
                x_offset += 16
                parts_per_line -= 1

            saved_x = x_offset

    if context is not None:
        context.advance(width, height)

    return tiles
