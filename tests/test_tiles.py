import pytest

from tgxforge.codec.color import TRANSPARENT
from tgxforge.codec.rle import decode_colors
from tgxforge.codec.tiles import (
    PlacementContext, diamond_width, extract_border_strip, split_tiles, tile_colors,
    TILE_ROW_WIDTHS, DIRECTION_NONE, DIRECTION_LEFT, DIRECTION_RIGHT, DIRECTION_LEFT_EDGE,
)
from tgxforge.core.errors import OutOfBounds

WIDTH, HEIGHT = 60, 32


def unique_colors(width=WIDTH, height=HEIGHT):
    return [0x8000 | i for i in range(width * height)]


def raw_values(tile):
    return [tile.data[i] | (tile.data[i + 1] << 8) for i in range(0, 512, 2)]


def test_diamond_width():
    assert diamond_width(1) == 1
    assert diamond_width(4) == 2
    assert diamond_width(9) == 3
    assert diamond_width(16) == 4
    assert diamond_width(5) == 0
    assert diamond_width(0) == 0


def test_two_cell_building():
    colors = unique_colors()
    tiles = split_tiles(colors, WIDTH, HEIGHT)

    assert len(tiles) == 4
    assert [t.part_index for t in tiles] == [0, 1, 2, 3]
    assert all(t.sub_parts == 4 for t in tiles)
    assert [t.direction for t in tiles] == [
        DIRECTION_NONE, DIRECTION_LEFT, DIRECTION_RIGHT, DIRECTION_LEFT_EDGE]
    assert all(len(t.data) >= 512 for t in tiles)


def test_bottom_tile_follows_row_widths():
    colors = unique_colors()
    bottom = split_tiles(colors, WIDTH, HEIGHT)[0]
    expanded = tile_colors(bottom)

    for y, span in enumerate(TILE_ROW_WIDTHS):
        for x in range(span):
            source = colors[(16 + y) * WIDTH + 30 - span // 2 + x]
            assert expanded[y * 30 + 15 - span // 2 + x] == source
    # Corners of the cell are outside the diamond
    assert expanded[0] == TRANSPARENT
    assert len(bottom.data) == 512
    assert bottom.height == 16


def test_no_pixel_lands_in_two_tiles():
    colors = unique_colors()
    before = list(colors)
    tiles = split_tiles(colors, WIDTH, HEIGHT)

    seen = []
    for tile in tiles:
        seen.extend(v for v in raw_values(tile) if v != TRANSPARENT)
    assert len(seen) == len(set(seen))
    assert colors == before


def test_border_tiles():
    tiles = split_tiles(unique_colors(), WIDTH, HEIGHT)
    left, right, top = tiles[1], tiles[2], tiles[3]

    assert left.building_width == 16
    assert left.height == 15 + 9
    assert left.tile_offset == 8
    assert left.horizontal_offset == 0

    assert right.building_width == 16
    assert right.height == 24
    assert right.horizontal_offset == 14

    assert top.building_width == 30
    assert top.height == 16
    assert top.tile_offset == 0

    strip = decode_colors(left.data[512:], 16, 15)
    assert strip[0] == 0x8000
    assert strip[15] == 0x8000 | 15


def test_border_strip_skips_empty_top_rows():
    width = 4
    colors = [TRANSPARENT] * (width * 10)
    colors[1 * width + 1] = 0x8001
    strip = extract_border_strip(colors, width, 2, 10, 0)
    # Row 1 is the first visible one
    assert len(strip) == 9 * 2
    assert strip[1] == 0x8001

    # Rows 3-9 are kept even when empty
    colors[1 * width + 1] = TRANSPARENT
    assert len(extract_border_strip(colors, width, 2, 10, 0)) == 7 * 2


def test_border_strip_reads_claimed_pixels_as_transparent():
    colors = [0x8000 | i for i in range(8)]
    claimed = bytearray(8)
    claimed[0] = 1
    strip = extract_border_strip(colors, 4, 4, 2, 0, claimed)
    assert strip == [TRANSPARENT, 0x8001, 0x8002, 0x8003, 0x8004, 0x8005, 0x8006, 0x8007]


def test_single_cell_building():
    width, height = 30, 16
    colors = [0x8000 | i for i in range(width * height)]
    tiles = split_tiles(colors, width, height)
    assert len(tiles) == 1
    assert tiles[0].direction == DIRECTION_LEFT_EDGE


def test_image_too_short():
    with pytest.raises(OutOfBounds):
        split_tiles(unique_colors(WIDTH, 20), WIDTH, 20)


def test_length_mismatch():
    with pytest.raises(ValueError):
        split_tiles([0] * 10, WIDTH, HEIGHT)


def test_placement_context():
    context = PlacementContext(wrap_width=100)
    split_tiles(unique_colors(), WIDTH, HEIGHT, context)
    assert (context.x_offset, context.y_offset) == (60, 0)
    split_tiles(unique_colors(), WIDTH, HEIGHT, context)
    assert (context.x_offset, context.y_offset) == (0, 32)
    assert context.biggest_height == 32

    context.reset()
    assert (context.x_offset, context.y_offset, context.biggest_height) == (0, 0, 0)
