import pytest
from PIL import Image

from tgxforge.codec.atlas import layout_atlas, compose_atlas


def test_layout_wraps_rows():
    layout = layout_atlas([(500, 100), (500, 150), (200, 120)], 900)
    assert layout.positions == [(0, 0), (0, 100), (500, 100)]
    assert layout.row_heights == [100, 150]
    assert (layout.width, layout.height) == (900, 250)


def test_exact_fit_stays_on_row():
    layout = layout_atlas([(400, 10), (500, 20)], 900)
    assert layout.positions == [(0, 0), (400, 0)]
    assert layout.height == 20


def test_oversized_image_gets_own_row():
    layout = layout_atlas([(1200, 10), (50, 10)], 900)
    assert layout.positions == [(0, 0), (0, 10)]


def test_empty_layout():
    with pytest.raises(ValueError):
        layout_atlas([], 900)


def test_compose_copies_pixels():
    red = Image.new('RGBA', (4, 3), (255, 0, 0, 255))
    ghost = Image.new('RGBA', (4, 5), (0, 0, 255, 100))
    atlas = compose_atlas([red, ghost], 6)

    assert atlas.size == (6, 8)
    assert atlas.getpixel((0, 0)) == (255, 0, 0, 255)
    assert atlas.getpixel((5, 0)) == (0, 0, 0, 0)
    # No blending with the background
    assert atlas.getpixel((1, 4)) == (0, 0, 255, 100)
