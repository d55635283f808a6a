import numpy as np
import pytest

from tgxforge.codec.color import TRANSPARENT, encode_color
from tgxforge.codec.sampler import sample_colors, render_colors
from tgxforge.core.datatypes import DataType
from tgxforge.core.errors import OutOfBounds

from conftest import image_from_pixels


RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 128)
CLEAR = (12, 34, 56, 0)


def small_image():
    return image_from_pixels([RED, CLEAR, BLUE,
                              BLUE, RED, CLEAR], 3, 2)


def test_opaque_category_sets_bit_15():
    sampled = sample_colors(small_image(), DataType.ANIMATIONS)
    assert sampled.width == 3 and sampled.height == 2
    assert sampled.colors == [
        encode_color(255, 0, 0), TRANSPARENT, encode_color(0, 0, 255),
        encode_color(0, 0, 255), encode_color(255, 0, 0), TRANSPARENT,
    ]


def test_font_category_leaves_bit_15_clear():
    sampled = sample_colors(small_image(), DataType.FONT)
    assert sampled.colors[0] == encode_color(255, 0, 0, opaque=False)
    assert sampled.colors[1] == TRANSPARENT

    forced = sample_colors(small_image(), DataType.FONT, force_opaque=True)
    assert forced.colors[0] == encode_color(255, 0, 0)


def test_unknown_category_leaves_bit_15_clear():
    sampled = sample_colors(small_image(), 42)
    assert sampled.colors[0] == encode_color(255, 0, 0, opaque=False)


def test_stride_and_region():
    pixels = [(x * 10, y * 10, 0, 255) for y in range(5) for x in range(5)]
    img = image_from_pixels(pixels, 5, 5)

    sampled = sample_colors(img, DataType.ANIMATIONS, stride=2)
    assert (sampled.width, sampled.height) == (3, 3)
    assert sampled.colors[1] == encode_color(20, 0, 0)
    assert sampled.colors[3] == encode_color(0, 20, 0)

    region = sample_colors(img, DataType.ANIMATIONS, width=2, height=1, offset_x=3, offset_y=4)
    assert region.colors == [encode_color(30, 40, 0), encode_color(40, 40, 0)]


def test_accepts_numpy_array():
    arr = np.zeros((2, 4, 4), dtype=np.uint8)
    arr[..., 3] = 255
    sampled = sample_colors(arr, DataType.INTERFACE)
    assert sampled.colors == [0x8000] * 8


def test_region_outside_raster():
    with pytest.raises(OutOfBounds):
        sample_colors(small_image(), width=3, height=2, offset_x=1)
    with pytest.raises(OutOfBounds):
        sample_colors(small_image(), offset_y=-1)
    with pytest.raises(ValueError):
        sample_colors(small_image(), stride=0)


def test_raster_is_not_modified():
    img = small_image()
    before = list(img.getdata())
    sample_colors(img, DataType.ANIMATIONS)
    assert list(img.getdata()) == before


def test_render_colors():
    colors = [encode_color(255, 0, 0), TRANSPARENT, encode_color(0, 255, 0, opaque=False)]
    img = render_colors(colors, 3, 1)
    assert img.mode == 'RGBA'
    assert img.getpixel((0, 0)) == (255, 0, 0, 255)
    assert img.getpixel((1, 0)) == (0, 0, 0, 0)
    assert img.getpixel((2, 0)) == (0, 255, 0, 0)

    shown = render_colors(colors, 3, 1, opaque=True)
    assert shown.getpixel((1, 0)) == (0, 0, 0, 0)
    assert shown.getpixel((2, 0)) == (0, 255, 0, 255)

    with pytest.raises(ValueError):
        render_colors(colors, 2, 2)
