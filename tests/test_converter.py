from PIL import Image

from tgxforge.codec.converter import (
    encode_image, decode_image, read_tgx, write_tgx, split_image_to_tiles, build_atlas,
)
from tgxforge.codec.palette import PaletteTable
from tgxforge.codec.tgx_file import TGXFile
from tgxforge.codec.tiles import PlacementContext
from tgxforge.core.datatypes import DataType
from tgxforge.core.errors import MalformedStream, OutOfBounds, PaletteError, PaletteLookupMissing

from conftest import image_from_pixels


def assert_close(decoded, original):
    for got, want in zip(decoded.getdata(), original.getdata()):
        if want[3] == 0:
            assert got == (0, 0, 0, 0)
        else:
            assert all(abs(g - w) <= 7 for g, w in zip(got[:3], want[:3]))
            assert got[3] == 255


def test_encode_then_decode(gradient_image):
    img = gradient_image.copy()
    img.putpixel((0, 0), (10, 10, 10, 0))

    encoded = encode_image(img, DataType.ANIMATIONS)
    assert encoded.success
    assert (encoded.width, encoded.height) == (40, 12)
    assert encoded.errors == []

    decoded = decode_image(encoded.data, encoded.width, encoded.height)
    assert decoded.success
    assert decoded.image.size == (40, 12)
    assert_close(decoded.image, img)


def test_encode_region_out_of_bounds(gradient_image):
    result = encode_image(gradient_image, width=50)
    assert not result.success
    assert isinstance(result.errors[0], OutOfBounds)
    assert result.data == b""


def test_decode_malformed_stream():
    result = decode_image(bytes([0x60]), 4, 4)
    assert not result.success
    assert result.image is None
    assert isinstance(result.errors[0], MalformedStream)


def test_palette_warnings(gradient_image):
    # The grayscale default palette lacks most colors of the image
    result = encode_image(gradient_image, DataType.ANIMATIONS, palette=PaletteTable())
    assert result.success
    assert len(result.data) > 0
    assert result.warnings
    assert isinstance(result.warnings[0], PaletteLookupMissing)


def test_tgx_file_round_trip(tmp_path, gradient_image):
    path = str(tmp_path / "image.tgx")
    written = write_tgx(gradient_image, path, DataType.INTERFACE)
    assert written.success

    tgx = TGXFile.load(path)
    assert (tgx.width, tgx.height) == (40, 12)
    assert tgx.data == written.data

    loaded = read_tgx(path)
    assert loaded.success
    assert loaded.data == written.data
    assert_close(loaded.image, gradient_image)


def test_read_tgx_errors(tmp_path):
    missing = read_tgx(str(tmp_path / "missing.tgx"))
    assert not missing.success
    assert isinstance(missing.errors[0], OSError)

    short = tmp_path / "short.tgx"
    short.write_bytes(b"\x01\x00")
    result = read_tgx(str(short))
    assert isinstance(result.errors[0], MalformedStream)


def test_split_image_to_tiles():
    img = Image.new('RGBA', (60, 32), (200, 100, 50, 255))
    context = PlacementContext()
    result = split_image_to_tiles(img, context)
    assert result.success
    assert len(result.tiles) == 4
    assert context.x_offset == 60

    short = split_image_to_tiles(Image.new('RGBA', (60, 20)))
    assert not short.success
    assert isinstance(short.errors[0], OutOfBounds)


def test_build_atlas():
    images = [Image.new('RGBA', (10, 10)), Image.new('RGBA', (10, 20))]
    result = build_atlas(images, 15)
    assert result.success
    assert (result.width, result.height) == (15, 30)

    assert not build_atlas([], 15).success


def packed_pixel(value):
    """RGBA pixel that samples back to the opaque packed ``value``."""
    return (((value >> 10) & 0x1F) << 3, ((value >> 5) & 0x1F) << 3, (value & 0x1F) << 3, 255)


def test_encode_with_reference_images():
    # Primary slots 10 and 20 share a color; alternate table n holds 0x8000 | n << 10 | slot
    primary = [0x8000 | i for i in range(256)]
    primary[20] = primary[10]
    tables = [primary] + [[0x8000 | (n << 10) | i for i in range(256)] for n in range(1, 10)]
    palette = PaletteTable(tables)

    unique, shared = primary[1], primary[10]
    source = image_from_pixels(
        [packed_pixel(v) for v in (unique, shared, unique, shared, shared, shared)], 6, 1)

    # Slot each pixel has in the alternate artwork
    slots = [1, 20, 1, 20, 10, 20]
    references = [
        image_from_pixels([packed_pixel(tables[n][s]) for s in slots], 6, 1)
        for n in range(1, 10)
    ]

    result = encode_image(source, DataType.ANIMATIONS, palette=palette,
                          reference_images=references)
    assert result.success
    assert result.warnings == []
    # Stream of 3, then a repeat of 3 resolved at the run's second pixel
    assert result.data == bytes([0x02, 1, 20, 1, 0x42, 10, 0x80])


def test_reference_images_smaller_than_source():
    source = Image.new('RGBA', (8, 8), (255, 0, 0, 255))
    references = [Image.new('RGBA', (2, 2))] * 9
    result = encode_image(source, DataType.ANIMATIONS, palette=PaletteTable(),
                          reference_images=references)
    assert not result.success
    assert isinstance(result.errors[0], PaletteError)
    assert result.data == b""
