# ==============================================================================
# CONVERTER
# ==============================================================================
# High-level image conversion. This is the boundary of the codec: every
# function here returns a ConversionResult, and codec failures end up in
# ``result.errors`` instead of propagating to the caller.
#
# Operations:
#   - encode_image:         RGBA image -> TGX pixel stream
#   - decode_image:         TGX pixel stream -> RGBA image
#   - read_tgx / write_tgx: Loose .tgx files on disk
#   - split_image_to_tiles: Building diamond -> tiled object parts
#   - build_atlas:          Decoded images -> one preview image
#
# Usage:
#   result = encode_image(img, DataType.ANIMATIONS)
#   if result.success:
#       archive.write(result.data)
#   else:
#       for error in result.errors:
#           print(error)
# ==============================================================================

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from PIL import Image

from ..core.datatypes import DataType
from ..core.errors import TGXError
from .atlas import compose_atlas
from .palette import PaletteIndexer, PaletteTable
from .rle import decode_colors, encode_colors, record_stats
from .sampler import render_colors, sample_colors
from .tgx_file import TGXFile
from .tiles import PlacementContext, TileRecord, split_tiles


# ==============================================================================
# DATA CLASSES
# ==============================================================================

@dataclass
class ConversionResult:
    """
    Result of a conversion.

    Attributes:
        success (bool):     Whether the conversion finished
        data (bytes):       Encoded stream (encode)
        image (Image):      Decoded or composed image (decode, atlas)
        tiles (list):       TileRecords (tile split)
        width (int):        Image width
        height (int):       Image height
        errors (list):      TGXError instances that aborted the conversion
        warnings (list):    Non-fatal events, e.g. palette lookups
    """
    success: bool = False
    data: bytes = b""
    image: Optional[Image.Image] = None
    tiles: List[TileRecord] = field(default_factory=list)
    width: int = 0
    height: int = 0
    errors: List[Exception] = field(default_factory=list)
    warnings: List[object] = field(default_factory=list)

    def fail(self, error: Exception) -> 'ConversionResult':
        print(f"[ERROR] {type(error).__name__}: {error}")
        self.success = False
        self.errors.append(error)
        return self


def _report_warnings(result: ConversionResult, debug: bool):
    if not result.warnings:
        return
    print(f"[WARN] {len(result.warnings)} palette lookups could not be resolved uniquely")
    if debug:
        for event in result.warnings:
            print(f"[DEBUG]   {event}")


# ==============================================================================
# ENCODE / DECODE
# ==============================================================================

def encode_image(image,
                 data_type=DataType.ANIMATIONS,
                 width: int = 0,
                 height: int = 0,
                 stride: int = 1,
                 offset_x: int = 0,
                 offset_y: int = 0,
                 force_opaque: bool = False,
                 animated: bool = True,
                 palette: Optional[PaletteTable] = None,
                 reference_images: Optional[Sequence] = None,
                 debug: bool = False) -> ConversionResult:
    """
    Encode an RGBA image (or a region of it) into a TGX pixel stream.

    Args:
        image: Pillow image
        data_type: Asset category code
        width, height: Region size, 0 = whole image
        stride: Sub-sampling step
        offset_x, offset_y: Region origin
        force_opaque: Set the opacity bit on every pixel
        animated: When False, bit 15 is forced on in the stream
        palette: Write 1-byte palette indices instead of colors
        reference_images: 9 images of the same artwork in the alternate
                          palette colors, used to pick between duplicate
                          palette slots
        debug: Print stream statistics

    Returns:
        ConversionResult with ``data``, ``width``, ``height``, ``warnings``
    """
    result = ConversionResult()

    try:
        sampled = sample_colors(image, data_type, width, height, stride,
                                offset_x, offset_y, force_opaque)

        indexer = None
        if palette is not None:
            references = None
            if reference_images is not None:
                references = [
                    sample_colors(ref, data_type, width, height, stride,
                                  offset_x, offset_y, force_opaque).colors
                    for ref in reference_images
                ]
            indexer = PaletteIndexer(palette, references)

        result.data = encode_colors(sampled.colors, sampled.width, sampled.height,
                                    data_type=data_type, animated=animated,
                                    indexer=indexer)
    except (TGXError, ValueError) as e:
        return result.fail(e)

    result.width = sampled.width
    result.height = sampled.height
    if indexer is not None:
        result.warnings.extend(indexer.events)
        _report_warnings(result, debug)

    if debug:
        stats = record_stats(result.data, indexed=indexer is not None)
        print(f"[DEBUG] Encoded {result.width}x{result.height} into "
              f"{len(result.data)} bytes, records by kind: {stats}")

    result.success = True
    return result


def decode_image(data: bytes,
                 width: int,
                 height: int,
                 palette: Optional[PaletteTable] = None,
                 smooth: bool = True,
                 opaque: bool = False) -> ConversionResult:
    """
    Decode a TGX pixel stream into an RGBA image.

    Args:
        data: Encoded stream
        width, height: Image size
        palette: Resolve 1-byte indices through the palette's active table
        smooth: Fill the low bits of each channel
        opaque: Show every non-transparent pixel, whatever its bit 15

    Returns:
        ConversionResult with ``image``
    """
    result = ConversionResult(width=width, height=height)

    try:
        colors = decode_colors(data, width, height, palette)
        result.image = render_colors(colors, width, height, smooth, opaque)
    except (TGXError, ValueError) as e:
        return result.fail(e)

    result.success = True
    return result


# ==============================================================================
# FILES
# ==============================================================================

def read_tgx(filepath: str, smooth: bool = True, opaque: bool = False) -> ConversionResult:
    """Load and decode a loose .tgx file."""
    try:
        tgx = TGXFile.load(filepath)
    except (TGXError, OSError) as e:
        return ConversionResult().fail(e)

    result = decode_image(tgx.data, tgx.width, tgx.height, smooth=smooth, opaque=opaque)
    result.data = tgx.data
    return result


def write_tgx(image, filepath: str, data_type=DataType.ANIMATIONS, **options) -> ConversionResult:
    """Encode an image and save it as a loose .tgx file."""
    result = encode_image(image, data_type, **options)
    if not result.success:
        return result

    try:
        TGXFile(result.width, result.height, result.data).save(filepath)
    except OSError as e:
        return result.fail(e)

    print(f"[INFO] Wrote {filepath} ({result.width}x{result.height}, {len(result.data)} bytes)")
    return result


# ==============================================================================
# TILES AND ATLAS
# ==============================================================================

def split_image_to_tiles(image, context: Optional[PlacementContext] = None) -> ConversionResult:
    """
    Split a building diamond image into tiled object parts.

    Args:
        image: Pillow image of the whole building
        context: Sheet placement state shared by consecutive buildings

    Returns:
        ConversionResult with ``tiles``
    """
    result = ConversionResult()

    try:
        sampled = sample_colors(image, DataType.TILES_OBJECT)
        result.tiles = split_tiles(sampled.colors, sampled.width, sampled.height, context)
    except (TGXError, ValueError) as e:
        return result.fail(e)

    result.width = sampled.width
    result.height = sampled.height
    result.success = True
    return result


def build_atlas(images: Sequence[Image.Image], atlas_width: int) -> ConversionResult:
    """Lay decoded images out on one preview image."""
    result = ConversionResult()

    try:
        result.image = compose_atlas(images, atlas_width)
    except ValueError as e:
        return result.fail(e)

    result.width, result.height = result.image.size
    result.success = True
    return result
