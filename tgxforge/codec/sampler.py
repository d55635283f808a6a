# ==============================================================================
# RASTER SAMPLER
# ==============================================================================
# Converts between Pillow RGBA rasters and packed color sequences.
#
# Encode direction (sample_colors):
#   - Walks a rectangular region of the raster row by row
#   - Optional sub-sampling stride (1 = every pixel)
#   - Pixels with alpha 0 become the transparency sentinel
#   - Everything else is packed with the opacity policy of the data type
#
# Decode direction (render_colors):
#   - Expands a packed color sequence back into an RGBA image
#
# Both directions are vectorized with numpy; the raster is never modified.
# ==============================================================================

from typing import List, NamedTuple, Sequence

import numpy as np
from PIL import Image

from ..core.datatypes import is_opaque_type
from ..core.errors import OutOfBounds
from .color import (
    TRANSPARENT, OPACITY_BIT, COLOR_MASK_RED, COLOR_MASK_GREEN, COLOR_MASK_BLUE,
)


class SampledColors(NamedTuple):
    """Color sequence plus the dimensions it was sampled at."""
    colors: List[int]
    width: int
    height: int


def as_rgba_array(image) -> np.ndarray:
    """
    Get an (height, width, 4) uint8 view of a raster.

    Accepts a Pillow image in any mode or an RGBA numpy array.
    """
    if isinstance(image, np.ndarray):
        if image.ndim != 3 or image.shape[2] != 4:
            raise ValueError(f"Expected an (h, w, 4) array, got shape {image.shape}")
        return image.astype(np.uint8, copy=False)

    if image.mode != 'RGBA':
        image = image.convert('RGBA')
    return np.asarray(image, dtype=np.uint8)


def opacity_for(data_type, force_opaque: bool = False) -> bool:
    """Opacity policy: forced on by the caller or by the data type."""
    return bool(force_opaque) or is_opaque_type(data_type)


def sample_colors(image,
                  data_type=None,
                  width: int = 0,
                  height: int = 0,
                  stride: int = 1,
                  offset_x: int = 0,
                  offset_y: int = 0,
                  force_opaque: bool = False) -> SampledColors:
    """
    Sample a raster region into a packed color sequence.

    Args:
        image: Pillow image or (h, w, 4) array
        data_type: Asset category code, decides the opacity bit
        width: Region width, 0 = raster width
        height: Region height, 0 = raster height
        stride: Take every n-th pixel in both directions
        offset_x, offset_y: Top-left corner of the region
        force_opaque: Set the opacity bit regardless of data type

    Returns:
        SampledColors with ceil(width / stride) * ceil(height / stride) colors

    Raises:
        OutOfBounds: If the region reaches outside the raster
    """
    if stride < 1:
        raise ValueError(f"Sampling stride must be at least 1, got {stride}")

    pixels = as_rgba_array(image)
    raster_height, raster_width = pixels.shape[:2]

    if width == 0:
        width = raster_width
    if height == 0:
        height = raster_height

    if offset_x < 0 or offset_y < 0:
        raise OutOfBounds(f"Negative sampling offset ({offset_x}, {offset_y})",
                          offset_x, offset_y)
    if offset_x + width > raster_width or offset_y + height > raster_height:
        raise OutOfBounds(
            f"Region {width}x{height} at ({offset_x}, {offset_y}) exceeds "
            f"raster {raster_width}x{raster_height}",
            offset_x + width - 1, offset_y + height - 1)

    region = pixels[offset_y:offset_y + height:stride,
                    offset_x:offset_x + width:stride].astype(np.uint16)

    packed = ((region[..., 0] >> 3) << 10) | ((region[..., 1] >> 3) << 5) | (region[..., 2] >> 3)
    if opacity_for(data_type, force_opaque):
        packed |= OPACITY_BIT
    packed[region[..., 3] == 0] = TRANSPARENT

    return SampledColors(packed.ravel().tolist(), region.shape[1], region.shape[0])


def render_colors(colors: Sequence[int],
                  width: int,
                  height: int,
                  smooth: bool = True,
                  opaque: bool = False) -> Image.Image:
    """
    Expand a packed color sequence into an RGBA image.

    Args:
        colors: width * height packed colors, row-major
        smooth: Fill the low 3 bits of each channel from its high bits
        opaque: Treat every non-sentinel color as opaque, ignoring bit 15

    Returns:
        Pillow image in RGBA mode
    """
    if len(colors) != width * height:
        raise ValueError(f"Expected {width * height} colors, got {len(colors)}")

    values = np.asarray(colors, dtype=np.uint32).reshape((height, width))

    rgba = np.empty((height, width, 4), dtype=np.uint32)
    rgba[..., 0] = ((values & COLOR_MASK_RED) >> 10) << 3
    rgba[..., 1] = ((values & COLOR_MASK_GREEN) >> 5) << 3
    rgba[..., 2] = (values & COLOR_MASK_BLUE) << 3
    if smooth:
        rgba[..., :3] |= rgba[..., :3] >> 5

    if opaque:
        rgba[..., 3] = 255
    else:
        rgba[..., 3] = np.where(values & OPACITY_BIT, 255, 0)

    rgba[values == TRANSPARENT] = 0

    return Image.fromarray(rgba.astype(np.uint8))

