# ==============================================================================
# CODEC MODULE
# ==============================================================================
# Pixel codec for Stronghold GM1/TGX images.
#
# Components:
#   - color:     16-bit packed color <-> RGBA
#   - sampler:   Pillow raster <-> packed color sequence
#   - palette:   10-table archive palettes and index lookup
#   - rle:       Run-length pixel stream encoder/decoder
#   - tiles:     Building diamond -> tiled object parts
#   - atlas:     Preview image from many decoded images
#   - tgx_file:  Loose .tgx files
#   - converter: ConversionResult facade over all of the above
# ==============================================================================

from .color import TRANSPARENT, encode_color, decode_color
from .sampler import SampledColors, sample_colors, render_colors
from .palette import PaletteTable, PaletteIndexer, PALETTE_SIZE
from .rle import encode_colors, decode_colors, iter_records, Record
from .tiles import (
    TileRecord, PlacementContext, split_tiles, extract_border_strip, diamond_width,
    tile_colors,
)
from .atlas import AtlasLayout, layout_atlas, compose_atlas
from .tgx_file import TGXFile
from .converter import (
    ConversionResult, encode_image, decode_image, read_tgx, write_tgx,
    split_image_to_tiles, build_atlas,
)

__all__ = [
    # Colors
    'TRANSPARENT', 'encode_color', 'decode_color',

    # Sampling
    'SampledColors', 'sample_colors', 'render_colors',

    # Palette
    'PaletteTable', 'PaletteIndexer', 'PALETTE_SIZE',

    # Run-length codec
    'encode_colors', 'decode_colors', 'iter_records', 'Record',

    # Tiles
    'TileRecord', 'PlacementContext', 'split_tiles', 'extract_border_strip',
    'diamond_width', 'tile_colors',

    # Atlas
    'AtlasLayout', 'layout_atlas', 'compose_atlas',

    # Files and facade
    'TGXFile', 'ConversionResult', 'encode_image', 'decode_image',
    'read_tgx', 'write_tgx', 'split_image_to_tiles', 'build_atlas',
]
