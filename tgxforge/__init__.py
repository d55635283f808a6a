# ==============================================================================
# TGX FORGE - SOURCE PACKAGE
# ==============================================================================
# Image converter for Stronghold GM1/TGX graphics.
#
# Subpackages:
#   - core: Data types, error types, configuration
#   - codec: Pixel codec, palettes, tile splitting, atlas preview
#
# Entry points:
#   - main.py: CLI launcher
#   - tgxforge/cli.py: Command-line interface
# ==============================================================================

__version__ = "1.0.0"
__description__ = "Stronghold GM1/TGX image converter"

# Convenience imports
from .core import DataType, TGXError, Config, get_config
from .codec import (
    PaletteTable, ConversionResult, encode_image, decode_image,
    split_image_to_tiles, build_atlas,
)

__all__ = [
    '__version__',
    '__description__',

    # Core
    'DataType',
    'TGXError',
    'Config',
    'get_config',

    # Codec
    'PaletteTable',
    'ConversionResult',
    'encode_image',
    'decode_image',
    'split_image_to_tiles',
    'build_atlas',
]
