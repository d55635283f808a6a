# ==============================================================================
# CORE MODULE INIT
# ==============================================================================
# Shared building blocks for TGX Forge.
#
# This package contains:
#   - DataType: GM1 asset category codes and their policy sets
#   - Errors: Codec exceptions and palette warning records
#   - Config: Application configuration management
#
# Usage:
#   from tgxforge.core import DataType, MalformedStream
#   from tgxforge.core.config import get_config
# ==============================================================================

from .datatypes import (
    DataType, OPAQUE_TYPES, TRANSPARENT_ROW_TYPES,
    is_opaque_type, writes_transparent_rows,
)
from .errors import (
    TGXError, OutOfBounds, MalformedStream, PaletteError,
    PaletteLookupAmbiguous, PaletteLookupMissing,
)
from .config import Config, get_config

__all__ = [
    # Data types
    'DataType',
    'OPAQUE_TYPES',
    'TRANSPARENT_ROW_TYPES',
    'is_opaque_type',
    'writes_transparent_rows',

    # Errors
    'TGXError',
    'OutOfBounds',
    'MalformedStream',
    'PaletteError',
    'PaletteLookupAmbiguous',
    'PaletteLookupMissing',

    # Configuration
    'Config',
    'get_config',
]
