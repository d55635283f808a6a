# ==============================================================================
# ASSET CATEGORIES
# ==============================================================================
# Numeric category codes stored in a GM1 archive header.
#
# The pixel codec only cares about category membership in two places:
#   - Opacity policy: which categories always set the opacity bit
#   - Whole-row transparency: which categories write transparent-run
#     records for empty rows instead of a bare end-of-line marker
#
# Usage:
#   from tgxforge.core.datatypes import DataType, is_opaque_type
#   if is_opaque_type(DataType.ANIMATIONS): ...
# ==============================================================================

from enum import IntEnum


class DataType(IntEnum):
    """
    GM1 archive data types.

    Values match the codes found in the archive header, so a raw integer
    read from a file can be passed straight to ``DataType(code)``.
    """
    INTERFACE = 1
    ANIMATIONS = 2
    TILES_OBJECT = 3
    FONT = 4
    UNCOMPRESSED = 5
    TGX_CONST_SIZE = 6
    UNCOMPRESSED_ALT = 7


# Categories whose pixels always carry the opacity bit
OPAQUE_TYPES = frozenset({
    DataType.TILES_OBJECT,
    DataType.ANIMATIONS,
    DataType.TGX_CONST_SIZE,
    DataType.UNCOMPRESSED,
    DataType.UNCOMPRESSED_ALT,
    DataType.INTERFACE,
})

# Categories that write transparent-run records for fully empty rows
TRANSPARENT_ROW_TYPES = frozenset({
    DataType.TGX_CONST_SIZE,
    DataType.TILES_OBJECT,
    DataType.INTERFACE,
})


def is_opaque_type(data_type) -> bool:
    """Check whether a category code forces the opacity bit on."""
    return _coerce(data_type) in OPAQUE_TYPES


def writes_transparent_rows(data_type) -> bool:
    """Check whether a category code emits transparent runs for empty rows."""
    return _coerce(data_type) in TRANSPARENT_ROW_TYPES


def _coerce(data_type):
    # Unknown codes are allowed; they simply belong to neither set
    try:
        return DataType(int(data_type))
    except (TypeError, ValueError):
        return None
