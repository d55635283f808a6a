# ==============================================================================
# ERROR TYPES
# ==============================================================================
# Failure classification for the pixel codec.
#
# Fatal errors (abort the current image):
#   - OutOfBounds:      sampling coordinates outside the raster
#   - MalformedStream:  encoded bytes inconsistent with the image size
#   - PaletteError:     palette table with the wrong shape
#
# Non-fatal events (encoding continues with a best-effort index):
#   - PaletteLookupAmbiguous: several palette slots share the color
#   - PaletteLookupMissing:   the color is not in the palette at all
#
# The codec raises the fatal ones. The converter facade turns them into
# a ConversionResult so callers never see a raw traceback.
# ==============================================================================

from dataclasses import dataclass


class TGXError(Exception):
    """Base class for all codec failures."""


class OutOfBounds(TGXError):
    """Sampling or tiling touched a pixel outside the raster."""

    def __init__(self, message: str, x: int = -1, y: int = -1):
        super().__init__(message)
        self.x = x
        self.y = y


class MalformedStream(TGXError):
    """Encoded data does not match the declared image geometry."""

    def __init__(self, message: str, offset: int = -1):
        if offset >= 0:
            message = f"{message} (at byte {offset})"
        super().__init__(message)
        self.offset = offset


class PaletteError(TGXError):
    """A palette table does not hold 10 tables of 256 colors."""


@dataclass(frozen=True)
class PaletteLookupAmbiguous:
    """
    Disambiguation ran out of reference tables without a unique match.

    Attributes:
        color:       Packed color that was looked up
        position:    Pixel position in the color sequence
        index:       Index that was used anyway
        candidates:  Number of matching slots in the primary table
    """
    color: int
    position: int
    index: int
    candidates: int

    def __str__(self) -> str:
        return (f"Ambiguous palette match for 0x{self.color:04X} at pixel "
                f"{self.position}: {self.candidates} candidates, using {self.index}")


@dataclass(frozen=True)
class PaletteLookupMissing:
    """The color is not in the primary palette table; index 0 was used."""
    color: int
    position: int
    index: int = 0

    def __str__(self) -> str:
        return (f"Color 0x{self.color:04X} at pixel {self.position} "
                f"not found in palette, using {self.index}")
