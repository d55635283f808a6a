# ==============================================================================
# PIXEL COLOR CODEC
# ==============================================================================
# Packs RGBA pixels into the archive's 16-bit color and back.
#
# PACKED LAYOUT:
# --------------
#   bit 15      opacity flag
#   bits 14-10  red   (top 5 bits of the 8-bit channel)
#   bits 9-5    green
#   bits 4-0    blue
#
# 0x7FFF is reserved as the transparency sentinel. An opaque pixel whose
# channels are all 0xF8+ packs to 0xFFFF, so an opaque color never collides
# with it.
# ==============================================================================

from typing import Tuple

# Reserved value for "fully transparent pixel"
TRANSPARENT = 0x7FFF

OPACITY_BIT = 0x8000

COLOR_MASK_RED = 0x7C00
COLOR_MASK_GREEN = 0x03E0
COLOR_MASK_BLUE = 0x001F


def encode_color(r: int, g: int, b: int, opaque: bool = True) -> int:
    """
    Pack an 8-bit RGB triple into a 16-bit archive color.

    Args:
        r, g, b: Channel values 0-255
        opaque: Set the opacity bit

    Returns:
        Packed 16-bit color
    """
    value = ((r >> 3) << 10) | ((g >> 3) << 5) | (b >> 3)
    if opaque:
        value |= OPACITY_BIT
    return value


def decode_color(value: int, smooth: bool = True) -> Tuple[int, int, int, int]:
    """
    Unpack a 16-bit archive color into RGBA.

    With ``smooth`` the high 3 bits of each 5-bit channel are copied into
    the empty low bits, so 0x1F expands to 255 instead of 248.

    Returns:
        (r, g, b, a) with a = 255 when the opacity bit is set, else 0
    """
    r = ((value & COLOR_MASK_RED) >> 10) << 3
    g = ((value & COLOR_MASK_GREEN) >> 5) << 3
    b = (value & COLOR_MASK_BLUE) << 3
    if smooth:
        r |= r >> 5
        g |= g >> 5
        b |= b >> 5
    a = 255 if value & OPACITY_BIT else 0
    return r, g, b, a
