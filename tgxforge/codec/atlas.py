# ==============================================================================
# ATLAS COMPOSITOR
# ==============================================================================
# Packs many decoded images into one preview image.
#
# Images are placed left to right in their original order. When the next
# image would reach past the atlas width, a new row starts below the
# tallest image of the current row. Pixels are copied as they are (no
# alpha blending), so the atlas shows exactly what was decoded.
#
# Usage:
#   atlas = compose_atlas(images, atlas_width=1000)
#   atlas.save("preview.png")
# ==============================================================================

from typing import List, NamedTuple, Sequence, Tuple

from PIL import Image


class AtlasLayout(NamedTuple):
    """
    Placement of every image in the atlas.

    Attributes:
        positions:    (x, y) of each image's top-left corner
        row_heights:  Height of each atlas row
        width:        Atlas width
        height:       Sum of row heights
    """
    positions: List[Tuple[int, int]]
    row_heights: List[int]
    width: int
    height: int


def layout_atlas(sizes: Sequence[Tuple[int, int]], atlas_width: int) -> AtlasLayout:
    """
    Compute where each image goes.

    Args:
        sizes: (width, height) of each image, in placement order
        atlas_width: Target atlas width

    Returns:
        AtlasLayout

    Raises:
        ValueError: If there is nothing to place
    """
    if not sizes:
        raise ValueError("No images to place in the atlas")

    positions: List[Tuple[int, int]] = []
    row_heights: List[int] = [0]
    x = 0
    y = 0

    for width, height in sizes:
        if x > 0 and x + width > atlas_width:
            y += row_heights[-1]
            row_heights.append(0)
            x = 0

        positions.append((x, y))
        x += width
        if height > row_heights[-1]:
            row_heights[-1] = height

    return AtlasLayout(positions, row_heights, atlas_width, sum(row_heights))


def compose_atlas(images: Sequence[Image.Image],
                  atlas_width: int,
                  background: Tuple[int, int, int, int] = (0, 0, 0, 0)) -> Image.Image:
    """
    Build the atlas image.

    Images wider than the atlas get a row of their own and are clipped
    at the right edge.

    Args:
        images: Decoded images, in placement order
        atlas_width: Width of the atlas in pixels
        background: RGBA color for uncovered pixels

    Returns:
        RGBA atlas image
    """
    layout = layout_atlas([img.size for img in images], atlas_width)

    atlas = Image.new('RGBA', (layout.width, layout.height), background)
    for img, position in zip(images, layout.positions):
        if img.mode != 'RGBA':
            img = img.convert('RGBA')
        atlas.paste(img, position)

    return atlas
