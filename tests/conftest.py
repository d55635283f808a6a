import pytest
from PIL import Image


def image_from_pixels(pixels, width, height):
    """Build an RGBA image from a flat list of (r, g, b, a) tuples."""
    img = Image.new('RGBA', (width, height))
    img.putdata(pixels)
    return img


@pytest.fixture
def gradient_image():
    """A 40x12 opaque image with repeats, pairs and unique pixels."""
    width, height = 40, 12
    pixels = []
    for y in range(height):
        for x in range(width):
            if x % 10 < 4:
                # 4-pixel repeats
                pixels.append((200, 40 + y * 8, 16, 255))
            else:
                pixels.append(((x * 6) % 256, (y * 20) % 256, (x * y) % 256, 255))
    return image_from_pixels(pixels, width, height)
