"""Turn a rendered glyph image into a grid of pixel intensities."""

from .model import CEILING

BLACK = (0, 0, 0)


def _clamp(value):
    return min(max(int(value), 0), 255)


def normalize(pixel, ceiling=CEILING):
    """Map an (r, g, b) pixel to 0..ceiling by its mean channel value."""
    red, green, blue = (_clamp(c) for c in pixel[:3])
    scale = 3 * 255
    # round half up without going through floats
    return ((red + green + blue) * ceiling * 2 + scale) // (scale * 2)


def sample(image, width, height, ceiling=CEILING):
    """Sample the top-left width x height region of a white-on-black glyph.

    The grid always has exactly ``height`` rows of ``width`` values.  Pixels
    outside the image buffer count as black.
    """
    if width <= 0 or height <= 0:
        return [[] for _ in range(max(height, 0))]

    if image.mode != "RGB":
        image = image.convert("RGB")
    pixels = image.load()
    image_width, image_height = image.size

    grid = []
    for y in range(height):
        row = []
        for x in range(width):
            if x < image_width and y < image_height:
                row.append(normalize(pixels[x, y], ceiling))
            else:
                row.append(normalize(BLACK, ceiling))
        grid.append(row)
    return grid
