"""Glyph rasterizers: font metrics plus white-on-black glyph images.

The table builder only talks to the ``Rasterizer`` interface.  Two backends
are provided, one on top of Pillow's text drawing and one driving FreeType
directly through freetype-py.
"""

import sys
import unicodedata
from abc import ABC, abstractmethod

import freetype
from PIL import Image, ImageDraw, ImageFont

from .fontdb import FontIndex

# Point sizes are converted to pixels at this resolution.
DEFAULT_DPI = 96

FG_COLOR = (255, 255, 255)
BG_COLOR = (0, 0, 0)


def is_drawable(char):
    """Control characters are measured but never drawn."""
    return not unicodedata.category(char).startswith("C")


def point_to_pixels(size, dpi=DEFAULT_DPI):
    return max(1, round(size * dpi / 72))


def bitmap_value(bitmap, x, y):
    """Gray level 0..255 of a FreeType bitmap pixel.

    Bitmap-only fonts still hand back 1-bit strikes, packed eight pixels
    to a byte.
    """
    if bitmap.pixel_mode == freetype.FT_PIXEL_MODE_MONO:
        byte = bitmap.buffer[y * bitmap.pitch + x // 8]
        return 255 if byte & (0x80 >> (x % 8)) else 0
    return bitmap.buffer[y * bitmap.pitch + x]


class Rasterizer(ABC):
    """Metrics and rendering for a (font name, point size) pair."""

    @abstractmethod
    def line_height(self, name, size):
        """Vertical pixels allotted to every glyph of the font."""

    @abstractmethod
    def overline_offset(self, name, size):
        """Distance from the top of the line to the overline position."""

    @abstractmethod
    def advance_width(self, name, size, char):
        """Horizontal pixels the cursor moves after drawing ``char``."""

    @abstractmethod
    def render_glyph(self, name, size, char, baseline):
        """Draw ``char`` white on black with its baseline at row ``baseline``.

        The returned image is at least advance width x line height pixels.
        """


class PillowRasterizer(Rasterizer):
    """Rasterizer backed by ``PIL.ImageFont.truetype``.

    Unknown font names fall back to Pillow's bundled default font.
    """

    def __init__(self, index=None, dpi=DEFAULT_DPI):
        self.index = index if index is not None else FontIndex()
        self.dpi = dpi
        self._fonts = {}

    def font(self, name, size):
        key = (name, size)
        if key not in self._fonts:
            self._fonts[key] = self._load(name, size)
        return self._fonts[key]

    def _load(self, name, size):
        pixels = point_to_pixels(size, self.dpi)
        found = self.index.lookup(name)
        if found is None:
            print(f"Warning: font '{name}' not found, substituting the default font",
                  file=sys.stderr)
            return ImageFont.load_default(pixels)
        return ImageFont.truetype(found.path, pixels, index=found.index)

    def line_height(self, name, size):
        ascent, descent = self.font(name, size).getmetrics()
        return ascent + descent

    def overline_offset(self, name, size):
        ascent, _ = self.font(name, size).getmetrics()
        return ascent + 1

    def advance_width(self, name, size, char):
        return int(round(self.font(name, size).getlength(char)))

    def render_glyph(self, name, size, char, baseline):
        font = self.font(name, size)
        width = max(self.advance_width(name, size, char), 1)
        height = max(self.line_height(name, size), 1)
        image = Image.new("RGB", (width, height), BG_COLOR)
        if is_drawable(char):
            draw = ImageDraw.Draw(image)
            draw.text((0, baseline), char, font=font, fill=FG_COLOR, anchor="ls")
        return image


class FreetypeRasterizer(Rasterizer):
    """Rasterizer that loads and renders glyphs with FreeType directly.

    Unknown font names fall back to the first installed font.
    """

    def __init__(self, index=None, dpi=DEFAULT_DPI):
        self.index = index if index is not None else FontIndex()
        self.dpi = dpi
        self._faces = {}

    def face(self, name, size):
        key = (name, size)
        if key not in self._faces:
            self._faces[key] = self._load(name, size)
        return self._faces[key]

    def _load(self, name, size):
        found = self.index.lookup(name)
        if found is None:
            found = self.index.first()
            if found is None:
                raise FileNotFoundError(f"font '{name}' not found and no fonts are installed")
            print(f"Warning: font '{name}' not found, substituting {found.path}",
                  file=sys.stderr)
        face = freetype.Face(found.path, found.index)
        face.set_char_size(size * 64, 0, self.dpi, self.dpi)
        return face

    def _ascent_descent(self, name, size):
        metrics = self.face(name, size).size
        # 26.6 fixed point, rounded outwards
        return (metrics.ascender + 63) >> 6, (-metrics.descender + 63) >> 6

    def line_height(self, name, size):
        ascent, descent = self._ascent_descent(name, size)
        return ascent + descent

    def overline_offset(self, name, size):
        ascent, _ = self._ascent_descent(name, size)
        return ascent + 1

    def advance_width(self, name, size, char):
        face = self.face(name, size)
        face.load_char(char, freetype.FT_LOAD_DEFAULT | freetype.FT_LOAD_NO_BITMAP)
        return (face.glyph.advance.x + 32) >> 6

    def render_glyph(self, name, size, char, baseline):
        width = max(self.advance_width(name, size, char), 1)
        height = max(self.line_height(name, size), 1)
        img = Image.new("L", (width, height), 0)
        if not is_drawable(char):
            return img

        face = self.face(name, size)
        face.load_char(char, freetype.FT_LOAD_RENDER | freetype.FT_LOAD_NO_BITMAP)
        glyph = face.glyph
        bitmap = glyph.bitmap
        left = glyph.bitmap_left
        top = baseline - glyph.bitmap_top
        for y in range(bitmap.rows):
            for x in range(bitmap.width):
                px, py = left + x, top + y
                if 0 <= px < width and 0 <= py < height:
                    img.putpixel((px, py), bitmap_value(bitmap, x, y))
        return img


BACKENDS = {
    "pillow": PillowRasterizer,
    "freetype": FreetypeRasterizer,
}


def create_rasterizer(backend, **kwargs):
    try:
        factory = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"unknown rasterizer backend '{backend}'") from None
    return factory(**kwargs)
