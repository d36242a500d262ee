import pytest
from PIL import Image

from font2table.rasterizer import Rasterizer


class StubRasterizer(Rasterizer):
    """Deterministic rasterizer: fixed metrics, gradient glyph images.

    ``padding`` makes rendered buffers larger than the measured glyph cell.
    """

    def __init__(self, line_heights=None, widths=None, default_width=4, padding=0):
        self.line_heights = line_heights or {}
        self.widths = widths or {}
        self.default_width = default_width
        self.padding = padding
        self.rendered = []

    def line_height(self, name, size):
        return self.line_heights.get((name, size), 7)

    def overline_offset(self, name, size):
        return self.line_height(name, size) - 1

    def advance_width(self, name, size, char):
        return self.widths.get(char, self.default_width)

    def render_glyph(self, name, size, char, baseline):
        self.rendered.append((name, size, char, baseline))
        width = self.advance_width(name, size, char) + self.padding
        height = self.line_height(name, size) + self.padding
        img = Image.new("RGB", (width, height))
        for y in range(height):
            for x in range(width):
                value = (ord(char) * 7 + x * 31 + y * 17) % 256
                img.putpixel((x, y), (value, 255 - value, value // 2))
        return img


@pytest.fixture
def stub():
    return StubRasterizer()


def _square(pen, left, bottom, right, top):
    pen.moveTo((left, bottom))
    pen.lineTo((left, top))
    pen.lineTo((right, top))
    pen.lineTo((right, bottom))
    pen.closePath()


def build_test_font(path, family="Test Sans", style="Regular"):
    """Write a tiny TrueType font: 'A' is a filled square, space is empty."""
    from fontTools.fontBuilder import FontBuilder
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "space", "A"])
    fb.setupCharacterMap({32: "space", 65: "A"})

    pen = TTGlyphPen(None)
    _square(pen, 100, 0, 500, 700)
    square = pen.glyph()
    glyphs = {".notdef": square, "space": TTGlyphPen(None).glyph(), "A": square}
    fb.setupGlyf(glyphs)

    widths = {".notdef": 600, "space": 500, "A": 600}
    glyf = fb.font["glyf"]
    fb.setupHorizontalMetrics({name: (w, getattr(glyf[name], "xMin", 0)) for name, w in widths.items()})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({
        "familyName": family,
        "styleName": style,
        "uniqueFontIdentifier": f"{family}-{style}",
        "fullName": f"{family} {style}",
        "psName": f"{family.replace(' ', '')}-{style}",
        "version": "Version 1.0",
    })
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.save(str(path))
    return path


@pytest.fixture(scope="session")
def font_dir(tmp_path_factory):
    directory = tmp_path_factory.mktemp("fonts")
    build_test_font(directory / "TestSans-Regular.ttf")
    build_test_font(directory / "TestSans-Bold.ttf", style="Bold")
    return directory
