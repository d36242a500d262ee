"""Build the nested font table and write it out as a C array initializer.

Assembly and formatting are separate: ``TableBuilder`` collects a
``FontTable`` tree glyph by glyph, then ``format_table`` turns the finished
tree into text in a single pass.
"""

from .model import CharacterRange, FontBlock, FontTable, GlyphEntry
from .sampler import sample

INDENT = "\t"


class TableBuilder:
    """Incrementally assemble a FontTable from rasterizer output.

    Closed blocks and the closed table are frozen records; only the block
    being filled is mutable.
    """

    def __init__(self, rasterizer):
        self.rasterizer = rasterizer
        self.element_type = None
        self.name = None
        self.char_range = None
        self.blocks = []
        self._opened = False
        self._closed = False
        self._request = None
        self._line_height = None
        self._baseline = None
        self._glyphs = None

    def open_table(self, element_type, name):
        if self._opened:
            raise RuntimeError("table is already open")
        if not element_type or not name:
            raise ValueError("element type and table name must not be empty")
        self.element_type = element_type
        self.name = name
        self._opened = True

    def open_font_block(self, request, char_range):
        """Start a block for one font request and return its line height."""
        if not self._opened or self._closed:
            raise RuntimeError("no open table")
        if self._request is not None:
            raise RuntimeError(f"font block '{self._request.name}' is still open")
        if self.char_range is None:
            self.char_range = char_range
        elif char_range != self.char_range:
            raise ValueError("all font blocks in a table must share one character range")

        line_height = self.rasterizer.line_height(request.name, request.size)
        overline = self.rasterizer.overline_offset(request.name, request.size)
        # one pixel above the overline keeps ascenders inside the cell
        self._baseline = overline - 1
        self._line_height = line_height
        self._request = request
        self._glyphs = []
        return line_height

    def _next_code(self):
        return self.char_range.first + len(self._glyphs)

    def add_glyph(self, code):
        if self._request is None:
            raise RuntimeError("no open font block")
        expected = self._next_code()
        if code != expected:
            raise RuntimeError(f"expected character {expected}, got {code}")

        name, size = self._request.name, self._request.size
        char = chr(code)
        image = self.rasterizer.render_glyph(name, size, char, self._baseline)
        width = self.rasterizer.advance_width(name, size, char)
        grid = sample(image, width, self._line_height)
        entry = GlyphEntry(code, width, tuple(tuple(row) for row in grid))
        self._glyphs.append(entry)
        return entry

    def close_font_block(self):
        if self._request is None:
            raise RuntimeError("no open font block")
        last = self.char_range.last
        if self._next_code() != last + 1:
            raise RuntimeError(
                f"font block '{self._request.name}' is missing characters "
                f"{self._next_code()}..{last}")
        block = FontBlock(self._request.name, self._request.size, self._line_height,
                          self.char_range.first, last, tuple(self._glyphs))
        self.blocks.append(block)
        self._request = None
        self._line_height = None
        self._baseline = None
        self._glyphs = None
        return block

    def close_table(self):
        if not self._opened or self._closed:
            raise RuntimeError("no open table")
        if self._request is not None:
            raise RuntimeError(f"font block '{self._request.name}' is still open")
        self._closed = True
        return FontTable(self.element_type, self.name, tuple(self.blocks))


def build_table(rasterizer, char_range, element_type, name, requests, progress=None):
    """Render every character of the range for every font request.

    ``progress`` is called with each request just before its block is rendered.
    """
    if not isinstance(char_range, CharacterRange):
        char_range = CharacterRange(*char_range)

    builder = TableBuilder(rasterizer)
    builder.open_table(element_type, name)
    for request in requests:
        if progress is not None:
            progress(request)
        builder.open_font_block(request, char_range)
        for code in char_range.codes():
            builder.add_glyph(code)
        builder.close_font_block()
    return builder.close_table()


def c_string(text):
    """Quote text as a C string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    escaped = "".join(c if 32 <= ord(c) < 127 else f"\\x{ord(c):02x}" for c in escaped)
    return f'"{escaped}"'


def char_comment(code):
    """Only printable ASCII is quoted, so the output stays plain ASCII."""
    if 32 <= code < 127 and chr(code) not in "*/\\":
        return f"/* {code} '{chr(code)}' */"
    return f"/* {code} */"


def _lines(table):
    yield f"{table.element_type} {table.name} ="
    yield "{"
    for block in table.blocks:
        yield INDENT + "{"
        yield INDENT * 2 + c_string(block.name) + ","
        yield INDENT * 2 + f"{block.size},"
        yield INDENT * 2 + f"{block.line_height},"
        yield INDENT * 2 + f"{block.first},"
        yield INDENT * 2 + f"{block.last},"
        yield INDENT * 2 + "{"
        for glyph in block.glyphs:
            yield INDENT * 3 + "{ " + char_comment(glyph.code)
            yield INDENT * 4 + f"{glyph.advance_width},"
            yield INDENT * 4 + "{"
            for row in glyph.grid:
                yield INDENT * 5 + "".join(f"{value}," for value in row)
            yield INDENT * 4 + "}"
            yield INDENT * 3 + "},"
        yield INDENT * 2 + "}"
        yield INDENT + "},"
    yield "};"


def format_table(table):
    return "\n".join(_lines(table)) + "\n"


def write_table(table, stream):
    """Write the whole table with one write call."""
    stream.write(format_table(table))
