"""Records passed between the sampler, the rasterizer and the table builder."""

from dataclasses import dataclass
from typing import Tuple

# Largest intensity a sampled pixel can take.
CEILING = 255

# Character codes are single bytes.
MIN_CODE = 0
MAX_CODE = 255


class InvalidRangeError(ValueError):
    """Raised when a character range is empty or outside 0..255."""


@dataclass(frozen=True)
class CharacterRange:
    first: int
    last: int

    def __post_init__(self):
        for code in (self.first, self.last):
            if not MIN_CODE <= code <= MAX_CODE:
                raise InvalidRangeError(
                    f"character code {code} outside {MIN_CODE}..{MAX_CODE}")
        if self.first > self.last:
            raise InvalidRangeError(
                f"range start {self.first} is after range end {self.last}")

    def codes(self):
        return range(self.first, self.last + 1)

    def __len__(self):
        return self.last - self.first + 1


@dataclass(frozen=True)
class FontRequest:
    name: str
    size: int

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError(f"font size must be positive, got {self.size}")


@dataclass(frozen=True)
class GlyphMetrics:
    code: int
    advance_width: int


@dataclass(frozen=True)
class GlyphEntry:
    code: int
    advance_width: int
    grid: Tuple[Tuple[int, ...], ...]

    @property
    def metrics(self):
        return GlyphMetrics(self.code, self.advance_width)


@dataclass(frozen=True)
class FontBlock:
    name: str
    size: int
    line_height: int
    first: int
    last: int
    glyphs: Tuple[GlyphEntry, ...] = ()

    def glyph(self, code):
        """Look a glyph up by position, the way the generated table is read."""
        return self.glyphs[code - self.first]


@dataclass(frozen=True)
class FontTable:
    element_type: str
    name: str
    blocks: Tuple[FontBlock, ...] = ()
