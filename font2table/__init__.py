"""Render system font glyphs into nested C array tables."""

VERSION = '1.0'

from .model import (  # noqa: E402
    CEILING,
    CharacterRange,
    FontBlock,
    FontRequest,
    FontTable,
    GlyphEntry,
    InvalidRangeError,
)
from .sampler import normalize, sample  # noqa: E402
from .serializer import TableBuilder, build_table, format_table, write_table  # noqa: E402

__all__ = [
    "VERSION",
    "CEILING",
    "CharacterRange",
    "FontBlock",
    "FontRequest",
    "FontTable",
    "GlyphEntry",
    "InvalidRangeError",
    "TableBuilder",
    "build_table",
    "format_table",
    "normalize",
    "sample",
    "write_table",
]
