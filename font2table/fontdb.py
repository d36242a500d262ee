"""Resolve a font family name such as "Arial" to an installed font file."""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from fontTools.ttLib import TTCollection, TTFont, TTLibError

FONT_PATH_ENV = "FONT2TABLE_FONT_PATH"
FONT_SUFFIXES = (".ttf", ".otf", ".ttc", ".otc")

# name table IDs
FAMILY = 1
SUBFAMILY = 2
FULL_NAME = 4
TYPOGRAPHIC_FAMILY = 16


@dataclass(frozen=True)
class FontFile:
    path: str
    index: int = 0
    subfamily: str = ""


def font_directories():
    """Directories searched for fonts, extra ones from the environment first."""
    dirs = [Path(p) for p in os.environ.get(FONT_PATH_ENV, "").split(os.pathsep) if p]
    home = Path.home()
    if sys.platform.startswith("win"):
        windir = os.environ.get("WINDIR", r"C:\Windows")
        dirs.append(Path(windir) / "Fonts")
        local = os.environ.get("LOCALAPPDATA")
        if local:
            dirs.append(Path(local) / "Microsoft" / "Windows" / "Fonts")
    elif sys.platform == "darwin":
        dirs += [Path("/System/Library/Fonts"), Path("/Library/Fonts"),
                 home / "Library" / "Fonts"]
    else:
        dirs += [Path("/usr/share/fonts"), Path("/usr/local/share/fonts"),
                 home / ".fonts", home / ".local" / "share" / "fonts"]
    return dirs


def _names(ttf):
    """Family, subfamily and the lookup names a font answers to."""
    table = ttf["name"] if "name" in ttf else None
    if table is None:
        return "", "", []
    family = table.getDebugName(TYPOGRAPHIC_FAMILY) or table.getDebugName(FAMILY) or ""
    subfamily = table.getDebugName(SUBFAMILY) or ""
    names = [n for n in (family, table.getDebugName(FAMILY),
                         table.getDebugName(FULL_NAME)) if n]
    return family, subfamily, list(dict.fromkeys(names))


def _is_regular(font_file):
    return font_file.subfamily.lower() in ("regular", "book", "normal", "roman")


class FontIndex:
    """Case-insensitive map from family and full names to font files.

    Directories are scanned once, on first lookup.
    """

    def __init__(self, directories=None):
        self.directories = list(directories) if directories is not None else font_directories()
        self._fonts = None

    def _scan(self):
        fonts = {}
        for directory in self.directories:
            if not directory.is_dir():
                continue
            for path in sorted(directory.rglob("*")):
                if path.suffix.lower() in FONT_SUFFIXES and path.is_file():
                    self._add_file(fonts, path)
        return fonts

    def _add_file(self, fonts, path):
        try:
            if path.suffix.lower() in (".ttc", ".otc"):
                container = TTCollection(str(path), lazy=True)
                faces = list(enumerate(container.fonts))
            else:
                container = TTFont(str(path), lazy=True)
                faces = [(0, container)]
            with container:
                for index, ttf in faces:
                    _, subfamily, names = _names(ttf)
                    entry = FontFile(str(path), index, subfamily)
                    for name in names:
                        fonts.setdefault(name.lower(), []).append(entry)
        except (TTLibError, OSError, KeyError, ValueError) as e:
            print(f"Warning: skipping unreadable font {path}: {e}", file=sys.stderr)

    @property
    def fonts(self):
        if self._fonts is None:
            self._fonts = self._scan()
        return self._fonts

    def lookup(self, name):
        """Return the FontFile for a name or file path, or None if unknown."""
        if os.path.isfile(name):
            return FontFile(name)
        candidates = self.fonts.get(name.strip().lower(), [])
        if not candidates:
            return None
        for candidate in candidates:
            if _is_regular(candidate):
                return candidate
        return candidates[0]

    def first(self):
        """Any installed font, preferring a regular face; None if none exist."""
        entries = sorted({e for group in self.fonts.values() for e in group},
                         key=lambda e: (not _is_regular(e), e.path, e.index))
        return entries[0] if entries else None
