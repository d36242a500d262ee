"""Turn the free-form ``<font> <size>...`` argument list into font requests."""

import enum
import sys

from .model import MAX_CODE, MIN_CODE, FontRequest


class TokenKind(enum.Enum):
    NAME = "name"
    SIZE = "size"


class ScanState(enum.Enum):
    EXPECTING_FONT = "expecting font"
    EXPECTING_FONT_OR_SIZE = "expecting font or size"


def is_number(token):
    return token.isascii() and token.isdigit()


def classify(token):
    """A positive decimal number is a size; anything else names a font."""
    if is_number(token) and int(token) > 0:
        return TokenKind.SIZE
    return TokenKind.NAME


def scan_font_requests(tokens):
    """Pair each size with the most recent font name, keeping input order.

    ``Arial 12 18 Consolas 32`` gives Arial 12, Arial 18 and Consolas 32.
    """
    requests = []
    state = ScanState.EXPECTING_FONT
    font = None
    sized = False

    for token in tokens:
        kind = classify(token)
        if kind is TokenKind.NAME:
            if state is ScanState.EXPECTING_FONT_OR_SIZE and not sized:
                print(f"Warning: font '{font}' has no size, skipping", file=sys.stderr)
            font = token
            sized = False
            state = ScanState.EXPECTING_FONT_OR_SIZE
        elif state is ScanState.EXPECTING_FONT:
            print(f"Warning: size {token} given before any font name, ignoring",
                  file=sys.stderr)
        else:
            requests.append(FontRequest(font, int(token)))
            sized = True

    if state is ScanState.EXPECTING_FONT_OR_SIZE and not sized:
        print(f"Warning: font '{font}' has no size, skipping", file=sys.stderr)
    return requests


def parse_code(token):
    """Parse a character code; codes above 255 wrap to 0."""
    if not is_number(token):
        raise ValueError(f"character code must be a non-negative integer, got '{token}'")
    code = int(token)
    if code > MAX_CODE:
        print(f"Warning: character code {code} is above {MAX_CODE}, using {MIN_CODE}",
              file=sys.stderr)
        return MIN_CODE
    return code
