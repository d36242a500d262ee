#-------------------------------------------------------------------------
#
#    Font to C array converter for framebuffer displays
#
#    Renders a range of characters from installed fonts at one or more
#    sizes and prints a nested C/C++ array holding, per font, its line
#    height and, per character, the advance width and one 0..255
#    intensity value per pixel.
#
#    Usage:
#        font2table <from> <to> <type> <name> [<font> <size> [<size>..]]..
#
#    Example:
#        font2table 33 127 uint8_t fonts Arial 12 18 Consolas 32
#    Generates Arial bitmaps in sizes 12 and 18 and Consolas bitmaps in
#    size 32 for characters 33 to 127 (decimal).
#
#-------------------------------------------------------------------------

import argparse
import sys

from . import VERSION
from .arguments import parse_code, scan_font_requests
from .model import CharacterRange, InvalidRangeError
from .rasterizer import BACKENDS, create_rasterizer
from .serializer import build_table, write_table


def character_code(token):
    try:
        return parse_code(token)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser():
    parser = argparse.ArgumentParser(
        prog="font2table",
        description="Render font glyphs into a C array of pixel intensities.")
    parser.add_argument('first', type=character_code, help='First character code (0-255).')
    parser.add_argument('last', type=character_code, help='Last character code (0-255).')
    parser.add_argument('element_type', help='C type of the array elements, e.g. uint8_t.')
    parser.add_argument('table_name', help='Name of the generated array.')
    parser.add_argument('fonts', nargs='*', metavar='FONT_OR_SIZE',
                        help='Font names, each followed by one or more point sizes.')
    parser.add_argument('-o', '--output', help='Write the table to this file instead of stdout.')
    parser.add_argument('-b', '--backend', choices=sorted(BACKENDS), default='pillow',
                        help='Glyph rasterizer to use (default: pillow).')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only print warnings and errors.')
    parser.add_argument('--version', action='version', version=f'%(prog)s {VERSION}')
    return parser


def main(argv=None, rasterizer=None):
    args = build_parser().parse_args(argv)

    def status(message):
        if not args.quiet:
            print(message, file=sys.stderr)

    try:
        char_range = CharacterRange(args.first, args.last)
    except InvalidRangeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    requests = scan_font_requests(args.fonts)
    if not requests:
        print("Warning: no font and size pairs given, the table will be empty",
              file=sys.stderr)

    if rasterizer is None:
        rasterizer = create_rasterizer(args.backend)

    def progress(request):
        status(f"Rendering {request.name} {request.size}: "
               f"{len(char_range)} characters ({char_range.first}..{char_range.last})")

    table = build_table(rasterizer, char_range, args.element_type, args.table_name,
                        requests, progress=progress)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            write_table(table, f)
        status(f"{args.output} written")
    else:
        write_table(table, sys.stdout)
    return 0


if __name__ == '__main__':
    sys.exit(main())
