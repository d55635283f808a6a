# ==============================================================================
# TGX FORGE - COMMAND LINE INTERFACE
# ==============================================================================
# Command-line front end for the image converter.
#
# Commands:
#   - encode:  PNG -> loose .tgx file
#   - decode:  loose .tgx file -> PNG
#   - tiles:   building diamond PNG -> tiled object parts
#   - atlas:   many .tgx/PNG images -> one preview PNG
#   - palette: raw 5120-byte palette block -> swatch PNG
#
# Usage:
#   python -m tgxforge.cli encode --input house.png --output house.tgx
#   python -m tgxforge.cli decode --input house.tgx --output house.png
#   python -m tgxforge.cli tiles --input church.png --preview church_tiles.png
#   python -m tgxforge.cli atlas --output sheet.png a.tgx b.tgx c.png
#
# ==============================================================================

import os
import sys
import argparse
from typing import List, Optional

from PIL import Image


# ==============================================================================
# COLOR HELPERS FOR TERMINAL OUTPUT
# ==============================================================================
class Colors:
    """ANSI color codes for terminal output."""
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'

    @classmethod
    def disable(cls):
        """Disable colors (for non-supporting terminals)."""
        cls.HEADER = ''
        cls.BLUE = ''
        cls.CYAN = ''
        cls.GREEN = ''
        cls.YELLOW = ''
        cls.RED = ''
        cls.BOLD = ''
        cls.END = ''


def print_header(text: str):
    """Print a header."""
    print(f"\n{Colors.BOLD}{Colors.CYAN}{'=' * 60}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}  {text}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{'=' * 60}{Colors.END}\n")


def print_success(text: str):
    """Print a success message."""
    print(f"{Colors.GREEN}✓ {text}{Colors.END}")


def print_error(text: str):
    """Print an error message."""
    print(f"{Colors.RED}✗ {text}{Colors.END}")


def print_info(text: str):
    """Print an info message."""
    print(f"{Colors.BLUE}ℹ {text}{Colors.END}")


def print_warning(text: str):
    """Print a warning message."""
    print(f"{Colors.YELLOW}⚠ {text}{Colors.END}")


def print_result_errors(result):
    for error in result.errors:
        print_error(f"{type(error).__name__}: {error}")


# ==============================================================================
# CONFIGURATION
# ==============================================================================
def get_settings(args):
    """Load the config file named on the command line, or the default one."""
    from tgxforge.core.config import Config, get_config

    if getattr(args, 'config', None):
        config = Config(args.config)
        config.load()
    else:
        config = get_config()

    if getattr(args, 'debug', False):
        config.debug_mode = True
    return config


def parse_data_type(name: str):
    from tgxforge.core.datatypes import DataType

    try:
        return DataType[name.upper()]
    except KeyError:
        raise argparse.ArgumentTypeError(
            f"unknown data type '{name}' "
            f"(choose from {', '.join(t.name.lower() for t in DataType)})")


def load_image(path: str) -> Optional[Image.Image]:
    """Open a PNG (or any Pillow format) as RGBA, or decode a .tgx file."""
    from tgxforge.codec.converter import read_tgx

    if path.lower().endswith('.tgx'):
        result = read_tgx(path)
        if not result.success:
            print_result_errors(result)
            return None
        return result.image

    try:
        with Image.open(path) as img:
            return img.convert('RGBA')
    except OSError as e:
        print_error(f"Cannot open {path}: {e}")
        return None


# ==============================================================================
# ENCODE / DECODE COMMANDS
# ==============================================================================
def cmd_encode(args) -> int:
    """Encode an image into a loose .tgx file."""
    from tgxforge.codec.converter import write_tgx
    from tgxforge.codec.palette import PaletteTable
    from tgxforge.core.errors import TGXError

    config = get_settings(args)

    image = load_image(args.input)
    if image is None:
        return 1

    palette = None
    if args.palette:
        try:
            palette = PaletteTable.from_file(args.palette)
        except (TGXError, OSError) as e:
            print_error(f"Cannot load palette {args.palette}: {e}")
            return 1

    result = write_tgx(
        image, args.output, args.type,
        stride=args.stride,
        force_opaque=args.force_opaque or config.force_opaque,
        animated=config.animated and not args.static,
        palette=palette,
        debug=config.debug_mode,
    )

    if not result.success:
        print_result_errors(result)
        return 1

    for warning in result.warnings[:10]:
        print_warning(str(warning))
    if len(result.warnings) > 10:
        print_warning(f"... {len(result.warnings) - 10} more palette warnings")

    print_success(f"Encoded {args.input} -> {args.output} "
                  f"({result.width}x{result.height}, {len(result.data)} bytes)")
    return 0


def cmd_decode(args) -> int:
    """Decode a loose .tgx file into a PNG."""
    from tgxforge.codec.converter import read_tgx

    config = get_settings(args)

    result = read_tgx(args.input, smooth=config.smooth_colors, opaque=args.opaque)
    if not result.success:
        print_result_errors(result)
        return 1

    result.image.save(args.output, "PNG")
    print_success(f"Decoded {args.input} -> {args.output} ({result.width}x{result.height})")
    return 0


# ==============================================================================
# TILES COMMAND
# ==============================================================================
def cmd_tiles(args) -> int:
    """Split building diamonds into tiled object parts."""
    from tgxforge.codec.converter import build_atlas, split_image_to_tiles
    from tgxforge.codec.sampler import render_colors
    from tgxforge.codec.tiles import PlacementContext, tile_colors, TILE_WIDTH, TILE_HEIGHT

    config = get_settings(args)
    context = PlacementContext(wrap_width=config.placement_wrap_width)
    previews: List[Image.Image] = []

    print_header("Tiled Object Split")

    for path in args.inputs:
        image = load_image(path)
        if image is None:
            return 1

        origin = (context.x_offset, context.y_offset)
        result = split_image_to_tiles(image, context)
        if not result.success:
            print_result_errors(result)
            return 1

        print_info(f"{path}: {result.width}x{result.height}, {len(result.tiles)} tiles, "
                   f"sheet position {origin}")
        print(f"{'Part':<6} {'Dir':<5} {'Height':<8} {'Offset':<8} {'Bytes':<8}")
        print("-" * 40)
        for tile in result.tiles:
            print(f"{tile.part_index:<6} {tile.direction:<5} {tile.height:<8} "
                  f"{tile.tile_offset:<8} {len(tile.data):<8}")

            if args.output:
                os.makedirs(args.output, exist_ok=True)
                name = os.path.splitext(os.path.basename(path))[0]
                out_path = os.path.join(args.output, f"{name}_{tile.part_index:03d}.bin")
                with open(out_path, 'wb') as f:
                    f.write(tile.data)

            previews.append(render_colors(tile_colors(tile), TILE_WIDTH, TILE_HEIGHT,
                                          smooth=config.smooth_colors, opaque=True))
        print()

    if args.preview and previews:
        result = build_atlas(previews, args.width or config.atlas_width)
        if not result.success:
            print_result_errors(result)
            return 1
        result.image.save(args.preview, "PNG")
        print_success(f"Saved tile preview to {args.preview}")

    return 0


# ==============================================================================
# ATLAS / PALETTE COMMANDS
# ==============================================================================
def cmd_atlas(args) -> int:
    """Pack several images into one preview image."""
    from tgxforge.codec.converter import build_atlas

    config = get_settings(args)

    images = []
    for path in args.inputs:
        image = load_image(path)
        if image is None:
            return 1
        images.append(image)

    result = build_atlas(images, args.width or config.atlas_width)
    if not result.success:
        print_result_errors(result)
        return 1

    result.image.save(args.output, "PNG")
    print_success(f"Saved {len(images)} images to {args.output} "
                  f"({result.width}x{result.height})")
    return 0


def cmd_palette(args) -> int:
    """Render one table of a palette block as a swatch grid."""
    from tgxforge.codec.palette import PaletteTable
    from tgxforge.core.errors import TGXError

    try:
        palette = PaletteTable.from_file(args.input)
        palette.active = args.table
    except (TGXError, OSError) as e:
        print_error(f"Cannot load palette {args.input}: {e}")
        return 1

    palette.to_image(cell_size=args.cell_size).save(args.output, "PNG")
    print_success(f"Saved palette table {args.table} to {args.output}")
    return 0


# ==============================================================================
# MAIN ARGUMENT PARSER
# ==============================================================================
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tgxforge",
        description="TGX Forge - Stronghold GM1/TGX image converter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s encode --input house.png --output house.tgx
  %(prog)s decode --input house.tgx --output house.png
  %(prog)s tiles --preview tiles.png church.png
  %(prog)s atlas --output sheet.png a.tgx b.tgx
  %(prog)s palette --input palette.bin --table 3 --output pal3.png
        """
    )
    parser.add_argument('--config', help='Path to a JSON config file')
    parser.add_argument('--debug', action='store_true', help='Print debug output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # -------------------------------------------------------------------------
    # ENCODE command
    # -------------------------------------------------------------------------
    encode_parser = subparsers.add_parser('encode', help='Encode an image as .tgx')
    encode_parser.add_argument('--input', required=True, help='Source image')
    encode_parser.add_argument('--output', required=True, help='Destination .tgx file')
    encode_parser.add_argument('--type', type=parse_data_type, default='animations',
                               help='Asset data type (default: animations)')
    encode_parser.add_argument('--palette', help='Raw palette block for indexed output')
    encode_parser.add_argument('--stride', type=int, default=1, help='Sub-sampling step')
    encode_parser.add_argument('--force-opaque', action='store_true',
                               help='Set the opacity bit on every pixel')
    encode_parser.add_argument('--static', action='store_true',
                               help='Force bit 15 on in the stream')
    encode_parser.set_defaults(func=cmd_encode)

    # -------------------------------------------------------------------------
    # DECODE command
    # -------------------------------------------------------------------------
    decode_parser = subparsers.add_parser('decode', help='Decode a .tgx file to PNG')
    decode_parser.add_argument('--input', required=True, help='Source .tgx file')
    decode_parser.add_argument('--output', required=True, help='Destination PNG')
    decode_parser.add_argument('--opaque', action='store_true',
                               help='Show every pixel regardless of bit 15')
    decode_parser.set_defaults(func=cmd_decode)

    # -------------------------------------------------------------------------
    # TILES command
    # -------------------------------------------------------------------------
    tiles_parser = subparsers.add_parser('tiles', help='Split building diamonds into tiles')
    tiles_parser.add_argument('inputs', nargs='+', help='Building images')
    tiles_parser.add_argument('--output', help='Directory for raw tile data')
    tiles_parser.add_argument('--preview', help='PNG atlas of all tile diamonds')
    tiles_parser.add_argument('--width', type=int, default=0, help='Preview atlas width')
    tiles_parser.set_defaults(func=cmd_tiles)

    # -------------------------------------------------------------------------
    # ATLAS command
    # -------------------------------------------------------------------------
    atlas_parser = subparsers.add_parser('atlas', help='Pack images into a preview')
    atlas_parser.add_argument('inputs', nargs='+', help='.tgx or image files')
    atlas_parser.add_argument('--output', required=True, help='Destination PNG')
    atlas_parser.add_argument('--width', type=int, default=0, help='Atlas width')
    atlas_parser.set_defaults(func=cmd_atlas)

    # -------------------------------------------------------------------------
    # PALETTE command
    # -------------------------------------------------------------------------
    palette_parser = subparsers.add_parser('palette', help='Render a palette table')
    palette_parser.add_argument('--input', required=True, help='Raw 5120-byte palette block')
    palette_parser.add_argument('--output', required=True, help='Destination PNG')
    palette_parser.add_argument('--table', type=int, default=0, help='Table number 0-9')
    palette_parser.add_argument('--cell-size', type=int, default=16, help='Swatch size')
    palette_parser.set_defaults(func=cmd_palette)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    if sys.platform == 'win32':
        # Enable ANSI colors on Windows
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
        except (AttributeError, OSError):
            Colors.disable()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
