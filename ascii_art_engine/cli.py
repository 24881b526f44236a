#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Command Line Interface
==================================================
Adjustment flags are generated from the settings schema, so new settings show
up here without touching the engine. Resource policy (the high resolution
confirmation) lives in this layer only.
"""

from typing import Any, Dict, List, Optional
import argparse
import logging
import os
import sys

from ascii_art_engine.config import ConversionSettings, SETTINGS_SCHEMA, describe_settings
from ascii_art_engine.constants import CharacterSet
from ascii_art_engine.engine import AsciiArtEngine
from ascii_art_engine.errors import AsciiArtError, InvalidInputError
from ascii_art_engine.formatters import AnsiColorFormatter, HtmlFormatter


logger = logging.getLogger('ascii_art_engine')

HIGH_RESOLUTION_WIDTH = 500

IMAGE_EXTENSIONS = {
    'png': 'PNG',
    'webp': 'WEBP',
    'jpg': 'JPEG',
    'jpeg': 'JPEG',
}

# Flags spelled by hand instead of generated from the schema
_MANUAL_FIELDS = {'width', 'height', 'char_set', 'custom_chars', 'colorized'}


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


# =============================================================================
# ARGUMENTS
# =============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='ascii-art-engine',
        description='Convert images to ASCII art text and a rendered image',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s image.png                          # Print ASCII art
  %(prog)s image.png -w 80 --charset extended # 80 columns, extended ramp
  %(prog)s image.png -c -o art.png            # Colorized rendered image
  %(prog)s image.png --sepia 60 -o art.html   # Sepia toned HTML page
        """
    )

    parser.add_argument('input', nargs='?', help='Input image file')
    parser.add_argument('-o', '--output', help='Output file (txt, html, ansi, png, webp, jpg)')
    parser.add_argument('--settings', help='JSON file with conversion settings')

    # Size options
    parser.add_argument('-w', '--width', type=int, help='Output width in characters')
    parser.add_argument('-H', '--height', type=int,
                        help='Output height in characters (auto from aspect ratio)')

    # Character set options
    parser.add_argument('--charset', dest='char_set', choices=CharacterSet.names(),
                        help='Named glyph ramp')
    parser.add_argument('--custom-chars', dest='custom_chars',
                        help='Custom glyph ramp (dark to light), overrides --charset')

    # Adjustments, one flag per numeric schema field
    group = parser.add_argument_group('adjustments')
    for spec in SETTINGS_SCHEMA:
        if spec.name in _MANUAL_FIELDS:
            continue
        bounds = ""
        if spec.minimum is not None and spec.maximum is not None:
            bounds = f" [{spec.minimum}-{spec.maximum}]"
        group.add_argument('--' + spec.name.replace('_', '-'), dest=spec.name, type=float,
                           help=f"{spec.label}{bounds}, default {spec.default}".replace('%', '%%'))

    # Color options
    parser.add_argument('-c', '--colorize', dest='colorized', action='store_true', default=None,
                        help='Render glyphs in their original colors')
    parser.add_argument('--color-mode', choices=['24bit', '256', '16'], default='24bit',
                        help='Terminal color mode')

    # Rendering options
    parser.add_argument('--image-format', choices=sorted(set(IMAGE_EXTENSIONS.values())),
                        help='Format of the rendered image (default from output extension)')
    parser.add_argument('--font', help='Monospace TrueType font for the rendered image')

    # Other options
    parser.add_argument('-y', '--yes', action='store_true',
                        help=f'Do not ask before rendering wider than {HIGH_RESOLUTION_WIDTH} columns')
    parser.add_argument('--list-charsets', action='store_true',
                        help='Show named glyph ramps and default settings')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    return parser


def settings_from_args(args: argparse.Namespace) -> ConversionSettings:
    """Defaults, then the settings file, then explicit flags."""
    overrides: Dict[str, Any] = {}
    for spec in SETTINGS_SCHEMA:
        value = getattr(args, spec.name, None)
        if value is None:
            continue
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        overrides[spec.name] = value

    if args.settings:
        return ConversionSettings.from_json(args.settings, **overrides)
    return ConversionSettings.from_mapping(overrides)


def confirm_resolution(settings: ConversionSettings, assume_yes: bool) -> ConversionSettings:
    """
    Ask before very wide conversions.

    Declining, or running without a terminal to ask on, caps the width at
    HIGH_RESOLUTION_WIDTH.
    """
    if settings.width <= HIGH_RESOLUTION_WIDTH or assume_yes:
        return settings

    if sys.stdin.isatty():
        answer = input(
            f"Width {settings.width} may be slow and memory hungry. Continue? [y/N] "
        ).strip().lower()
        if answer in ('y', 'yes'):
            return settings
    else:
        logger.warning("Width %d exceeds %d and --yes was not given",
                       settings.width, HIGH_RESOLUTION_WIDTH)

    print(f"Width capped to {HIGH_RESOLUTION_WIDTH}", file=sys.stderr)
    return settings.replace(width=HIGH_RESOLUTION_WIDTH)


def print_charsets() -> None:
    info = describe_settings()
    print("Character sets:")
    for name, chars in info['char_sets'].items():
        print(f"  {name:<10} {chars}")
    print("\nDefaults:")
    for name, value in info['defaults'].items():
        print(f"  {name:<15} {value!r}")


# =============================================================================
# ENTRY POINT
# =============================================================================

def write_output(path: str, result, color_mode: str) -> None:
    ext = os.path.splitext(path)[1].lower().lstrip('.')

    if ext in IMAGE_EXTENSIONS:
        with open(path, 'wb') as f:
            f.write(result.image)
    elif ext == 'html':
        with open(path, 'w', encoding='utf-8') as f:
            f.write(HtmlFormatter.format_result(result))
    elif ext == 'ansi':
        with open(path, 'w', encoding='utf-8') as f:
            f.write(AnsiColorFormatter.format_result(result, color_mode=color_mode))
    else:  # txt or other
        with open(path, 'w', encoding='utf-8') as f:
            f.write(result.text)
    print(f"Saved to {path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command line usage."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.list_charsets:
        print_charsets()
        return 0

    if not args.input:
        parser.print_help()
        return 0

    image_format = args.image_format
    if image_format is None and args.output:
        ext = os.path.splitext(args.output)[1].lower().lstrip('.')
        image_format = IMAGE_EXTENSIONS.get(ext)

    try:
        settings = confirm_resolution(settings_from_args(args), args.yes)
        engine = AsciiArtEngine(image_format=image_format or 'PNG', font_path=args.font)
        result = engine.convert(args.input, settings)
    except InvalidInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except AsciiArtError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Output size: {result.width}x{result.height} ({result.elapsed:.2f}s)", file=sys.stderr)

    if args.output:
        try:
            write_output(args.output, result, args.color_mode)
        except OSError as e:
            print(f"Error writing {args.output}: {e}", file=sys.stderr)
            return 1
    elif result.colors is not None:
        sys.stdout.write(AnsiColorFormatter.format_result(result, color_mode=args.color_mode))
    else:
        sys.stdout.write(result.text)

    return 0


if __name__ == '__main__':
    sys.exit(main())
