"""
Image to ASCII Art Engine

Converts raster images into ASCII art:
- Chain of per-pixel colour adjustments (brightness, contrast, saturation,
  grayscale, invert, sepia, hue rotation)
- Luminance based glyph mapping over named or custom ramps
- Re-rasterized output image, monochrome or in the source colours
"""

__version__ = "0.1.0"

from .adjustments import apply_adjustments, ImageAdjuster
from .color_space import rgb_to_hsl, hsl_to_rgb
from .config import ConversionSettings, describe_settings, resolve_grid_size
from .constants import CharacterSet
from .engine import AsciiArtEngine, image_to_ascii, load_image
from .errors import AsciiArtError, InvalidInputError, SourceUnavailableError, RenderFailureError
from .formatters import AnsiColorFormatter, HtmlFormatter
from .glyph_mapper import GlyphGrid, map_glyphs
from .renderer import AsciiRenderer, render
from .result import ConversionResult

__all__ = [
    # Main classes
    "AsciiArtEngine",
    "ConversionSettings",
    "ConversionResult",
    "CharacterSet",

    # Stages
    "apply_adjustments",
    "ImageAdjuster",
    "map_glyphs",
    "GlyphGrid",
    "render",
    "AsciiRenderer",

    # Helpers
    "rgb_to_hsl",
    "hsl_to_rgb",
    "describe_settings",
    "resolve_grid_size",
    "load_image",
    "image_to_ascii",

    # Formatters
    "AnsiColorFormatter",
    "HtmlFormatter",

    # Errors
    "AsciiArtError",
    "InvalidInputError",
    "SourceUnavailableError",
    "RenderFailureError",
]
