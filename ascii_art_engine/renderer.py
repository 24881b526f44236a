#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Rendering
=====================================
Rasterizes a glyph grid back into an image: white background, one glyph per
cell, drawn black or in the cell's original colour.
"""

from typing import Optional, Sequence, Tuple, Union
import io
import logging
import math

from PIL import Image, ImageDraw, ImageFont
import numpy as np

from ascii_art_engine.config import ConversionSettings
from ascii_art_engine.constants import (
    MAX_FONT_SIZE, CHAR_WIDTH_RATIO, BACKGROUND_COLOR, FOREGROUND_COLOR,
    IMAGE_FORMATS, MONOSPACE_FONTS,
)
from ascii_art_engine.errors import InvalidInputError, RenderFailureError
from ascii_art_engine.glyph_mapper import GlyphGrid, map_glyphs
from ascii_art_engine.result import ConversionResult


logger = logging.getLogger(__name__)

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# Glyph coverage is checked at this size so tiny cells do not read as blank
COVERAGE_SIZE = 12
NOT_A_CHARACTER = '\uffff'


def compute_font_size(columns: int, rows: int, cap: int = MAX_FONT_SIZE) -> int:
    """Font size keeping the rendered image's aspect close to the grid's."""
    if columns <= 0 or rows <= 0:
        raise InvalidInputError(f"Cannot render an empty grid: {columns}x{rows}")
    return max(1, min(cap, (columns * cap) // rows))


def canvas_size(columns: int, rows: int, font_size: int) -> Tuple[int, int]:
    """Pixel size of the surface holding ``columns`` x ``rows`` cells."""
    width = max(1, math.ceil(columns * font_size * CHAR_WIDTH_RATIO))
    return width, rows * font_size


def missing_glyphs(font: Font, chars: str, size: int = COVERAGE_SIZE) -> str:
    """
    Glyphs of ``chars`` that ``font`` draws as nothing or as its missing-glyph box.

    Whitespace is never reported. A glyph the font cannot encode at all counts
    as missing.
    """
    def raster(char: str) -> Optional[bytes]:
        canvas = Image.new('L', (size * 2, size * 2), 0)
        try:
            ImageDraw.Draw(canvas).text((0, 0), char, fill=255, font=font)
        except (OSError, ValueError):
            return None
        return canvas.tobytes()

    notdef = raster(NOT_A_CHARACTER)
    blank = bytes(size * size * 4)
    missing = ''
    for char in dict.fromkeys(chars):
        if char.isspace():
            continue
        shape = raster(char)
        if shape is None or shape == blank or shape == notdef:
            missing += char
    return missing


def load_font(size: int, font_path: Optional[str] = None, chars: str = '') -> Font:
    """
    Load a monospace font, trying common system locations first.

    The first font that draws every glyph of ``chars`` wins. Otherwise the
    first font found is used and the glyphs it lacks are logged as a warning.
    """
    candidates: Sequence[str] = (font_path,) if font_path else MONOSPACE_FONTS
    fallback = None
    for name in candidates:
        try:
            font = ImageFont.truetype(name, size)
        except OSError:
            continue
        missing = missing_glyphs(ImageFont.truetype(name, COVERAGE_SIZE), chars) if chars else ''
        if not missing:
            return font
        if fallback is None:
            fallback = (name, font, missing)

    if font_path and fallback is None:
        raise RenderFailureError(f"Cannot load font: {font_path}")

    if fallback is None:
        logger.debug("No monospace TrueType font found, using Pillow's default font")
        name = "Pillow's default font"
        font = ImageFont.load_default(size=size)
        missing = missing_glyphs(ImageFont.load_default(size=COVERAGE_SIZE), chars) if chars else ''
    else:
        name, font, missing = fallback

    if missing:
        logger.warning("%s has no glyphs for %r, those cells will not render", name, missing)
    return font


class AsciiRenderer:
    """Draw glyph grids onto a Pillow surface and encode them."""

    def __init__(self, image_format: str = 'PNG',
                 max_font_size: int = MAX_FONT_SIZE,
                 font_path: Optional[str] = None,
                 quality: int = 80):
        fmt = image_format.upper()
        if fmt == 'JPG':
            fmt = 'JPEG'
        if fmt not in IMAGE_FORMATS:
            raise InvalidInputError(
                f"Unsupported image format: {image_format}. Available: {list(IMAGE_FORMATS)}"
            )
        if max_font_size < 1:
            raise InvalidInputError(f"max_font_size must be >= 1, got {max_font_size}")
        self.image_format = fmt
        self.max_font_size = max_font_size
        self.font_path = font_path
        self.quality = quality

    def draw(self, grid: GlyphGrid) -> Image.Image:
        """
        Draw the grid onto a new RGB image.

        Args:
            grid: Glyph rows with an optional colour map

        Returns:
            PIL Image
        """
        columns, rows = grid.width, grid.height
        font_size = compute_font_size(columns, rows, self.max_font_size)
        width, height = canvas_size(columns, rows, font_size)
        cell_width = font_size * CHAR_WIDTH_RATIO

        font = load_font(font_size, self.font_path, ''.join(grid.lines))
        try:
            canvas = Image.new('RGB', (width, height), BACKGROUND_COLOR)
        except (MemoryError, ValueError) as exc:
            raise RenderFailureError(f"Cannot allocate a {width}x{height} surface: {exc}") from exc

        draw = ImageDraw.Draw(canvas)
        try:
            for y, line in enumerate(grid.lines):
                color_row = grid.colors[y] if grid.colors is not None else None
                top = y * font_size
                for x, char in enumerate(line):
                    if char == ' ':
                        continue
                    fill = color_row[x] if color_row is not None else FOREGROUND_COLOR
                    draw.text((x * cell_width, top), char, fill=fill, font=font)
        except (OSError, ValueError) as exc:
            raise RenderFailureError(f"Cannot draw glyphs: {exc}") from exc

        logger.debug("Rendered %dx%d grid at font size %d into %dx%d px",
                     columns, rows, font_size, width, height)
        return canvas

    def encode(self, canvas: Image.Image) -> bytes:
        """Encode a rendered surface in the configured format."""
        buffer = io.BytesIO()
        options = {}
        if self.image_format in ('WEBP', 'JPEG'):
            options['quality'] = self.quality
        try:
            canvas.save(buffer, format=self.image_format, **options)
        except (OSError, ValueError, KeyError) as exc:
            raise RenderFailureError(f"Cannot encode {self.image_format} image: {exc}") from exc
        return buffer.getvalue()

    def render(self, grid: GlyphGrid) -> bytes:
        """Draw and encode ``grid`` in one step."""
        return self.encode(self.draw(grid))


def render(adjusted: np.ndarray, original: np.ndarray,
           settings: ConversionSettings,
           renderer: Optional[AsciiRenderer] = None) -> ConversionResult:
    """
    Map an adjusted buffer to glyphs and rasterize the result.

    Both buffers must already be resampled to the sample grid.

    Args:
        adjusted: (rows, cols, 4) uint8 buffer after adjustments
        original: Pre-adjustment buffer of the same shape
        settings: Conversion settings (ramp and colorized flag)
        renderer: Rasterizer to use, PNG with default options when None

    Returns:
        ConversionResult holding both the text and the encoded image
    """
    if adjusted.shape != original.shape:
        raise InvalidInputError(
            f"Adjusted buffer {adjusted.shape} and original buffer {original.shape} differ"
        )

    renderer = renderer or AsciiRenderer()
    grid = map_glyphs(adjusted, settings.ramp, original, settings.colorized)
    image = renderer.render(grid)

    return ConversionResult(
        text=grid.text,
        image=image,
        image_format=renderer.image_format,
        width=grid.width,
        height=grid.height,
        colors=grid.colors,
    )
