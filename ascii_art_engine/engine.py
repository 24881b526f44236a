#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Conversion
======================================
The engine ties the stages together: decode the source, resample it to the
sample grid, adjust a working copy, then map and render glyphs.

An engine only holds rendering options, never per-conversion state, so a
single instance can be shared by callers on different threads.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union, BinaryIO
import base64
import binascii
import dataclasses
import io
import logging
import time

from PIL import Image
import numpy as np

from ascii_art_engine.adjustments import apply_adjustments
from ascii_art_engine.config import ConversionSettings, resolve_grid_size, describe_settings
from ascii_art_engine.constants import MAX_FONT_SIZE
from ascii_art_engine.errors import InvalidInputError, SourceUnavailableError
from ascii_art_engine.renderer import AsciiRenderer, render
from ascii_art_engine.result import ConversionResult


logger = logging.getLogger(__name__)

ImageSource = Union[Image.Image, np.ndarray, bytes, bytearray, str, Path, BinaryIO]
SettingsLike = Union[ConversionSettings, Mapping[str, Any], None]


# =============================================================================
# SOURCE LOADING
# =============================================================================

def _decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(',')
    if not sep or not header.endswith(';base64'):
        raise SourceUnavailableError("Only base64 encoded data URIs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SourceUnavailableError(f"Invalid base64 payload in data URI: {exc}") from exc


def load_image(source: ImageSource) -> Image.Image:
    """
    Decode a source into a fully loaded RGBA image.

    Args:
        source: PIL Image, (h, w[, 3|4]) uint8 array, encoded bytes, a path,
            a ``data:`` URI or a binary file object

    Returns:
        RGBA PIL Image
    """
    if isinstance(source, Image.Image):
        image = source
    elif isinstance(source, np.ndarray):
        if source.dtype != np.uint8 or source.ndim not in (2, 3) \
                or (source.ndim == 3 and source.shape[2] not in (3, 4)):
            raise SourceUnavailableError(
                f"Cannot read array of shape {source.shape} and dtype {source.dtype}"
            )
        image = Image.fromarray(source)
    else:
        if isinstance(source, str) and source.startswith('data:'):
            source = _decode_data_uri(source)
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(bytes(source))
        try:
            image = Image.open(source)
            image.load()
        except (OSError, SyntaxError, EOFError, ValueError, Image.DecompressionBombError) as exc:
            raise SourceUnavailableError(f"Cannot decode image source: {exc}") from exc

    if image.width <= 0 or image.height <= 0:
        raise SourceUnavailableError(f"Image has no pixels: {image.width}x{image.height}")

    return image if image.mode == 'RGBA' else image.convert('RGBA')


# =============================================================================
# ENGINE
# =============================================================================

class AsciiArtEngine:
    """Convert images to ASCII art text plus a rendered image of that text."""

    def __init__(self, image_format: str = 'PNG',
                 max_font_size: int = MAX_FONT_SIZE,
                 font_path: Optional[str] = None,
                 quality: int = 80,
                 resample: Image.Resampling = Image.Resampling.LANCZOS):
        """
        Args:
            image_format: PNG, WEBP or JPEG for ``ConversionResult.image``
            max_font_size: Upper bound of the rendering font size
            font_path: Monospace TrueType font; common system fonts when None
            quality: Encoder quality for lossy formats
            resample: Pillow filter used to scale the source to the grid
        """
        self.renderer = AsciiRenderer(image_format, max_font_size, font_path, quality)
        self.resample = resample

    @staticmethod
    def resolve_settings(settings: SettingsLike = None, **overrides) -> ConversionSettings:
        """Accept settings objects, plain mappings or keyword overrides."""
        if isinstance(settings, ConversionSettings):
            return settings.replace(**overrides) if overrides else settings
        return ConversionSettings.from_mapping(settings, **overrides)

    def prepare_buffers(self, image: Image.Image,
                        grid_size: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Resample an image to the grid and return (working, original) buffers.

        The two arrays never share memory.
        """
        try:
            resized = image.resize(grid_size, self.resample)
        except (MemoryError, ValueError) as exc:
            raise InvalidInputError(f"Cannot resample image to {grid_size}: {exc}") from exc
        original = np.array(resized, dtype=np.uint8)
        return original.copy(), original

    def convert(self, source: ImageSource, settings: SettingsLike = None,
                **overrides) -> ConversionResult:
        """
        Convert an image to ASCII art.

        Args:
            source: Anything ``load_image`` accepts
            settings: ConversionSettings or a mapping of settings
            **overrides: Individual settings applied on top

        Returns:
            ConversionResult with ``text`` and the encoded ``image``
        """
        settings = self.resolve_settings(settings, **overrides)
        # Resolve the ramp before any heavy work so bad settings fail fast
        ramp = settings.ramp

        started = time.perf_counter()
        image = load_image(source)
        grid_size = resolve_grid_size(settings, image.size)
        working, original = self.prepare_buffers(image, grid_size)

        apply_adjustments(working, settings)
        result = render(working, original, settings, self.renderer)
        elapsed = time.perf_counter() - started

        logger.debug("Converted %dx%d source to %dx%d grid (%d glyphs) in %.3fs",
                     image.width, image.height, grid_size[0], grid_size[1],
                     len(ramp), elapsed)
        return dataclasses.replace(result, elapsed=elapsed)

    def describe(self) -> Dict[str, Any]:
        """Defaults, named ramps and field schema for building a settings UI."""
        info = describe_settings()
        info['image_format'] = self.renderer.image_format
        return info


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def image_to_ascii(source: ImageSource,
                   width: int = 100,
                   char_set: str = 'standard',
                   colorized: bool = False,
                   image_format: str = 'PNG',
                   **kwargs) -> ConversionResult:
    """
    Convenience function to convert an image with a throwaway engine.

    Args:
        source: Image source
        width: Output columns
        char_set: Named glyph ramp
        colorized: Render glyphs in their original colour
        image_format: Encoding of the rendered image
        **kwargs: Additional settings (brightness, custom_chars...)

    Returns:
        ConversionResult
    """
    engine = AsciiArtEngine(image_format=image_format)
    return engine.convert(source, width=width, char_set=char_set,
                          colorized=colorized, **kwargs)
