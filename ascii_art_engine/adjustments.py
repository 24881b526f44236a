#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Pixel Adjustments
=============================================
Per-pixel colour transforms applied to an RGBA buffer before glyph mapping.

The chain always runs in the same order: brightness, contrast, saturation,
grayscale, invert, sepia, hue. Every step clamps its output to [0, 255].
Steps sitting at their neutral value are skipped, and alpha is never touched.
"""

import logging

import numpy as np

from ascii_art_engine.color_space import rgb_to_hsl_array, hsl_to_rgb_array
from ascii_art_engine.config import ConversionSettings
from ascii_art_engine.constants import LUMA_WEIGHTS, SEPIA_MATRIX, CONTRAST_MIDPOINT
from ascii_art_engine.errors import InvalidInputError


logger = logging.getLogger(__name__)

_LUMA = np.array(LUMA_WEIGHTS, dtype=np.float64)
_SEPIA = np.array(SEPIA_MATRIX, dtype=np.float64)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """Weighted luminance of an (..., 3) array, same shape minus the last axis."""
    return np.asarray(rgb, dtype=np.float64) @ _LUMA


class ImageAdjuster:
    """Colour transforms on float RGB arrays of shape (..., 3)."""

    @staticmethod
    def clamp(rgb: np.ndarray) -> np.ndarray:
        return np.clip(rgb, 0.0, 255.0)

    @staticmethod
    def brightness(rgb: np.ndarray, percent: float) -> np.ndarray:
        """Scale every channel by percent/100."""
        return ImageAdjuster.clamp(rgb * (percent / 100.0))

    @staticmethod
    def contrast(rgb: np.ndarray, percent: float) -> np.ndarray:
        """Stretch channels around the 128 midpoint."""
        factor = percent / 100.0
        return ImageAdjuster.clamp(factor * (rgb - CONTRAST_MIDPOINT) + CONTRAST_MIDPOINT)

    @staticmethod
    def saturation(rgb: np.ndarray, percent: float) -> np.ndarray:
        """Push channels toward (or away from) the pixel's luminance."""
        gray = luminance(rgb)[..., np.newaxis]
        return ImageAdjuster.clamp(gray + (rgb - gray) * (percent / 100.0))

    @staticmethod
    def grayscale(rgb: np.ndarray, percent: float) -> np.ndarray:
        level = percent / 100.0
        gray = luminance(rgb)[..., np.newaxis]
        return ImageAdjuster.clamp(rgb * (1 - level) + gray * level)

    @staticmethod
    def invert(rgb: np.ndarray, percent: float) -> np.ndarray:
        level = percent / 100.0
        return ImageAdjuster.clamp(rgb * (1 - level) + (255.0 - rgb) * level)

    @staticmethod
    def sepia(rgb: np.ndarray, percent: float) -> np.ndarray:
        level = percent / 100.0
        toned = rgb @ _SEPIA.T
        return ImageAdjuster.clamp(rgb * (1 - level) + toned * level)

    @staticmethod
    def hue(rgb: np.ndarray, degrees: float) -> np.ndarray:
        """Rotate hue through an HSL round trip."""
        hsl = rgb_to_hsl_array(rgb)
        hsl[..., 0] = (hsl[..., 0] + degrees) % 360.0
        return ImageAdjuster.clamp(hsl_to_rgb_array(hsl))

    @classmethod
    def apply(cls, rgb: np.ndarray, settings: ConversionSettings) -> np.ndarray:
        """
        Run the whole chain on a float RGB array.

        Args:
            rgb: Float array of shape (..., 3), channels in [0, 255]
            settings: Conversion settings carrying the adjustment levels

        Returns:
            New float array with the adjustments applied
        """
        if settings.brightness != 100:
            rgb = cls.brightness(rgb, settings.brightness)
        if settings.contrast != 100:
            rgb = cls.contrast(rgb, settings.contrast)
        if settings.saturation != 100:
            rgb = cls.saturation(rgb, settings.saturation)
        if settings.grayscale > 0:
            rgb = cls.grayscale(rgb, settings.grayscale)
        if settings.invert > 0:
            rgb = cls.invert(rgb, settings.invert)
        if settings.sepia > 0:
            rgb = cls.sepia(rgb, settings.sepia)
        if settings.hue % 360 != 0:
            rgb = cls.hue(rgb, settings.hue)
        return rgb


def apply_adjustments(buffer: np.ndarray, settings: ConversionSettings) -> None:
    """
    Apply the adjustment chain to an RGBA buffer in place.

    Args:
        buffer: uint8 array of shape (height, width, 4)
        settings: Conversion settings
    """
    if not isinstance(buffer, np.ndarray) or buffer.dtype != np.uint8 \
            or buffer.ndim != 3 or buffer.shape[2] != 4:
        raise InvalidInputError(
            f"Expected a (height, width, 4) uint8 buffer, got "
            f"{getattr(buffer, 'shape', None)} {getattr(buffer, 'dtype', type(buffer))}"
        )

    if settings.is_identity:
        logger.debug("Adjustments are neutral, buffer left untouched")
        return

    rgb = ImageAdjuster.apply(buffer[..., :3].astype(np.float64), settings)
    buffer[..., :3] = np.rint(rgb).astype(np.uint8)
