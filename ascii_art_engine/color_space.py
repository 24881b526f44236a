#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Color Space
=======================================
RGB <-> HSL conversions. Hue is in degrees [0, 360), saturation and
lightness in [0, 1]. Scalar helpers work on single pixels, the ``*_array``
variants on ``(..., 3)`` float arrays with channels in [0, 255].
"""

from typing import Tuple
import numpy as np


def clamp(value: float) -> float:
    """Clamp a channel value to [0, 255]."""
    return max(0.0, min(255.0, value))


# =============================================================================
# SCALAR CONVERSIONS
# =============================================================================

def rgb_to_hsl(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """Convert 0-255 RGB to (hue degrees, saturation, lightness)."""
    r, g, b = r / 255.0, g / 255.0, b / 255.0

    max_c = max(r, g, b)
    min_c = min(r, g, b)
    lightness = (max_c + min_c) / 2

    if max_c == min_c:
        return 0.0, 0.0, lightness

    d = max_c - min_c
    if lightness > 0.5:
        saturation = d / (2 - max_c - min_c)
    else:
        saturation = d / (max_c + min_c)

    if max_c == r:
        hue = (g - b) / d + (6 if g < b else 0)
    elif max_c == g:
        hue = (b - r) / d + 2
    else:
        hue = (r - g) / d + 4

    return (hue * 60.0) % 360.0, saturation, lightness


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    """Convert (hue degrees, saturation, lightness) back to 0-255 RGB."""
    if s == 0:
        value = int(round(clamp(l * 255)))
        return value, value, value

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    h = (h % 360.0) / 360.0

    r = _hue_to_rgb(p, q, h + 1 / 3)
    g = _hue_to_rgb(p, q, h)
    b = _hue_to_rgb(p, q, h - 1 / 3)

    return tuple(int(round(clamp(c * 255))) for c in (r, g, b))


# =============================================================================
# VECTORIZED CONVERSIONS
# =============================================================================

def rgb_to_hsl_array(rgb: np.ndarray) -> np.ndarray:
    """
    Convert an array of RGB values to HSL.

    Args:
        rgb: Float array of shape (..., 3) with channels in [0, 255]

    Returns:
        Array of the same shape holding (hue degrees, saturation, lightness)
    """
    arr = np.asarray(rgb, dtype=np.float64) / 255.0
    r, g, b = arr[..., 0], arr[..., 1], arr[..., 2]

    max_c = arr.max(axis=-1)
    min_c = arr.min(axis=-1)
    d = max_c - min_c
    lightness = (max_c + min_c) / 2

    chromatic = d > 0
    safe_d = np.where(chromatic, d, 1.0)

    denom = np.where(lightness > 0.5, 2 - max_c - min_c, max_c + min_c)
    saturation = np.where(chromatic, d / np.where(denom == 0, 1.0, denom), 0.0)

    # Sector selection follows the scalar version: red, then green, then blue
    hue_r = (g - b) / safe_d + np.where(g < b, 6.0, 0.0)
    hue_g = (b - r) / safe_d + 2
    hue_b = (r - g) / safe_d + 4
    hue = np.where(max_c == r, hue_r, np.where(max_c == g, hue_g, hue_b))
    hue = np.where(chromatic, (hue * 60.0) % 360.0, 0.0)

    return np.stack([hue, saturation, lightness], axis=-1)


def _hue_to_rgb_array(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.where(t < 0, t + 1, t)
    t = np.where(t > 1, t - 1, t)
    return np.select(
        [t < 1 / 6, t < 1 / 2, t < 2 / 3],
        [p + (q - p) * 6 * t, q, p + (q - p) * (2 / 3 - t) * 6],
        default=p,
    )


def hsl_to_rgb_array(hsl: np.ndarray) -> np.ndarray:
    """
    Convert an array of HSL values to RGB.

    Args:
        hsl: Array of shape (..., 3) holding (hue degrees, saturation, lightness)

    Returns:
        Float array of shape (..., 3) with channels clipped to [0, 255]
    """
    hsl = np.asarray(hsl, dtype=np.float64)
    h = (hsl[..., 0] % 360.0) / 360.0
    s = hsl[..., 1]
    l = hsl[..., 2]

    q = np.where(l < 0.5, l * (1 + s), l + s - l * s)
    p = 2 * l - q

    rgb = np.stack([
        _hue_to_rgb_array(p, q, h + 1 / 3),
        _hue_to_rgb_array(p, q, h),
        _hue_to_rgb_array(p, q, h - 1 / 3),
    ], axis=-1)

    # Achromatic pixels carry their lightness on every channel
    gray = np.repeat(l[..., np.newaxis], 3, axis=-1)
    rgb = np.where((s == 0)[..., np.newaxis], gray, rgb)

    return np.clip(rgb * 255.0, 0, 255)
