#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Glyph Mapping
=========================================
Maps every cell of a resampled buffer to a glyph of the active ramp by
weighted luminance, optionally keeping the cell's original colour.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ascii_art_engine.adjustments import luminance
from ascii_art_engine.errors import InvalidInputError


RGB = Tuple[int, int, int]


@dataclass
class GlyphGrid:
    """Glyph rows plus the optional per-cell colour map."""
    lines: List[str]
    colors: Optional[List[List[RGB]]] = None

    @property
    def width(self) -> int:
        return len(self.lines[0]) if self.lines else 0

    @property
    def height(self) -> int:
        return len(self.lines)

    @property
    def text(self) -> str:
        """Rows joined with a trailing newline after each one."""
        return ''.join(line + '\n' for line in self.lines)


def glyph_indices(lum: np.ndarray, ramp_length: int) -> np.ndarray:
    """
    Map luminance values in [0, 256) to ramp positions.

    Luminance is rounded half-up first, then ``floor(L * n / 256)`` capped at
    ``n - 1``. The mapping is non-decreasing in luminance.
    """
    if ramp_length <= 0:
        raise InvalidInputError("Glyph ramp is empty")
    rounded = np.floor(np.asarray(lum, dtype=np.float64) + 0.5)
    idx = np.floor(rounded * ramp_length / 256.0).astype(np.int64)
    return np.clip(idx, 0, ramp_length - 1)


def map_glyphs(adjusted: np.ndarray, ramp: str,
               original: Optional[np.ndarray] = None,
               colorized: bool = False) -> GlyphGrid:
    """
    Build the glyph grid for a buffer.

    Args:
        adjusted: (rows, cols, 3|4) uint8 buffer after adjustments
        ramp: Glyph ramp, index 0 = darkest
        original: Pre-adjustment buffer of the same shape, read for colours
        colorized: Record the original RGB of each cell

    Returns:
        GlyphGrid
    """
    if adjusted.ndim != 3 or adjusted.shape[2] < 3:
        raise InvalidInputError(f"Expected an RGB(A) buffer, got shape {adjusted.shape}")
    rows, cols = adjusted.shape[:2]
    if rows == 0 or cols == 0:
        raise InvalidInputError(f"Sample grid is empty: {cols}x{rows}")

    indices = glyph_indices(luminance(adjusted[..., :3]), len(ramp))
    glyphs = np.array(list(ramp))[indices]
    lines = [''.join(row) for row in glyphs]

    colors = None
    if colorized:
        if original is None:
            raise InvalidInputError("Colorized output needs the original buffer")
        if original.shape[:2] != adjusted.shape[:2]:
            raise InvalidInputError(
                f"Original buffer {original.shape[:2]} does not match {adjusted.shape[:2]}"
            )
        colors = [
            [(int(r), int(g), int(b)) for r, g, b in row]
            for row in original[..., :3].tolist()
        ]

    return GlyphGrid(lines=lines, colors=colors)
