#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Constants
=====================================
Glyph ramps, luminance weights and rendering constants shared by the stages.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


# =============================================================================
# CHARACTER SETS
# =============================================================================

@dataclass(frozen=True)
class CharacterSet:
    """Predefined glyph ramps, ordered dark to light."""

    STANDARD: str = "█▓▒░"
    EXTENDED: str = "@%#*+=-:. "
    BLOCKS: str = "█▓▒░▄▀■□▪▫"
    SIMPLE: str = "#. "

    # Selecting CUSTOM means the ramp comes from custom_chars only
    CUSTOM: str = ""

    @classmethod
    def presets(cls) -> Dict[str, str]:
        """Named ramps usable as ``char_set`` (``custom`` excluded)."""
        return {
            'standard': cls.STANDARD,
            'extended': cls.EXTENDED,
            'blocks': cls.BLOCKS,
            'simple': cls.SIMPLE,
        }

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        """Every accepted ``char_set`` value."""
        return tuple(cls.presets()) + ('custom',)

    @classmethod
    def get_preset(cls, name: str) -> str:
        """Get a ramp by name; ``custom`` resolves to an empty ramp."""
        key = name.lower()
        if key == 'custom':
            return cls.CUSTOM
        presets = cls.presets()
        if key not in presets:
            raise KeyError(name)
        return presets[key]


# =============================================================================
# LUMINANCE AND GEOMETRY
# =============================================================================

# Rec. 601 luma weights, used by every stage that needs a gray value
LUMA_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)

# Glyph cells are roughly twice as tall as wide
CHAR_ASPECT_RATIO = 0.5

# Sepia matrix rows produce R', G', B' from (R, G, B)
SEPIA_MATRIX: Tuple[Tuple[float, float, float], ...] = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)

CONTRAST_MIDPOINT = 128.0


# =============================================================================
# RENDERING
# =============================================================================

MAX_FONT_SIZE = 12
CHAR_WIDTH_RATIO = 0.6                       # monospace advance / font size
BACKGROUND_COLOR = (255, 255, 255)
FOREGROUND_COLOR = (0, 0, 0)

IMAGE_FORMATS: Dict[str, str] = {
    'PNG': 'image/png',
    'WEBP': 'image/webp',
    'JPEG': 'image/jpeg',
}

MONOSPACE_FONTS = (
    "DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/System/Library/Fonts/Menlo.ttc",
    "/System/Library/Fonts/Monaco.dfont",
    "consola.ttf",
)
