#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Result
==================================
The value handed back to callers after a conversion.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import base64

from ascii_art_engine.constants import IMAGE_FORMATS


@dataclass(frozen=True)
class ConversionResult:
    """Result of an image to ASCII conversion."""
    text: str                                          # Rows, each ending in '\n'
    image: bytes                                       # Encoded rasterization of text
    image_format: str = 'PNG'                          # Pillow format name of image
    width: int = 0                                     # Grid columns
    height: int = 0                                    # Grid rows
    colors: Optional[List[List[Tuple[int, int, int]]]] = None   # Original RGB per cell
    elapsed: float = 0.0                               # Conversion time in seconds

    @property
    def lines(self) -> List[str]:
        return self.text.split('\n')[:-1]

    @property
    def mime_type(self) -> str:
        return IMAGE_FORMATS.get(self.image_format.upper(), 'application/octet-stream')

    def to_data_uri(self) -> str:
        """Encode ``image`` as a base64 ``data:`` URI."""
        payload = base64.b64encode(self.image).decode('ascii')
        return f"data:{self.mime_type};base64,{payload}"

    def __repr__(self) -> str:
        return (f"ConversionResult(width={self.width}, height={self.height}, "
                f"image_format={self.image_format!r}, colorized={self.colors is not None})")

    def __str__(self) -> str:
        return self.text
