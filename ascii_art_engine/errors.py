#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Errors
==================================
Exception types raised by the conversion engine.
"""


class AsciiArtError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInputError(AsciiArtError, ValueError):
    """Settings or buffers the engine cannot work with (bad sizes, empty ramp...)."""


class SourceUnavailableError(AsciiArtError):
    """The source image could not be opened or decoded."""


class RenderFailureError(AsciiArtError):
    """The output surface could not be allocated, drawn or encoded."""
