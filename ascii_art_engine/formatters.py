#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Formatters
======================================
Terminal (ANSI) and HTML renderings of a conversion result. Colourized
results use their per-cell colour map, monochrome ones pass through as text.
"""

from typing import Literal, Tuple
import html

from ascii_art_engine.result import ConversionResult


RGB = Tuple[int, int, int]


# =============================================================================
# ANSI COLOR OUTPUT
# =============================================================================

class AnsiColorFormatter:
    """Format ASCII art with ANSI color codes for terminal output."""

    RESET = "\033[0m"

    @staticmethod
    def rgb_to_ansi_24bit(r: int, g: int, b: int) -> str:
        """True color foreground code."""
        return f"\033[38;2;{r};{g};{b}m"

    @staticmethod
    def rgb_to_ansi_256(r: int, g: int, b: int) -> str:
        """256-color palette foreground code."""
        if r == g == b:
            if r < 8:
                color = 16
            elif r > 248:
                color = 231
            else:
                color = round((r - 8) / 247 * 24) + 232
        else:
            # 6x6x6 color cube
            color = 16 + (36 * round(r / 255 * 5)) + (6 * round(g / 255 * 5)) + round(b / 255 * 5)
        return f"\033[38;5;{color}m"

    @staticmethod
    def rgb_to_ansi_16(r: int, g: int, b: int) -> str:
        """16-color foreground code."""
        bright = (r + g + b) / 3 > 127
        color = (1 if r > 127 else 0) + ((1 if g > 127 else 0) << 1) + ((1 if b > 127 else 0) << 2)
        return f"\033[{90 + color if bright else 30 + color}m"

    @classmethod
    def color_code(cls, rgb: RGB, color_mode: str) -> str:
        if color_mode == '24bit':
            return cls.rgb_to_ansi_24bit(*rgb)
        if color_mode == '256':
            return cls.rgb_to_ansi_256(*rgb)
        if color_mode == '16':
            return cls.rgb_to_ansi_16(*rgb)
        raise ValueError(f"Unknown color mode: {color_mode}")

    @classmethod
    def format_result(cls, result: ConversionResult,
                      color_mode: Literal['24bit', '256', '16'] = '24bit') -> str:
        """
        Format a result with ANSI colors.

        Args:
            result: ConversionResult, colourized or not
            color_mode: '24bit', '256' or '16'

        Returns:
            String with ANSI color codes, one line per grid row
        """
        if result.colors is None:
            return result.text

        output_lines = []
        for line, color_line in zip(result.lines, result.colors):
            output = ""
            prev_color = None
            for char, rgb in zip(line, color_line):
                # Only emit a code when the color changes
                if rgb != prev_color:
                    output += cls.color_code(rgb, color_mode)
                    prev_color = rgb
                output += char
            output_lines.append(output + cls.RESET)

        return ''.join(line + '\n' for line in output_lines)


# =============================================================================
# HTML OUTPUT
# =============================================================================

class HtmlFormatter:
    """Format ASCII art as a standalone HTML page."""

    @staticmethod
    def format_result(result: ConversionResult,
                      font_size: str = "10px",
                      font_family: str = "monospace",
                      background_color: str = "#ffffff",
                      line_height: float = 1.0) -> str:
        """
        Format a result as HTML, with one colored span per color run.

        Args:
            result: ConversionResult with optional color data
            font_size: CSS font size
            font_family: CSS font family
            background_color: Page background
            line_height: Line height multiplier

        Returns:
            HTML document string
        """
        body = ""
        if result.colors is None:
            body = html.escape(result.text)
        else:
            for line, color_line in zip(result.lines, result.colors):
                prev_color = None
                for char, rgb in zip(line, color_line):
                    if rgb != prev_color:
                        if prev_color is not None:
                            body += "</span>"
                        body += '<span style="color:#{:02X}{:02X}{:02X}">'.format(*rgb)
                        prev_color = rgb
                    body += html.escape(char)
                if prev_color is not None:
                    body += "</span>"
                body += '\n'

        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>
        .ascii-art {{
            font-family: {font_family};
            font-size: {font_size};
            line-height: {line_height};
            background-color: {background_color};
            color: #000000;
            white-space: pre;
            display: inline-block;
            padding: 10px;
        }}
    </style>
</head>
<body>
<div class="ascii-art">
{body}</div>
</body>
</html>"""
