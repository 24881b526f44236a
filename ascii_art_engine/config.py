#!/usr/bin/env python3
"""
Image to ASCII Art Engine - Configuration
=========================================
Conversion settings, their schema and the sample grid computation.

Settings are immutable for the duration of a conversion. They can be built
directly, from a mapping (snake_case or camelCase keys, string values are
coerced, missing keys fall back to defaults) or from a JSON file.
"""

from dataclasses import dataclass, fields, replace, asdict
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import json
import math

from ascii_art_engine.constants import CharacterSet, CHAR_ASPECT_RATIO
from ascii_art_engine.errors import InvalidInputError


Number = Union[int, float]


def round_half_up(value: float) -> int:
    """Round to nearest integer with halves going up (0.5 -> 1)."""
    return int(math.floor(value + 0.5))


# =============================================================================
# SCHEMA
# =============================================================================

@dataclass(frozen=True)
class FieldSpec:
    """Description of one setting, enough to build a form or CLI flag from."""
    name: str
    label: str
    kind: str                                  # 'int', 'bool', 'choice', 'text'
    default: Any
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    choices: Tuple[str, ...] = ()
    alias: Optional[str] = None                # camelCase name used by web callers

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['choices'] = list(self.choices)
        return data


SETTINGS_SCHEMA: Tuple[FieldSpec, ...] = (
    FieldSpec('width', 'Resolution', 'int', 100, minimum=1),
    FieldSpec('height', 'Rows (auto when unset)', 'int', None, minimum=1),
    FieldSpec('stretch_width', 'Width (%)', 'int', 100, 50, 200, alias='stretchWidth'),
    FieldSpec('stretch_height', 'Height (%)', 'int', 100, 50, 200, alias='stretchHeight'),
    FieldSpec('brightness', 'Brightness (%)', 'int', 100, 0, 200),
    FieldSpec('contrast', 'Contrast (%)', 'int', 100, 0, 200),
    FieldSpec('saturation', 'Saturation (%)', 'int', 100, 0, 200),
    FieldSpec('grayscale', 'Grayscale (%)', 'int', 0, 0, 100),
    FieldSpec('invert', 'Invert Colors (%)', 'int', 0, 0, 100),
    FieldSpec('hue', 'Hue Rotation (deg)', 'int', 0, 0, 360),
    FieldSpec('sepia', 'Sepia (%)', 'int', 0, 0, 100),
    FieldSpec('colorized', 'Colorized', 'bool', False),
    FieldSpec('char_set', 'Character Set', 'choice', 'standard',
              choices=CharacterSet.names(), alias='charSet'),
    FieldSpec('custom_chars', 'Custom Characters', 'text', '', alias='customChars'),
)

# Bounds enforced on validation; hue is free and wraps around the circle
_RANGED = {spec.name: spec for spec in SETTINGS_SCHEMA
           if spec.kind == 'int' and spec.name != 'hue'}

_ALIASES = {spec.alias: spec.name for spec in SETTINGS_SCHEMA if spec.alias}
_ALIASES['charSetType'] = 'char_set'

_TRUE_STRINGS = {'1', 'true', 'yes', 'on'}
_FALSE_STRINGS = {'0', 'false', 'no', 'off', ''}


# =============================================================================
# SETTINGS
# =============================================================================

@dataclass(frozen=True)
class ConversionSettings:
    """Settings for a single conversion."""

    # Size parameters
    width: int = 100                           # Output columns
    height: Optional[int] = None               # Output rows (auto if None)
    stretch_width: int = 100                   # Post-scale of columns (%)
    stretch_height: int = 100                  # Post-scale of rows (%)

    # Adjustments, applied in this order
    brightness: Number = 100                   # 0-200 %
    contrast: Number = 100                     # 0-200 %
    saturation: Number = 100                   # 0-200 %
    grayscale: Number = 0                      # 0-100 %
    invert: Number = 0                         # 0-100 %
    sepia: Number = 0                          # 0-100 %
    hue: Number = 0                            # degrees, wraps at 360

    # Glyphs and colour
    colorized: bool = False
    char_set: str = 'standard'
    custom_chars: str = ''

    def __post_init__(self):
        if self.height in ('auto', 0):
            object.__setattr__(self, 'height', None)

        for name in ('width', 'height', 'stretch_width', 'stretch_height'):
            value = getattr(self, name)
            if value is None and name == 'height':
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInputError(f"{name} must be an integer, got {value!r}")

        for name in ('brightness', 'contrast', 'saturation', 'grayscale',
                     'invert', 'sepia', 'hue'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInputError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidInputError(f"{name} must be finite, got {value!r}")

        for name, spec in _RANGED.items():
            value = getattr(self, name)
            if value is None:
                continue
            if spec.minimum is not None and value < spec.minimum:
                raise InvalidInputError(f"{name} must be >= {spec.minimum}, got {value}")
            if spec.maximum is not None and value > spec.maximum:
                raise InvalidInputError(f"{name} must be <= {spec.maximum}, got {value}")

        if not isinstance(self.colorized, bool):
            raise InvalidInputError(f"colorized must be a boolean, got {self.colorized!r}")
        if not isinstance(self.custom_chars, str):
            raise InvalidInputError(f"custom_chars must be a string, got {self.custom_chars!r}")
        breaks = [ch for ch in self.custom_chars if ch.splitlines() != [ch]]
        if breaks:
            raise InvalidInputError(f"custom_chars cannot contain line breaks: {breaks!r}")
        if not isinstance(self.char_set, str) or self.char_set.lower() not in CharacterSet.names():
            raise InvalidInputError(
                f"Unknown char_set: {self.char_set!r}. Available: {list(CharacterSet.names())}"
            )

    @property
    def ramp(self) -> str:
        """The active glyph ramp; custom_chars wins over the named set."""
        if self.custom_chars:
            return self.custom_chars
        chars = CharacterSet.get_preset(self.char_set)
        if not chars:
            raise InvalidInputError("Glyph ramp is empty: set custom_chars or pick a named char_set")
        return chars

    @property
    def is_identity(self) -> bool:
        """True when no adjustment would change a pixel."""
        return (self.brightness == 100 and self.contrast == 100
                and self.saturation == 100 and self.grayscale == 0
                and self.invert == 0 and self.sepia == 0 and self.hue % 360 == 0)

    def replace(self, **changes) -> 'ConversionSettings':
        """Return a copy with some fields changed (validated again)."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None,
                     **overrides) -> 'ConversionSettings':
        """
        Build settings from a mapping such as form values or parsed JSON.

        Args:
            data: Keys in snake_case or the camelCase aliases (charSet,
                customChars, stretchWidth...). Values may be strings.
            **overrides: Applied after ``data``

        Returns:
            Validated ConversionSettings
        """
        merged: Dict[str, Any] = {}
        for key, value in list((data or {}).items()) + list(overrides.items()):
            name = _ALIASES.get(key, key)
            if name not in _FIELD_NAMES:
                raise InvalidInputError(f"Unknown setting: {key!r}")
            if value is None and name != 'height':
                continue
            merged[name] = _coerce(name, value)
        return cls(**merged)

    @classmethod
    def from_json(cls, path: str, **overrides) -> 'ConversionSettings':
        """Load settings from a JSON file holding a single object."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise InvalidInputError(f"Cannot read settings file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise InvalidInputError(f"Settings file {path} must contain a JSON object")
        return cls.from_mapping(data, **overrides)


_FIELD_NAMES = frozenset(f.name for f in fields(ConversionSettings))


def _coerce(name: str, value: Any) -> Any:
    """Turn form-style string values into the field's type."""
    if not isinstance(value, str):
        return value

    text = value.strip()
    if name == 'colorized':
        lowered = text.lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise InvalidInputError(f"colorized must be a boolean, got {value!r}")
    if name in ('char_set', 'custom_chars'):
        return value
    if name == 'height' and text.lower() in ('', 'auto'):
        return None

    try:
        number = float(text)
    except ValueError:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from None
    if number.is_integer():
        return int(number)
    return number


# =============================================================================
# GRID SIZE
# =============================================================================

def resolve_grid_size(settings: ConversionSettings,
                      source_size: Tuple[int, int]) -> Tuple[int, int]:
    """
    Compute the effective sample grid for a source image.

    Rows default to the source aspect ratio scaled by the glyph cell aspect,
    then both axes are post-scaled by their stretch percentages.

    Args:
        settings: Conversion settings
        source_size: (width, height) of the decoded source in pixels

    Returns:
        (effective_width, effective_height)
    """
    src_width, src_height = source_size
    if src_width <= 0 or src_height <= 0:
        raise InvalidInputError(f"Source image has no pixels: {src_width}x{src_height}")

    height = settings.height
    if height is None:
        aspect_ratio = (src_height / src_width) * CHAR_ASPECT_RATIO
        height = round_half_up(settings.width * aspect_ratio)

    effective_width = round_half_up(settings.width * settings.stretch_width / 100)
    effective_height = round_half_up(height * settings.stretch_height / 100)

    if effective_width <= 0 or effective_height <= 0:
        raise InvalidInputError(
            f"Sample grid is empty: {effective_width}x{effective_height} "
            f"(width={settings.width}, height={height})"
        )

    return effective_width, effective_height


# =============================================================================
# INTROSPECTION
# =============================================================================

def describe_settings() -> Dict[str, Any]:
    """
    Report defaults, named ramps and the field schema.

    Every call returns fresh containers, so callers may mutate the result.
    """
    defaults = ConversionSettings().to_dict()
    schema: List[Dict[str, Any]] = [spec.to_dict() for spec in SETTINGS_SCHEMA]
    return {
        'defaults': defaults,
        'char_sets': dict(CharacterSet.presets()),
        'fields': schema,
    }
