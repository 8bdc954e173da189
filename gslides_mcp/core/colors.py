"""
Hex color parsing and conversion to Slides API color objects.
"""

import string
from typing import Dict, NamedTuple, Optional

from gslides_mcp.utils.exceptions import InvalidArgumentError


class Color(NamedTuple):
    """RGB color with components normalized to [0, 1]."""

    red: float
    green: float
    blue: float


def parse_hex_color(value: str) -> Optional[Color]:
    """
    Parse a "#RRGGBB" (or "RRGGBB") string.

    Args:
        value: Hex color string

    Returns:
        Color, or None if the string is not exactly six hex digits
    """
    if not isinstance(value, str):
        return None

    digits = value[1:] if value.startswith("#") else value
    if len(digits) != 6 or any(c not in string.hexdigits for c in digits):
        return None

    return Color(
        int(digits[0:2], 16) / 255.0,
        int(digits[2:4], 16) / 255.0,
        int(digits[4:6], 16) / 255.0,
    )


def require_color(value: Optional[str], field: str) -> Color:
    """
    Parse a hex color or fail with InvalidArgumentError.

    Args:
        value: Hex color string
        field: Input field name used in the error

    Returns:
        Parsed color
    """
    color = parse_hex_color(value) if value else None
    if color is None:
        raise InvalidArgumentError(
            f"invalid {field} '{value}': expected hex format like #FF0000",
            field=field,
            value=value
        )
    return color


def color_to_hex(color: Color) -> str:
    """Format a color as "#RRGGBB", rounding each component."""
    return "#{:02X}{:02X}{:02X}".format(*(round(c * 255) for c in color))


def rgb_color(color: Color) -> Dict[str, float]:
    """Build the API "rgbColor" object."""
    return {"red": color.red, "green": color.green, "blue": color.blue}


def hex_from_api_color(color: Optional[Dict]) -> Optional[str]:
    """
    Convert an API OpaqueColor / OptionalColor payload to hex.

    Theme colors have no fixed RGB value and yield None.
    """
    if not color:
        return None
    rgb = color.get("opaqueColor", color).get("rgbColor")
    if rgb is None:
        return None
    return color_to_hex(Color(rgb.get("red", 0.0), rgb.get("green", 0.0), rgb.get("blue", 0.0)))
