"""
CSS color parsing.

Converts a CSS color string into a 24-bit RGB integer. Supported forms:

- Named colors: ``red``, ``navy``, ``white``, ...
- Hex: ``#ff0000``, ``#f00`` or ``ff0000``
- Functional: ``rgb(255, 0, 0)``

Malformed strings raise ``ValueError``.
"""

import re
from typing import Tuple


# CSS 2.1 basic keywords plus the common aliases
NAMED_COLORS = {
    "black": 0x000000,
    "silver": 0xC0C0C0,
    "gray": 0x808080,
    "grey": 0x808080,
    "white": 0xFFFFFF,
    "maroon": 0x800000,
    "red": 0xFF0000,
    "purple": 0x800080,
    "fuchsia": 0xFF00FF,
    "magenta": 0xFF00FF,
    "green": 0x008000,
    "lime": 0x00FF00,
    "olive": 0x808000,
    "yellow": 0xFFFF00,
    "navy": 0x000080,
    "blue": 0x0000FF,
    "teal": 0x008080,
    "aqua": 0x00FFFF,
    "cyan": 0x00FFFF,
    "orange": 0xFFA500,
}

_HEX_RE = re.compile(r"^#?([0-9a-f]{3}|[0-9a-f]{6})$")
_RGB_RE = re.compile(r"^rgb\s*\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$")


def rgb_to_number(r: int, g: int, b: int) -> int:
    """
    Pack RGB components into a 24-bit integer.

    Args:
        r: Red component (0-255).
        g: Green component (0-255).
        b: Blue component (0-255).

    Returns:
        The packed ``0xRRGGBB`` value.

    Raises:
        ValueError: If a component is outside 0-255.
    """
    for component in (r, g, b):
        if not 0 <= component <= 255:
            raise ValueError(f"RGB component out of range: {component}")
    return (r << 16) | (g << 8) | b


def number_to_rgb(value: int) -> Tuple[int, int, int]:
    """Split a 24-bit integer into its RGB components."""
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def parse_css_color(color_str: str) -> int:
    """
    Parse a CSS color string to a 24-bit RGB integer.

    Args:
        color_str: The color, e.g. ``"red"``, ``"#ff0000"`` or
            ``"rgb(255, 0, 0)"``. Case and surrounding whitespace are ignored.

    Returns:
        The color as ``0xRRGGBB``.

    Raises:
        ValueError: If the string is not a recognised CSS color.
    """
    if not isinstance(color_str, str):
        raise ValueError(f"Color must be a string, got {type(color_str).__name__}")

    text = color_str.strip().lower()

    if text in NAMED_COLORS:
        return NAMED_COLORS[text]

    hex_match = _HEX_RE.match(text)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return int(digits, 16)

    rgb_match = _RGB_RE.match(text)
    if rgb_match:
        r, g, b = map(int, rgb_match.groups())
        return rgb_to_number(r, g, b)

    raise ValueError(f"Unknown color format: {color_str}")
