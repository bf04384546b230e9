"""Background color parsing."""

import re
from typing import Tuple

from colorblend.core.errors import InvalidParameter

_HEX = re.compile(r"#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})")


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """Parse ``#RRGGBB`` (or ``#RGB``) into an RGB triple."""
    match = _HEX.fullmatch(value.strip())
    if not match:
        raise InvalidParameter(f"Not a hex color: '{value}'")

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)

    packed = int(digits, 16)
    return (packed >> 16) & 255, (packed >> 8) & 255, packed & 255


def rgb_to_hex(rgb: Tuple[int, int, int]) -> str:
    r, g, b = (int(v) for v in rgb[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


def parse_color(value: str) -> Tuple[int, int, int]:
    """
    Parse a background color.

    Accepts hex (``#336699``, ``369``) or comma separated samples
    (``51,102,153``).
    """
    text = value.strip()
    if "," not in text:
        return hex_to_rgb(text)

    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3:
        raise InvalidParameter(f"Color must have 3 components: '{value}'")

    try:
        rgb = tuple(int(p) for p in parts)
    except ValueError as e:
        raise InvalidParameter(f"Color components must be integers: '{value}'") from e

    if any(v < 0 or v > 255 for v in rgb):
        raise InvalidParameter(f"Color components must be within 0-255: '{value}'")
    return rgb
