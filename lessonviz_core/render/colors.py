from __future__ import annotations

from functools import lru_cache
import re

from PIL import ImageColor

RGBA = tuple[int, int, int, int]

_RGB_FUNCTION = re.compile(r"^rgba?\(\s*([^)]*)\)$", re.IGNORECASE)


@lru_cache(maxsize=256)
def parse_color(value: str | None) -> RGBA | None:
    """Parse a CSS-style color (hex, rgb()/rgba(), or a named color)."""
    if not value:
        return None
    value = value.strip()
    if value in ("", "none", "transparent"):
        return None
    if value.startswith("#"):
        return _parse_hex(value[1:])
    match = _RGB_FUNCTION.match(value)
    if match is not None:
        return _parse_rgb_function(match.group(1))
    try:
        r, g, b, a = ImageColor.getcolor(value, "RGBA")
    except ValueError:
        return None
    return (r, g, b, a)


def with_opacity(color: RGBA, opacity: float) -> RGBA:
    opacity = min(max(opacity, 0.0), 1.0)
    return (color[0], color[1], color[2], int(round(color[3] * opacity)))


def _parse_hex(hex_value: str) -> RGBA | None:
    try:
        if len(hex_value) == 3:
            return (int(hex_value[0] * 2, 16), int(hex_value[1] * 2, 16), int(hex_value[2] * 2, 16), 255)
        if len(hex_value) == 4:
            return (
                int(hex_value[0] * 2, 16),
                int(hex_value[1] * 2, 16),
                int(hex_value[2] * 2, 16),
                int(hex_value[3] * 2, 16),
            )
        if len(hex_value) == 6:
            return (int(hex_value[0:2], 16), int(hex_value[2:4], 16), int(hex_value[4:6], 16), 255)
        if len(hex_value) == 8:
            return (
                int(hex_value[0:2], 16),
                int(hex_value[2:4], 16),
                int(hex_value[4:6], 16),
                int(hex_value[6:8], 16),
            )
    except ValueError:
        return None
    return None


def _parse_rgb_function(body: str) -> RGBA | None:
    parts = [part.strip() for part in body.split(",")]
    if len(parts) not in (3, 4):
        return None
    try:
        r, g, b = (min(255, max(0, int(float(part)))) for part in parts[:3])
        alpha = 1.0 if len(parts) == 3 else float(parts[3])
    except ValueError:
        return None
    return (r, g, b, int(round(min(max(alpha, 0.0), 1.0) * 255)))
