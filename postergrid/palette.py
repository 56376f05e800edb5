"""Intensity palettes.

A palette is exactly five hex colors, indexed by intensity level 0-4.
Palettes can be picked per level or derived as a linear gradient between
an "inactive" and an "active" endpoint color.
"""

from __future__ import annotations

import math
import re

import structlog

logger = structlog.get_logger(__name__)

Palette = tuple[str, str, str, str, str]

PALETTE_SIZE = 5
MAX_LEVEL = PALETTE_SIZE - 1

# Default green contribution palette
DEFAULT_PALETTE: Palette = ("#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39")

GRADIENT_STOPS = (0.25, 0.5, 0.75)

_HEX6 = re.compile(r"#[0-9a-fA-F]{6}")
_HEX_ANY = re.compile(r"[0-9a-fA-F]{3}([0-9a-fA-F]{3})?")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def is_hex6(value: object) -> bool:
    """True if value is a strict '#RRGGBB' string."""
    return isinstance(value, str) and _HEX6.fullmatch(value) is not None


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert a 3- or 6-digit hex color (with or without '#') to (r, g, b).

    Raises:
        ValueError: If hex_color is not a valid hex color.
    """
    h = hex_color.lstrip("#")
    if not _HEX_ANY.fullmatch(h):
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    if len(h) == 3:
        h = "".join(ch * 2 for ch in h)
    return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert (r, g, b) to a lowercase '#rrggbb' string."""
    return f"#{r:02x}{g:02x}{b:02x}"


def interpolate_hex(start_hex: str, end_hex: str, ratio: float) -> str:
    """Blend two colors channel by channel.

    Args:
        start_hex: Color at ratio 0.
        end_hex: Color at ratio 1.
        ratio: Blend position in [0, 1].

    Returns:
        Blended color as '#rrggbb'.
    """
    sr, sg, sb = hex_to_rgb(start_hex)
    er, eg, eb = hex_to_rgb(end_hex)
    return rgb_to_hex(
        _round_half_up(sr + (er - sr) * ratio),
        _round_half_up(sg + (eg - sg) * ratio),
        _round_half_up(sb + (eb - sb) * ratio),
    )


def build_palette_from_endpoints(inactive: str, active: str) -> Palette:
    """Build a 5-step gradient anchored at the two endpoint colors.

    The endpoints are kept as given; only the three inner stops are
    interpolated.
    """
    inner = [interpolate_hex(inactive, active, stop) for stop in GRADIENT_STOPS]
    palette: Palette = (inactive, inner[0], inner[1], inner[2], active)
    logger.debug("palette_built", inactive=inactive, active=active)
    return palette


def color_for_level(level: float, palette: Palette) -> str:
    """Resolve an intensity level to a palette color.

    Levels are rounded to the nearest integer and clamped to 0-4, so
    fractional or out-of-range values never fail.
    """
    # Ints can exceed float range; clamp them without converting
    if isinstance(level, int):
        return palette[max(0, min(MAX_LEVEL, level))]
    if math.isnan(level):
        return palette[0]
    clamped = max(0.0, min(float(MAX_LEVEL), level))
    return palette[_round_half_up(clamped)]


def parse_palette_param(value: str | None) -> Palette | None:
    """Parse a share-link palette ("ebedf0,9be9a8,...").

    Returns None unless the value holds exactly five strict 6-digit hex
    colors ('#' optional).
    """
    if not value:
        return None
    parts = [p if p.startswith("#") else f"#{p}" for p in value.split(",")]
    if len(parts) != PALETTE_SIZE or not all(is_hex6(p) for p in parts):
        return None
    return (parts[0], parts[1], parts[2], parts[3], parts[4])


def palette_to_param(palette: Palette) -> str:
    """Encode a palette for a share link (inverse of parse_palette_param)."""
    return ",".join(color.lstrip("#") for color in palette)
