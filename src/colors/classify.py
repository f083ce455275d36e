from __future__ import annotations

import math
import re
from typing import Sequence

# Closed set of human color names produced by classify_hsl.
BLACK = "Black"
DARK_GRAY = "Dark gray"
GRAY = "Gray"
LIGHT_GRAY = "Light gray"
WHITE = "White"
BROWN = "Brown"
RED = "Red"
ORANGE = "Orange"
YELLOW = "Yellow"
GREEN = "Green"
CYAN = "Cyan"
BLUE = "Blue"
VIOLET = "Violet"
PINK = "Pink"

COLOR_NAMES = (
    BLACK,
    DARK_GRAY,
    GRAY,
    LIGHT_GRAY,
    WHITE,
    BROWN,
    RED,
    ORANGE,
    YELLOW,
    GREEN,
    CYAN,
    BLUE,
    VIOLET,
    PINK,
)

# Filter groups for browsing a collection by color. A name may belong to several groups.
COLOR_GROUPS: dict[str, tuple[str, ...]] = {
    "Red": (RED, PINK),
    "Orange": (ORANGE, BROWN),
    "Yellow": (YELLOW,),
    "Green": (GREEN, CYAN),
    "Blue": (BLUE, CYAN),
    "Violet": (VIOLET, PINK),
    "Neutral": (BLACK, GRAY, DARK_GRAY, LIGHT_GRAY, WHITE, BROWN),
}

# Single filter category per name (used when an artwork must land in exactly one bucket).
_CATEGORY_BY_NAME = {
    RED: "red",
    PINK: "pink",
    ORANGE: "orange",
    BROWN: "orange",
    YELLOW: "yellow",
    GREEN: "green",
    CYAN: "blue",
    BLUE: "blue",
    VIOLET: "purple",
    BLACK: "neutral",
    DARK_GRAY: "neutral",
    GRAY: "neutral",
    LIGHT_GRAY: "neutral",
    WHITE: "neutral",
}

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[int, int, int]:
    """
    RGB (0..255) -> HSL rounded to integers: h in 0..360, s and l in 0..100.
    """
    rf, gf, bf = r / 255.0, g / 255.0, b / 255.0
    mx = max(rf, gf, bf)
    mn = min(rf, gf, bf)
    l = (mx + mn) / 2.0

    if mx == mn:
        h = s = 0.0
    else:
        d = mx - mn
        s = d / (2.0 - mx - mn) if l > 0.5 else d / (mx + mn)
        if mx == rf:
            h = ((gf - bf) / d + (6.0 if gf < bf else 0.0)) / 6.0
        elif mx == gf:
            h = ((bf - rf) / d + 2.0) / 6.0
        else:
            h = ((rf - gf) / d + 4.0) / 6.0

    return _round_half_up(h * 360), _round_half_up(s * 100), _round_half_up(l * 100)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def classify_hsl(h: float, s: float, l: float) -> str:
    if s < 15:
        if l < 20:
            return BLACK
        if l < 40:
            return DARK_GRAY
        if l < 60:
            return GRAY
        if l < 80:
            return LIGHT_GRAY
        return WHITE

    # Low-saturation dark warm tones.
    if s < 40 and l < 50 and (h < 40 or h > 350):
        return BROWN

    if h < 15 or h >= 345:
        return RED
    if h < 40:
        return BROWN if l < 50 else ORANGE
    if h < 70:
        return YELLOW
    if h < 150:
        return GREEN
    if h < 200:
        return CYAN
    if h < 260:
        return BLUE
    if h < 290:
        return VIOLET
    return PINK


def classify_rgb(rgb: Sequence[int]) -> str:
    r, g, b = (int(c) for c in rgb[:3])
    return classify_hsl(*rgb_to_hsl(r, g, b))


def rgb_to_hex(rgb: Sequence[int]) -> str:
    r, g, b = (max(0, min(255, int(c))) for c in rgb[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    m = _HEX_RE.match(value.strip())
    if not m:
        raise ValueError(f"Not a 6-digit hex color: {value!r}")
    return int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16)


def color_category(color: str | Sequence[int] | None) -> str | None:
    """
    Collection filter category (red, orange, yellow, green, blue, purple, pink, neutral)
    for a hex string or RGB triple; None when there is no usable color.
    """
    if color is None:
        return None
    if isinstance(color, str):
        try:
            rgb = hex_to_rgb(color)
        except ValueError:
            return None
    else:
        rgb = tuple(int(c) for c in color[:3])
    return _CATEGORY_BY_NAME[classify_rgb(rgb)]


def color_distance(rgb1: Sequence[int], rgb2: Sequence[int]) -> float:
    return math.sqrt(sum((int(a) - int(b)) ** 2 for a, b in zip(rgb1[:3], rgb2[:3])))
