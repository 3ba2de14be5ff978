"""
Visual encodings for the globe: colors, stroke widths, marker sizes.

All functions are deterministic and stateless. Counts are normalized against
the maximum observed count, and sizes use square-root scaling so busy
airports/routes do not drown out the rest.
"""

import math
import re
from typing import Tuple

YEAR_COLORS = {
    2008: "#3b82f6", 2009: "#6366f1", 2010: "#8b5cf6", 2011: "#a855f7",
    2012: "#c026d3", 2013: "#d946ef", 2014: "#e879f9", 2015: "#f472b6",
    2016: "#fb7185", 2017: "#f43f5e", 2018: "#ef4444", 2019: "#f97316",
    2020: "#fb923c", 2021: "#fbbf24", 2022: "#facc15", 2023: "#a3e635",
    2024: "#4ade80", 2025: "#22d3ee",
}
FALLBACK_COLOR = "#a855f7"

# (min ratio, color), checked top-down
FREQUENCY_BANDS = (
    (0.7, "#ef4444"),  # very frequent
    (0.4, "#f97316"),
    (0.2, "#facc15"),
)

MIN_STROKE = 0.3
MAX_STROKE = 1.5
MIN_MARKER_SIZE = 0.15
MAX_MARKER_SIZE = 0.6

HIGHLIGHT_GRADIENT = ("rgba(0, 255, 255, 0.9)", "rgba(255, 255, 255, 0.9)")
DIMMED_GRADIENT = ("rgba(180, 150, 255, 0.15)", "rgba(255, 255, 255, 0.15)")
DIM_ALPHA = "0.15"

_TRAILING_ALPHA = re.compile(r"[\d.]+\)$")


def _num(value: float) -> str:
    """Render a number the way CSS strings expect (no trailing ``.0``)."""
    return f"{round(value, 4):g}"


def _ratio(count: float, max_count: float) -> float:
    if max_count <= 0:
        return 0.0
    return count / max_count


def year_color(year: int) -> str:
    return YEAR_COLORS.get(year, FALLBACK_COLOR)


def frequency_color(count: int, max_count: int) -> str:
    ratio = _ratio(count, max_count)
    for threshold, color in FREQUENCY_BANDS:
        if ratio > threshold:
            return color
    return FALLBACK_COLOR


def airline_hue(airline: str) -> int:
    return sum(ord(ch) for ch in (airline or "")) % 360


def airline_color(airline: str) -> str:
    """Stable but arbitrary color per airline name."""
    return f"hsl({airline_hue(airline)}, 70%, 60%)"


def default_gradient(count: int, max_count: int) -> Tuple[str, str]:
    """Purple-to-white arc gradient, more opaque on busier routes."""
    alpha = _num(0.5 + min(_ratio(count, max_count), 1) * 0.4)
    return (f"rgba(180, 150, 255, {alpha})", f"rgba(255, 255, 255, {alpha})")


def stroke_width(count: int, max_count: int) -> float:
    return MIN_STROKE + math.sqrt(_ratio(count, max_count)) * (MAX_STROKE - MIN_STROKE)


def marker_scale(visits: int, max_visits: int) -> float:
    return math.sqrt(_ratio(visits, max_visits))


def marker_size(visits: int, max_visits: int) -> float:
    return MIN_MARKER_SIZE + marker_scale(visits, max_visits) * (MAX_MARKER_SIZE - MIN_MARKER_SIZE)


def marker_hsl(visits: int, max_visits: int) -> Tuple[float, float, float]:
    """Gold for quiet airports, warmer and brighter for busy ones."""
    s = marker_scale(visits, max_visits)
    return 45 - s * 15, 70 + s * 30, 50 + s * 15


def hsl(hue: float, saturation: float, lightness: float) -> str:
    return f"hsl({_num(hue)}, {_num(saturation)}%, {_num(lightness)}%)"


def marker_color(visits: int, max_visits: int) -> str:
    return hsl(*marker_hsl(visits, max_visits))


def animation_ms(distance: float) -> float:
    """Constant apparent speed: ~1000 km per 3 seconds, never under 2 seconds."""
    return max(2000.0, distance / 1000 * 3000)


def dim_color(color):
    """Fade a color to the background.

    Gradient pairs collapse to the dimmed purple gradient; single colors get
    their trailing alpha replaced. Colors without an alpha are returned as-is.
    """
    if isinstance(color, tuple):
        return DIMMED_GRADIENT
    return _TRAILING_ALPHA.sub(DIM_ALPHA + ")", color)
