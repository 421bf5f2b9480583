# signaturepad/logic/pen.py
"""
Distance-derived stroke width.

Fast pointer motion leaves samples far apart and draws thin; slow motion leaves
them close together and draws thick. The width stands in for pen pressure.
"""
from __future__ import annotations

from ..models.geometry import Point

MAX_WIDTH = 3.5
MAX_THINNING = 3.0
DISTANCE_SCALE = 0.5


def stroke_width(distance: float) -> float:
    """Width for a line of the given length, clamped to [0, MAX_WIDTH]."""
    thinning = min(distance * DISTANCE_SCALE, MAX_THINNING)
    return max(MAX_WIDTH - thinning, 0.0)


def width_between(a: Point, b: Point) -> float:
    return stroke_width(a.distance_to(b))
