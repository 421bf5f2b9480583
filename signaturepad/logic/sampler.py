# signaturepad/logic/sampler.py
from __future__ import annotations
import math
from typing import Optional, Tuple

from ..models.geometry import Point


def to_sample(x: float, y: float, offset: Tuple[float, float] = (0, 0)) -> Point:
    """
    Convert a raw pointer position into surface-local integer pixels.
    `offset` is the surface origin in the same coordinate space as (x, y).
    """
    return Point(math.floor(x - offset[0]), math.floor(y - offset[1]))


def is_duplicate(previous: Optional[Point], current: Point) -> bool:
    """A sample equal to the previous one must not produce a segment."""
    return previous is not None and previous == current
