# signaturepad/logic/resampler.py
"""
Adaptive point thinning ahead of smoothing.

Tightly spaced (slow) strokes keep more points, sparse (fast) strokes fewer.
Both the arc length and the number of points that may be skipped between two
kept points are bounded.
"""
from __future__ import annotations
import math
from typing import List, Sequence, Tuple

from ..models.geometry import Curve, Point

MIN_SKIP = 4
SKIP_BASE = 12
MAX_SKIPPED_ARC = 25.0


def skip_for_spacing(avg_spacing: float) -> int:
    return max(MIN_SKIP, math.floor(SKIP_BASE - avg_spacing))


def resample(curve: Sequence[Point], skip: int) -> Curve:
    if not curve:
        return ()
    kept: List[Point] = [curve[0]]
    arc = 0.0
    count = 0
    for prev, point in zip(curve, curve[1:]):
        arc += prev.distance_to(point)
        count += 1
        if arc > MAX_SKIPPED_ARC or count > skip:
            kept.append(point)
            arc = 0.0
            count = 0
    if kept[-1] != curve[-1]:
        kept.append(curve[-1])
    return tuple(kept)


def resample_curves(curves: Sequence[Curve], avg_spacing: float) -> Tuple[Curve, ...]:
    skip = skip_for_spacing(avg_spacing)
    return tuple(resample(c, skip) for c in curves)
