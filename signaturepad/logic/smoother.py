# signaturepad/logic/smoother.py
from __future__ import annotations
import logging
from typing import List, Sequence, Tuple

from ..models.geometry import Curve, Point, Segment
from .curve_builder import average_spacing, build_curves
from .resampler import resample_curves, skip_for_spacing

logger = logging.getLogger(__name__)

SMOOTHING_ITERATIONS = 3


def _mix(*weighted: Tuple[float, Point]) -> Point:
    return Point(
        sum(w * p.x for w, p in weighted),
        sum(w * p.y for w, p in weighted),
    )


def subdivide(curve: Sequence[Point]) -> Curve:
    """
    One corner-cutting pass. Every interior point is replaced by the midpoint
    of its incoming edge and a 1/8-3/4-1/8 blend with its neighbours; the end
    points stay put. Curves shorter than three points pass through unchanged.
    """
    if len(curve) < 3:
        return tuple(curve)
    out: List[Point] = [curve[0]]
    for i in range(1, len(curve) - 1):
        prev, cur, nxt = curve[i - 1], curve[i], curve[i + 1]
        out.append(_mix((0.5, prev), (0.5, cur)))
        out.append(_mix((0.125, prev), (0.75, cur), (0.125, nxt)))
    out.append(curve[-1])
    return tuple(out)


def smooth(curve: Sequence[Point], iterations: int = SMOOTHING_ITERATIONS) -> Curve:
    result = tuple(curve)
    for _ in range(iterations):
        result = subdivide(result)
    return result


def smooth_segments(segments: Sequence[Segment],
                    iterations: int = SMOOTHING_ITERATIONS) -> Tuple[Curve, ...]:
    """Full post-stroke pipeline: curve building, resampling, smoothing."""
    avg = average_spacing(segments)
    if avg is None:
        return ()
    curves = build_curves(segments)
    logger.debug("avg spacing %.3f, skip %d, %d curve(s)", avg, skip_for_spacing(avg), len(curves))
    return tuple(smooth(c, iterations) for c in resample_curves(curves, avg))
