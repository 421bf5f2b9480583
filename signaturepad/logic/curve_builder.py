# signaturepad/logic/curve_builder.py
from __future__ import annotations
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models.geometry import Curve, Point, Segment


def build_curves(segments: Iterable[Segment]) -> Tuple[Curve, ...]:
    """
    Regroup the flat segment log into one polyline per continuous pen-down run.

    A new curve starts whenever a segment does not begin where the previous one
    ended (pen lifted and repositioned, or a replay boundary).
    """
    runs: List[List[Point]] = []
    last: Optional[Point] = None
    for seg in segments:
        start = seg.start
        if last is None or start != last:
            runs.append([start])
        end = seg.end
        runs[-1].append(end)
        last = end
    return tuple(tuple(run) for run in runs)


def average_spacing(segments: Sequence[Segment]) -> Optional[float]:
    """Mean segment length, or None for an empty log."""
    if not segments:
        return None
    return sum(seg.length for seg in segments) / len(segments)
