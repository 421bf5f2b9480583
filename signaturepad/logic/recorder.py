# signaturepad/logic/recorder.py
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple

from ..models.geometry import Point, Segment
from ..models.pad_config import PadConfig
from ..models.pad_enums import InputDevice
from .pen import width_between
from .sampler import is_duplicate
from .surface import Surface

# Vertical nudge for the first sample of a stroke so a single tap leaves a dot
FIRST_SAMPLE_OFFSET = 1


@dataclass(frozen=True)
class StrokeContext:
    """State of one pen-down run, threaded through every record() call."""
    device: InputDevice = InputDevice.POINTER
    previous: Optional[Point] = None
    leave_timer: Any = None


class SegmentRecorder:
    """
    Turns consecutive samples into segments and strokes each one immediately
    onto the visible surface with a distance-derived width.
    """

    def __init__(self, surface: Surface, config: PadConfig) -> None:
        self._surface = surface
        self._cfg = config

    def record(self, ctx: StrokeContext, current: Point, *,
               first_of_stroke: bool = False) -> Tuple[StrokeContext, Optional[Segment]]:
        if is_duplicate(ctx.previous, current):
            return ctx, None

        previous = ctx.previous
        if previous is None:
            if not first_of_stroke:
                return replace(ctx, previous=current), None
            previous = current
            current = Point(current.x, current.y + FIRST_SAMPLE_OFFSET)

        self._surface.stroke_line(
            previous, current,
            width=width_between(previous, current),
            colour=self._cfg.pen_colour,
            cap=self._cfg.pen_cap,
        )
        return replace(ctx, previous=current), Segment.between(previous, current)
