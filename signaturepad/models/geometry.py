# signaturepad/models/geometry.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Point:
    """
    Position on the drawing surface, origin top-left, y pointing down.
    Samples taken from pointer input always carry integer pixel coordinates.
    """
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Segment:
    """
    One increment of pen motion: from the pen position before (move) to the
    position after (line). Chained segments share endpoints while the pen is down.
    """
    move_x: float
    move_y: float
    line_x: float
    line_y: float

    @classmethod
    def between(cls, start: Point, end: Point) -> "Segment":
        return cls(move_x=start.x, move_y=start.y, line_x=end.x, line_y=end.y)

    @property
    def start(self) -> Point:
        return Point(self.move_x, self.move_y)

    @property
    def end(self) -> Point:
        return Point(self.line_x, self.line_y)

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def as_record(self) -> Dict[str, float]:
        """Interchange record, keys in the order stored signatures use."""
        return {"lx": self.line_x, "ly": self.line_y, "mx": self.move_x, "my": self.move_y}


Curve = Tuple[Point, ...]
