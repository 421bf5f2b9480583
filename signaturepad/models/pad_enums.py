# signaturepad/models/pad_enums.py
from __future__ import annotations
from enum import Enum


class PenCap(str, Enum):
    """How the end points of each line are drawn."""
    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"

    @property
    def tk_capstyle(self) -> str:
        # Tk calls the square cap "projecting"
        return "projecting" if self is PenCap.SQUARE else self.value


class InputDevice(str, Enum):
    POINTER = "pointer"
    TOUCH = "touch"


class StrokeState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    LEAVING = "leaving"   # pointer left the surface, finalize is pending
