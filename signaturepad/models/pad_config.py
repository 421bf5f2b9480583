# signaturepad/models/pad_config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .pad_enums import PenCap


@dataclass(frozen=True)
class PadConfig:
    """
    Presentation parameters injected into every render call.
    Persisted (user-scoped) under namespace 'signaturepad'; defaults come from
    the [Pen], [Surface] and [Capture] sections of the app configuration.
    """
    pen_width: float = 2.0
    pen_cap: PenCap = PenCap.ROUND
    pen_colour: str = "#145394"
    background_colour: str = "#ffffff"

    surface_width: int = 800
    surface_height: int = 220

    leave_timeout_ms: int = 500
    display_only: bool = False

    @property
    def surface_size(self) -> Tuple[int, int]:
        return (self.surface_width, self.surface_height)
