# signaturepad/gui/tk_surface.py
from __future__ import annotations
import tkinter as tk
from typing import Any, Callable

from ..exceptions.errors import SurfaceUnavailable
from ..models.geometry import Point
from ..models.pad_enums import PenCap


class TkCanvasSurface:
    """Surface adapter drawing onto a tk.Canvas."""

    def __init__(self, canvas: tk.Canvas) -> None:
        try:
            self._w = int(canvas.cget("width"))
            self._h = int(canvas.cget("height"))
        except tk.TclError as exc:
            raise SurfaceUnavailable(f"Canvas not usable: {exc}") from exc
        self._canvas = canvas

    @property
    def width(self) -> int:
        return self._w

    @property
    def height(self) -> int:
        return self._h

    def clear(self) -> None:
        self._canvas.delete("all")

    def fill(self, colour: str) -> None:
        self._canvas.configure(bg=colour)
        self._canvas.create_rectangle(0, 0, self._w, self._h, fill=colour, outline="")

    def stroke_line(self, start: Point, end: Point, *, width: float,
                    colour: str, cap: PenCap) -> None:
        self._canvas.create_line(
            start.x, start.y, end.x, end.y,
            fill=colour,
            width=width,
            capstyle=cap.tk_capstyle,
        )


class TkScheduler:
    """Leave-timer scheduling on the Tk event loop."""

    def __init__(self, widget: tk.Misc) -> None:
        self._widget = widget

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        return self._widget.after(delay_ms, callback)

    def cancel(self, handle: Any) -> None:
        self._widget.after_cancel(handle)
