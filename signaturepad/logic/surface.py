# signaturepad/logic/surface.py
from __future__ import annotations
import io
from typing import Protocol, Tuple

from PIL import Image, ImageDraw

from ..models.geometry import Point
from ..models.pad_enums import PenCap


class Surface(Protocol):
    """
    Minimal drawing target the pad renders onto.
    Implementations: PilSurface (offscreen), TkCanvasSurface (visible).
    """
    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def clear(self) -> None: ...

    def fill(self, colour: str) -> None: ...

    def stroke_line(self, start: Point, end: Point, *, width: float,
                    colour: str, cap: PenCap) -> None: ...


class PilSurface:
    """
    Offscreen RGBA surface backed by a Pillow image.
    Used for bitmap export; also handy as a headless visible surface.
    """

    def __init__(self, size: Tuple[int, int]) -> None:
        w, h = size
        if w <= 0 or h <= 0:
            raise ValueError(f"Surface size must be positive, got {size!r}")
        self._img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        self._drw = ImageDraw.Draw(self._img)

    @property
    def width(self) -> int:
        return self._img.width

    @property
    def height(self) -> int:
        return self._img.height

    @property
    def image(self) -> Image.Image:
        return self._img

    def clear(self) -> None:
        self._drw.rectangle((0, 0, self.width, self.height), fill=(0, 0, 0, 0))

    def fill(self, colour: str) -> None:
        self._drw.rectangle((0, 0, self.width, self.height), fill=colour)

    def stroke_line(self, start: Point, end: Point, *, width: float,
                    colour: str, cap: PenCap) -> None:
        # Pillow only draws whole-pixel widths; anything thinner is a hairline
        px = max(1, int(round(width)))
        self._drw.line([(start.x, start.y), (end.x, end.y)], fill=colour, width=px)
        if cap is PenCap.ROUND and px > 2:
            r = width / 2.0
            for p in (start, end):
                self._drw.ellipse((p.x - r, p.y - r, p.x + r, p.y + r), fill=colour)

    def to_bytes(self, fmt: str = "PNG") -> bytes:
        buf = io.BytesIO()
        img = self._img
        fmt = "JPEG" if fmt.upper() == "JPG" else fmt.upper()
        if fmt == "JPEG":
            img = img.convert("RGB")
        img.save(buf, format=fmt)
        return buf.getvalue()
