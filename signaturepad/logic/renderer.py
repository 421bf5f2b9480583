# signaturepad/logic/renderer.py
from __future__ import annotations
from typing import Iterable, Sequence, Tuple

from ..models.geometry import Curve, Segment
from ..models.pad_config import PadConfig
from .pen import width_between
from .surface import PilSurface, Surface


def paint_background(surface: Surface, cfg: PadConfig) -> None:
    surface.clear()
    surface.fill(cfg.background_colour)


def render_smoothed(surface: Surface, curves: Iterable[Curve], cfg: PadConfig) -> None:
    """
    Redraw pass after a stroke: wipe the surface and stroke every smoothed
    curve piece by piece, recomputing the width for each piece.
    """
    paint_background(surface, cfg)
    for curve in curves:
        for a, b in zip(curve, curve[1:]):
            surface.stroke_line(a, b, width=width_between(a, b),
                                colour=cfg.pen_colour, cap=cfg.pen_cap)


def draw_segments(surface: Surface, segments: Iterable[Segment], cfg: PadConfig) -> None:
    """Verbatim replay of raw segments at the constant configured pen width."""
    for seg in segments:
        surface.stroke_line(seg.start, seg.end, width=cfg.pen_width,
                            colour=cfg.pen_colour, cap=cfg.pen_cap)


def render_bitmap(segments: Sequence[Segment], size: Tuple[int, int], cfg: PadConfig,
                  fmt: str = "PNG") -> bytes:
    """
    Replay the raw log onto a fresh offscreen surface and encode it.
    Independent of the smoothing pipeline.
    """
    off = PilSurface(size)
    off.fill(cfg.background_colour)
    draw_segments(off, segments, cfg)
    return off.to_bytes(fmt)
