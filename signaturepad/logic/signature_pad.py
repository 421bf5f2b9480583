# signaturepad/logic/signature_pad.py
"""
SignaturePad: one capture surface with its segment log.

Stroke lifecycle:
    IDLE --start_stroke--> CAPTURING --pointer_leave--> LEAVING
    LEAVING --append_sample--> CAPTURING   (pending finalize cancelled)
    LEAVING --timeout--> IDLE               (same as end_stroke)
    CAPTURING/LEAVING --end_stroke--> IDLE  (smoothing redraw pass)

All public operations serialize on one re-entrant lock, so a leave timer
firing on another thread never interleaves with capture or a redraw pass.
"""
from __future__ import annotations
import base64
import functools
import logging
from dataclasses import replace
from threading import RLock
from typing import Callable, List, Optional, Sequence, Tuple, Union

from ..exceptions.errors import SurfaceUnavailable
from ..models.geometry import Segment
from ..models.pad_config import PadConfig
from ..models.pad_enums import InputDevice, StrokeState
from . import codec
from .recorder import SegmentRecorder, StrokeContext
from .renderer import paint_background, render_bitmap, render_smoothed
from .sampler import to_sample
from .scheduler import Scheduler, ThreadingScheduler
from .smoother import smooth_segments
from .surface import Surface

logger = logging.getLogger(__name__)

SignatureData = Union[str, bytes, list, Sequence[Segment]]

_MIME = {"PNG": "image/png", "JPEG": "image/jpeg", "JPG": "image/jpeg"}


class SignaturePad:
    """Capture, smoothing redraw, replay and export for a single surface."""

    def __init__(self, surface: Surface, *, config: Optional[PadConfig] = None,
                 scheduler: Optional[Scheduler] = None,
                 on_output: Optional[Callable[[str], None]] = None) -> None:
        if surface is None:
            raise SurfaceUnavailable("No rendering surface available; capture disabled.")
        if surface.width <= 0 or surface.height <= 0:
            raise SurfaceUnavailable(
                f"Rendering surface has no drawable area ({surface.width}x{surface.height}).")

        self._surface = surface
        self._cfg = config or PadConfig()
        self._scheduler = scheduler or ThreadingScheduler()
        self._on_output = on_output
        self._recorder = SegmentRecorder(surface, self._cfg)

        self._lock = RLock()
        self._log: List[Segment] = []
        self._state = StrokeState.IDLE
        self._stroke: Optional[StrokeContext] = None
        self._device: Optional[InputDevice] = None
        self._leave_token: Optional[object] = None

        if not self._cfg.display_only:
            paint_background(self._surface, self._cfg)

    @classmethod
    def acquire(cls, factory: Callable[[], Surface], **kwargs) -> "SignaturePad":
        """
        Build a pad from a surface factory. Any failure to obtain the surface is
        reported as SurfaceUnavailable and no pad is created.
        """
        try:
            surface = factory()
        except SurfaceUnavailable:
            raise
        except Exception as exc:
            raise SurfaceUnavailable(f"Cannot acquire rendering surface: {exc}") from exc
        return cls(surface, **kwargs)

    # -------- Properties -----------------------------------------------------
    @property
    def config(self) -> PadConfig:
        return self._cfg

    @property
    def surface(self) -> Surface:
        return self._surface

    @property
    def state(self) -> StrokeState:
        return self._state

    @property
    def device(self) -> Optional[InputDevice]:
        """Input device kind, fixed by the first press."""
        return self._device

    @property
    def segments(self) -> Tuple[Segment, ...]:
        with self._lock:
            return tuple(self._log)

    @property
    def is_empty(self) -> bool:
        return not self._log

    # -------- Capture --------------------------------------------------------
    def start_stroke(self, x: float, y: float,
                     device: InputDevice = InputDevice.POINTER) -> bool:
        """Pen down at surface-local (x, y). Returns False when the press is ignored."""
        with self._lock:
            if self._cfg.display_only:
                return False
            if self._device is None:
                self._device = device
                logger.debug("input device resolved: %s", device.value)
            elif device is not self._device:
                return False

            if self._state is not StrokeState.IDLE:
                self.end_stroke()

            ctx, seg = self._recorder.record(StrokeContext(device=self._device),
                                             to_sample(x, y), first_of_stroke=True)
            if seg is not None:
                self._log.append(seg)
            self._stroke = ctx
            self._state = StrokeState.CAPTURING
            return True

    def append_sample(self, x: float, y: float) -> Optional[Segment]:
        """Pen moved. Returns the recorded segment, None for duplicates or when idle."""
        with self._lock:
            if self._stroke is None:
                return None
            if self._state is StrokeState.LEAVING:
                self._cancel_leave()
                self._state = StrokeState.CAPTURING
            ctx, seg = self._recorder.record(self._stroke, to_sample(x, y))
            self._stroke = ctx
            if seg is not None:
                self._log.append(seg)
            return seg

    def pointer_leave(self) -> None:
        """Pointer left the surface; finalize after the leave timeout unless it returns."""
        with self._lock:
            if self._state is not StrokeState.CAPTURING:
                return
            token = object()
            handle = self._scheduler.schedule(
                self._cfg.leave_timeout_ms,
                functools.partial(self._on_leave_timeout, token),
            )
            self._leave_token = token
            self._stroke = replace(self._stroke, leave_timer=handle)
            self._state = StrokeState.LEAVING

    def end_stroke(self) -> bool:
        """
        Pen up. Rebuilds, resamples and smooths every curve in the log and
        redraws the surface. With an empty log the surface is left untouched
        and False is returned.
        """
        with self._lock:
            self._cancel_leave()
            self._stroke = None
            self._state = StrokeState.IDLE
            if not self._log:
                return False
            curves = smooth_segments(self._log)
            render_smoothed(self._surface, curves, self._cfg)
            logger.debug("redraw pass: %d segment(s), %d curve(s)", len(self._log), len(curves))
            self._emit(self.serialize())
            return True

    def clear(self) -> None:
        """Empty the segment log and repaint the background."""
        with self._lock:
            self._cancel_leave()
            self._stroke = None
            self._state = StrokeState.IDLE
            paint_background(self._surface, self._cfg)
            self._log.clear()
            self._emit("")

    # -------- Interchange ----------------------------------------------------
    def serialize(self) -> str:
        with self._lock:
            return codec.serialize(self._log)

    @staticmethod
    def deserialize(data: Union[str, bytes, list]) -> Tuple[Segment, ...]:
        return codec.deserialize(data)

    def replay(self, segments: Sequence[Segment], target: Optional[Surface] = None,
               append_to_log: bool = False) -> None:
        """Draw records onto `target` (default: this pad's surface) without smoothing."""
        with self._lock:
            codec.replay(segments, target or self._surface, self._cfg,
                         self._log if append_to_log else None)

    def regenerate(self, data: SignatureData) -> None:
        """
        Show a previously captured signature: parse first, then clear and replay
        into the log. A ParseError leaves the current log and surface untouched.
        """
        segments = self._coerce(data)
        with self._lock:
            self.clear()
            self.replay(segments, append_to_log=True)
            self._emit(self.serialize())

    # -------- Export ---------------------------------------------------------
    def export_bitmap(self, fmt: str = "PNG") -> bytes:
        """Raw (unsmoothed) replay onto an offscreen surface of the same size."""
        with self._lock:
            segments = tuple(self._log)
        return render_bitmap(segments, (self._surface.width, self._surface.height), self._cfg, fmt)

    def export_data_url(self, fmt: str = "PNG") -> str:
        raw = self.export_bitmap(fmt)
        mime = _MIME.get(fmt.upper(), f"image/{fmt.lower()}")
        return f"data:{mime};base64," + base64.b64encode(raw).decode("ascii")

    # -------- Internal helpers ----------------------------------------------
    @staticmethod
    def _coerce(data: SignatureData) -> Tuple[Segment, ...]:
        if isinstance(data, (list, tuple)) and data and all(isinstance(s, Segment) for s in data):
            return tuple(data)
        return codec.deserialize(list(data) if isinstance(data, tuple) else data)

    def _cancel_leave(self) -> None:
        self._leave_token = None
        if self._stroke is not None and self._stroke.leave_timer is not None:
            self._scheduler.cancel(self._stroke.leave_timer)
            self._stroke = replace(self._stroke, leave_timer=None)

    def _on_leave_timeout(self, token: object) -> None:
        with self._lock:
            if self._state is StrokeState.LEAVING and token is self._leave_token:
                self.end_stroke()

    def _emit(self, text: str) -> None:
        if self._on_output is not None:
            self._on_output(text)
