# signaturepad/logic/scheduler.py
from __future__ import annotations
import threading
from typing import Any, Callable, Protocol


class Scheduler(Protocol):
    """Delayed callbacks for the pointer-leave debounce."""
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any: ...
    def cancel(self, handle: Any) -> None: ...


class ThreadingScheduler:
    """Fallback scheduler for headless use; callbacks run on a timer thread."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> threading.Timer:
        t = threading.Timer(delay_ms / 1000.0, callback)
        t.daemon = True
        t.start()
        return t

    def cancel(self, handle: threading.Timer) -> None:
        handle.cancel()
