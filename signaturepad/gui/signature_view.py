from __future__ import annotations
import tkinter as tk
from dataclasses import replace
from tkinter import ttk, messagebox

from ..exceptions.errors import SurfaceUnavailable
from ..logic.signature_pad import SignaturePad
from ..logic.signature_service import SignatureService
from .signature_capture_dialog import SignatureCaptureDialog
from .tk_surface import TkCanvasSurface, TkScheduler


class SignatureView(ttk.Frame):
    """
    Main view for one owner's signature:
      • shows the stored signature (display-only pad, raw replay)
      • opens the capture dialog to create/replace it
      • deletes it
    """

    def __init__(self, parent, *, service: SignatureService, owner_id: str, **kwargs):
        super().__init__(parent, **kwargs)
        self._service = service
        self._owner_id = owner_id
        self._cfg = replace(service.load_config(owner_id), display_only=True)
        self._make_ui()
        self.refresh()

    # ------------------------------------------------------------------ UI
    def _make_ui(self) -> None:
        row = ttk.Frame(self)
        row.grid(row=0, column=0, sticky="ew", padx=12, pady=10)
        ttk.Label(row, text=f"Signature of {self._owner_id}").pack(side="left")
        ttk.Button(row, text="Delete", command=self._delete).pack(side="right")
        ttk.Button(row, text="Create signature…", command=self._capture).pack(side="right", padx=(0, 6))

        self.canvas = tk.Canvas(
            self, width=self._cfg.surface_width, height=self._cfg.surface_height,
            bg=self._cfg.background_colour, highlightthickness=1, highlightbackground="#888"
        )
        self.canvas.grid(row=1, column=0, padx=12, pady=(0, 4))
        self.history_var = tk.StringVar(value="")
        ttk.Label(self, textvariable=self.history_var).grid(row=3, column=0, sticky="w", padx=12, pady=(0, 10))
        try:
            self._pad = SignaturePad.acquire(lambda: TkCanvasSurface(self.canvas),
                                             config=self._cfg, scheduler=TkScheduler(self))
        except SurfaceUnavailable as ex:
            self._pad = None
            ttk.Label(self, text=str(ex)).grid(row=2, column=0, padx=12)

    # ------------------------------------------------------------------ Actions
    def refresh(self) -> None:
        history = self._service.signature_history(self._owner_id, limit=1)
        if history:
            last = history[0]
            self.history_var.set(f"Last change: {last.event} ({last.timestamp:%Y-%m-%d %H:%M} UTC)")
        else:
            self.history_var.set("")
        if self._pad is None:
            return
        segments = self._service.load_signature(self._owner_id)
        self._pad.regenerate(segments or [])

    def _capture(self) -> None:
        dlg = SignatureCaptureDialog(self, service=self._service, owner_id=self._owner_id)
        self.wait_window(dlg)
        self.refresh()

    def _delete(self) -> None:
        if not self._service.has_signature(self._owner_id):
            return
        if messagebox.askyesno("Delete signature?", "Delete the stored signature?", parent=self):
            self._service.delete_signature(self._owner_id)
            self.refresh()
