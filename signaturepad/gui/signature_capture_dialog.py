# signaturepad/gui/signature_capture_dialog.py
from __future__ import annotations
import tkinter as tk
from pathlib import Path
from tkinter import ttk, filedialog, messagebox
from typing import Optional

from ..exceptions.errors import ParseError, SurfaceUnavailable
from ..logic.signature_pad import SignaturePad
from ..logic.signature_service import SignatureService
from .tk_surface import TkCanvasSurface, TkScheduler


class SignatureCaptureDialog(tk.Toplevel):
    """
    Signature capture on a Tk canvas: live variable-width strokes, smoothed
    redraw on release, import of a saved JSON signature and PNG export.
    Saves the segment log encrypted per owner via SignatureService.

    After closing, `result` holds the serialized signature (or None if cancelled).
    """

    def __init__(self, parent: tk.Misc, *, service: SignatureService, owner_id: str) -> None:
        super().__init__(parent)
        self.title("Create Signature")
        self.transient(parent)
        self.resizable(False, False)

        self._service = service
        self._owner_id = owner_id
        self._cfg = service.load_config(owner_id)
        self.result: Optional[str] = None

        self.columnconfigure(0, weight=1)

        # Toolbar
        bar = ttk.Frame(self)
        bar.grid(row=0, column=0, sticky="ew", padx=10, pady=(10, 4))
        ttk.Button(bar, text="Clear", command=self._clear).pack(side="left")
        ttk.Button(bar, text="Import JSON", command=self._import).pack(side="left", padx=(6, 0))
        ttk.Button(bar, text="Export PNG", command=self._export).pack(side="left", padx=(6, 0))
        ttk.Button(bar, text="Export JSON", command=self._export_json).pack(side="left", padx=(6, 0))
        self.status_var = tk.StringVar(value="")
        ttk.Label(bar, textvariable=self.status_var).pack(side="right")

        # Canvas
        self.canvas = tk.Canvas(
            self, width=self._cfg.surface_width, height=self._cfg.surface_height,
            bg=self._cfg.background_colour, highlightthickness=1, highlightbackground="#888"
        )
        self.canvas.grid(row=1, column=0, sticky="nsew", padx=10, pady=4)

        try:
            self._pad = SignaturePad.acquire(
                lambda: TkCanvasSurface(self.canvas),
                config=self._cfg,
                scheduler=TkScheduler(self),
                on_output=self._on_output,
            )
        except SurfaceUnavailable as ex:
            messagebox.showerror(title="Error", message=str(ex), parent=parent)
            self.destroy()
            return

        self.canvas.bind("<ButtonPress-1>", self._on_down)
        self.canvas.bind("<B1-Motion>", self._on_move)
        self.canvas.bind("<ButtonRelease-1>", self._on_up)
        self.canvas.bind("<Leave>", self._on_leave)

        # Footer
        btns = ttk.Frame(self)
        btns.grid(row=2, column=0, sticky="e", padx=10, pady=(4, 10))
        ttk.Button(btns, text="Cancel", command=self._cancel).pack(side="right", padx=(6, 0))
        ttk.Button(btns, text="Save", command=self._save).pack(side="right")

        existing = service.load_signature(owner_id)
        if existing:
            self._pad.regenerate(existing)

        self.grab_set()

    @property
    def pad(self) -> SignaturePad:
        return self._pad

    # Canvas handlers
    def _on_down(self, e):
        self._pad.start_stroke(e.x, e.y)

    def _on_move(self, e):
        self._pad.append_sample(e.x, e.y)

    def _on_up(self, e):
        self._pad.end_stroke()

    def _on_leave(self, e):
        self._pad.pointer_leave()

    def _on_output(self, text: str) -> None:
        n = len(self._pad.segments)
        self.status_var.set(f"{n} segment(s)" if text else "")

    # Actions
    def _clear(self):
        self._pad.clear()

    def _import(self):
        p = filedialog.askopenfilename(
            parent=self,
            title="Import signature",
            filetypes=[("Signature JSON", "*.json"), ("All files", "*.*")]
        )
        if not p:
            return
        try:
            self._pad.regenerate(Path(p).read_text(encoding="utf-8"))
        except (OSError, ParseError) as ex:
            messagebox.showerror(title="Error", message=f"Cannot import signature:\n{ex}", parent=self)

    def _export(self):
        if self._pad.is_empty:
            return
        p = filedialog.asksaveasfilename(
            parent=self,
            title="Export signature image",
            defaultextension=".png",
            filetypes=[("PNG", "*.png")]
        )
        if p:
            Path(p).write_bytes(self._pad.export_bitmap("PNG"))

    def _export_json(self):
        if self._pad.is_empty:
            return
        p = filedialog.asksaveasfilename(
            parent=self,
            title="Export signature data",
            defaultextension=".json",
            filetypes=[("Signature JSON", "*.json")]
        )
        if p:
            Path(p).write_text(self._pad.serialize(), encoding="utf-8")

    def _cancel(self):
        self.destroy()

    def _save(self):
        if self._pad.is_empty:
            messagebox.showerror(title="Error", message="Please sign first.", parent=self)
            return

        if self._service.has_signature(self._owner_id):
            if not messagebox.askyesno(
                title="Overwrite signature?",
                message="A signature already exists. Overwrite?",
                parent=self
            ):
                return

        self._service.save_signature(self._owner_id, self._pad.segments)
        self.result = self._pad.serialize()
        messagebox.showinfo(title="Saved", message="Signature saved.", parent=self)
        self.destroy()
