# signaturepad/logic/signature_service.py
from __future__ import annotations
import re
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from cryptography.fernet import InvalidToken
from core.config.config_service import ConfigService, config_service

from ..exceptions.errors import ParseError
from ..models.geometry import Segment
from ..models.pad_config import PadConfig
from ..models.pad_enums import PenCap
from . import codec
from .encryption import decrypt_bytes, encrypt_bytes
from .renderer import render_bitmap

_NAMESPACE = "signaturepad"
_FEATURE = "SignaturePad"
_OWNER_RE = re.compile(r"^[A-Za-z0-9_.@-]+$")


class SignatureService:
    """
    Persistence and configuration around the pad (no UI).

    - Pen/surface settings: app configuration defaults, overridden by values
      stored in the settings manager (globally or per user).
    - Signatures: serialized segment logs, Fernet-encrypted per owner under
      {signature_dir}/{owner_id}.sig.
    """

    def __init__(self, *, settings_manager: Any,
                 logger: Optional[Any] = None,
                 signature_dir: Optional[Path] = None,
                 config: Optional[ConfigService] = None) -> None:
        self._sm = settings_manager
        self._logger = logger
        self._config = config or config_service

        base_dir = Path(signature_dir or self._config.storage.signature_dir)
        base_dir.mkdir(parents=True, exist_ok=True)
        self._base_dir = base_dir

    @property
    def signature_dir(self) -> Path:
        return self._base_dir

    # -------- Internal helpers ----------------------------------------------
    def _log(self, event: str, *, level: str = "INFO", reference: Optional[str] = None,
             message: Optional[str] = None) -> None:
        if self._logger is not None:
            self._logger.log(_FEATURE, event, level=level, reference_id=reference, message=message)

    def _sig_path(self, owner_id: str) -> Path:
        if not owner_id or not _OWNER_RE.match(owner_id) or owner_id in (".", ".."):
            raise ValueError(f"Invalid signature owner id: {owner_id!r}")
        return self._base_dir / f"{owner_id}.sig"

    # -------- Configuration -------------------------------------------------
    def default_config(self) -> PadConfig:
        c = self._config
        try:
            cap = PenCap(c.pen.cap)
        except ValueError:
            cap = PenCap.ROUND
        return PadConfig(
            pen_width=float(c.pen.width),
            pen_cap=cap,
            pen_colour=str(c.pen.colour),
            background_colour=str(c.surface.background),
            surface_width=int(c.surface.width),
            surface_height=int(c.surface.height),
            leave_timeout_ms=int(c.capture.leave_timeout_ms),
            display_only=bool(c.capture.display_only),
        )

    def load_config(self, user_id: Optional[str] = None) -> PadConfig:
        d = self.default_config()

        def get(k: str, default):
            glob = self._sm.get(_NAMESPACE, k, default)
            if user_id:
                return self._sm.get(_NAMESPACE, k, glob, user_specific=True, user_id=user_id)
            return glob

        def _cap(val: Any) -> PenCap:
            try:
                return PenCap(val)
            except ValueError:
                return d.pen_cap

        return PadConfig(
            pen_width=float(get("pen_width", d.pen_width)),
            pen_cap=_cap(get("pen_cap", d.pen_cap.value)),
            pen_colour=str(get("pen_colour", d.pen_colour)),
            background_colour=str(get("background_colour", d.background_colour)),
            surface_width=int(get("surface_width", d.surface_width)),
            surface_height=int(get("surface_height", d.surface_height)),
            leave_timeout_ms=int(get("leave_timeout_ms", d.leave_timeout_ms)),
            display_only=d.display_only,
        )

    def save_config(self, cfg: PadConfig, user_id: Optional[str] = None) -> None:
        def put(k: str, v: Any) -> None:
            if user_id:
                self._sm.set(_NAMESPACE, k, v, user_specific=True, user_id=user_id)
            else:
                self._sm.set(_NAMESPACE, k, v)

        put("pen_width", float(cfg.pen_width))
        put("pen_cap", cfg.pen_cap.value)
        put("pen_colour", cfg.pen_colour)
        put("background_colour", cfg.background_colour)
        put("surface_width", int(cfg.surface_width))
        put("surface_height", int(cfg.surface_height))
        put("leave_timeout_ms", int(cfg.leave_timeout_ms))
        self._log("config_saved", reference=user_id)

    # -------- Encrypted signature store -------------------------------------
    def save_signature(self, owner_id: str, segments: Sequence[Segment]) -> Path:
        """Serialize, encrypt and persist the segment log for `owner_id`."""
        path = self._sig_path(owner_id)
        token = encrypt_bytes(self._sm, codec.serialize(segments).encode("utf-8"))
        path.write_bytes(token)
        self._log("signature_saved", reference=owner_id, message=f"{len(segments)} segment(s)")
        return path

    def load_signature(self, owner_id: str) -> Tuple[Segment, ...] | None:
        """
        Load and decode the owner's signature.
        Returns None if not present OR if it cannot be decrypted or parsed.
        """
        p = self._sig_path(owner_id)
        if not p.exists():
            return None
        try:
            raw = decrypt_bytes(self._sm, p.read_bytes())
        except InvalidToken:
            self._log("InvalidToken", level="WARNING", reference=owner_id, message=f"Cannot decrypt {p}")
            return None
        try:
            return codec.deserialize(raw)
        except ParseError as exc:
            self._log("ParseError", level="WARNING", reference=owner_id, message=str(exc))
            return None

    def has_signature(self, owner_id: str) -> bool:
        return self._sig_path(owner_id).exists()

    def delete_signature(self, owner_id: str) -> bool:
        p = self._sig_path(owner_id)
        if p.exists():
            p.unlink()
            self._log("signature_deleted", reference=owner_id)
            return True
        return False

    def signature_history(self, owner_id: str, limit: int = 20) -> List[Any]:
        """Audit events recorded for `owner_id`, newest first."""
        self._sig_path(owner_id)  # validates the id
        if self._logger is None:
            return []
        return self._logger.query_logs(feature=_FEATURE, reference_id=owner_id, limit=limit)

    # -------- Segments -> PNG -----------------------------------------------
    def render_png(self, segments: Sequence[Segment], cfg: Optional[PadConfig] = None) -> bytes:
        """Raw replay of the segments as a PNG of the configured surface size."""
        cfg = cfg or self.load_config()
        return render_bitmap(segments, cfg.surface_size, cfg, "PNG")
