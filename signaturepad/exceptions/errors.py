"""Signature pad exceptions."""
from __future__ import annotations


class SignaturePadError(Exception):
    """Base exception for the signature pad feature."""


class ParseError(SignaturePadError, ValueError):
    """Raised when interchange data is not a sequence of four-number records."""


class SurfaceUnavailable(SignaturePadError):
    """Raised when no rendering surface can be acquired; capture stays disabled."""
