# signaturepad/logic/codec.py
"""
Interchange format for captured signatures.

A signature is a JSON array of {"lx", "ly", "mx", "my"} objects in drawing
order. There is no version field and no explicit pen-lift marker: stroke
boundaries are recovered from move/line discontinuities.
"""
from __future__ import annotations
import json
import math
from typing import Any, List, MutableSequence, Optional, Sequence, Tuple, Union

from ..exceptions.errors import ParseError
from ..models.geometry import Segment
from ..models.pad_config import PadConfig
from .renderer import draw_segments
from .surface import Surface

RECORD_KEYS = frozenset({"mx", "my", "lx", "ly"})


def serialize(segments: Sequence[Segment]) -> str:
    return json.dumps([s.as_record() for s in segments], separators=(",", ":"))


def _reject_constant(name: str) -> Any:
    raise ParseError(f"Non-finite number {name} in signature data")


def _number(rec: dict, key: str, index: int) -> float:
    val = rec[key]
    # bool is an int subclass, but true/false are not coordinates
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise ParseError(f"Record {index}: field '{key}' is not a number ({val!r})")
    try:
        finite = math.isfinite(float(val))
    except OverflowError:
        finite = False
    if not finite:
        raise ParseError(f"Record {index}: field '{key}' is not finite")
    return val


def segments_from_records(records: Any) -> Tuple[Segment, ...]:
    if not isinstance(records, list):
        raise ParseError(f"Signature data must be an array, got {type(records).__name__}")
    out: List[Segment] = []
    for i, rec in enumerate(records):
        if not isinstance(rec, dict):
            raise ParseError(f"Record {i} is not an object")
        keys = set(rec)
        if keys != RECORD_KEYS:
            missing = sorted(RECORD_KEYS - keys)
            extra = sorted(keys - RECORD_KEYS)
            raise ParseError(f"Record {i}: missing {missing}, unexpected {extra}")
        out.append(Segment(
            move_x=_number(rec, "mx", i),
            move_y=_number(rec, "my", i),
            line_x=_number(rec, "lx", i),
            line_y=_number(rec, "ly", i),
        ))
    return tuple(out)


def deserialize(data: Union[str, bytes, bytearray, list]) -> Tuple[Segment, ...]:
    """
    Parse interchange data. Text is decoded as JSON first; an already decoded
    list is validated as-is. Raises ParseError on anything malformed.
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Signature data is not UTF-8: {exc}") from exc
    if isinstance(data, str):
        try:
            data = json.loads(data, parse_constant=_reject_constant)
        except ParseError:
            raise
        except ValueError as exc:
            # JSONDecodeError, or an integer past the interpreter's digit limit
            raise ParseError(f"Signature data is not valid JSON: {exc}") from exc
        except RecursionError as exc:
            raise ParseError("Signature data is nested too deeply") from exc
    return segments_from_records(data)


def replay(segments: Sequence[Segment], surface: Surface, cfg: PadConfig,
           log: Optional[MutableSequence[Segment]] = None) -> None:
    """
    Draw every record move -> line with the configured pen. When `log` is
    given the records are appended to it as well. Never smooths.
    """
    draw_segments(surface, segments, cfg)
    if log is not None:
        log.extend(segments)
