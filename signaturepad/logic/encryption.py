# signaturepad/logic/encryption.py
from __future__ import annotations

import json
from typing import Any, List
from cryptography.fernet import Fernet, InvalidToken

_NAMESPACE = "signaturepad"
_KEY_FIELD = "fernet_key"
_RING_FIELD = "fernet_key_ring"


def _load_keyring(sm: Any) -> List[Fernet]:
    """
    Create a list of Fernet instances:
    - first entry is the current key (used for ENCRYPT),
    - remaining entries are retired keys (used only for DECRYPT).
    Keys are stored as base64 strings (Fernet.generate_key()) in settings.
    """
    cur_key_str = sm.get(_NAMESPACE, _KEY_FIELD, None)
    ring_raw = sm.get(_NAMESPACE, _RING_FIELD, [])

    # The ring may come back as a list or as JSON text, depending on the store
    if isinstance(ring_raw, str):
        try:
            ring_list = json.loads(ring_raw) or []
        except json.JSONDecodeError:
            ring_list = []
    elif isinstance(ring_raw, list):
        ring_list = ring_raw
    else:
        ring_list = []

    # Create key if missing (one-time)
    if not cur_key_str:
        cur_key_str = Fernet.generate_key().decode("ascii")
        sm.set(_NAMESPACE, _KEY_FIELD, cur_key_str)
        sm.set(_NAMESPACE, _RING_FIELD, [])

    ferns: List[Fernet] = [Fernet(cur_key_str.encode("ascii"))]
    for k in ring_list:
        if isinstance(k, str):
            ferns.append(Fernet(k.encode("ascii")))
    return ferns


def rotate_key(sm: Any) -> None:
    """Start encrypting with a fresh key; the old one stays in the ring for reading."""
    old = sm.get(_NAMESPACE, _KEY_FIELD, None)
    ring = [k for k in (sm.get(_NAMESPACE, _RING_FIELD, []) or []) if isinstance(k, str)]
    if old:
        ring.insert(0, old)
    sm.set(_NAMESPACE, _KEY_FIELD, Fernet.generate_key().decode("ascii"))
    sm.set(_NAMESPACE, _RING_FIELD, ring)


def encrypt_bytes(sm: Any, data: bytes) -> bytes:
    """Encrypt 'data' using the CURRENT Fernet key (first entry in keyring)."""
    return _load_keyring(sm)[0].encrypt(data)


def decrypt_bytes(sm: Any, token: bytes) -> bytes:
    """
    Try to decrypt using CURRENT key first, then retired keys.
    If all fail, accept plaintext JSON signature data as-is (files written
    before encryption was enabled). Otherwise raise InvalidToken.
    """
    for f in _load_keyring(sm):
        try:
            return f.decrypt(token)
        except InvalidToken:
            continue

    if token.lstrip()[:1] == b"[":
        return token

    raise InvalidToken("Unable to decrypt signature token")
