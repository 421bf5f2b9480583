"""
core/settings/logic/settings_manager.py
=======================================

High-level API for settings. Global values use user_id None; user-scoped
values require an explicit user id.
"""

from __future__ import annotations
from threading import RLock
from typing import Any, Optional

from core.settings.logic.settings_repository import SettingsRepository


class SettingsManager:
    def __init__(self, repo: Optional[SettingsRepository] = None) -> None:
        self._lock = RLock()
        self._repo = repo

    @property
    def repo(self) -> SettingsRepository:
        with self._lock:
            if self._repo is None:
                self._repo = SettingsRepository()
            return self._repo

    # ------------------------------------------------------------------ #
    #  API                                                               #
    # ------------------------------------------------------------------ #
    def get(
        self,
        namespace: str,
        key: str,
        fallback: Any | None = None,
        *,
        user_specific: bool = False,
        user_id: str | None = None,
    ) -> Any | None:
        if user_specific and not user_id:
            return fallback
        return self.repo.get(namespace, key, user_id if user_specific else None, fallback)

    def set(
        self,
        namespace: str,
        key: str,
        value: Any,
        *,
        user_specific: bool = False,
        user_id: str | None = None,
    ) -> None:
        if user_specific and not user_id:
            raise ValueError("user_id must be set when user_specific=True")
        self.repo.set(namespace, key, value, user_id if user_specific else None)

    def delete(
        self,
        namespace: str,
        key: str,
        *,
        user_specific: bool = False,
        user_id: str | None = None,
    ) -> None:
        self.repo.delete(namespace, key, user_id if user_specific else None)


# Global instance; the database opens on first access
settings_manager: SettingsManager = SettingsManager()  # pylint: disable=invalid-name
