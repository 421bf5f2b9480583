"""
core/common/db_interface.py
===========================

Shared interface + helpers for SQLite-backed modules (settings, logging).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from threading import RLock
from typing import Optional
import sqlite3


def create_sqlite_connection(
    db_path: Path,
    *,
    check_same_thread: bool = False,
) -> sqlite3.Connection:
    """Create a sqlite3 connection with row access by column name."""
    conn = sqlite3.connect(str(db_path), check_same_thread=check_same_thread)
    conn.row_factory = sqlite3.Row
    return conn


class DatabaseAccess(ABC):
    """Interface for modules that depend on a database."""

    @property
    @abstractmethod
    def db_path(self) -> Path:
        raise NotImplementedError

    @abstractmethod
    def connect(self) -> sqlite3.Connection:
        raise NotImplementedError


class SQLiteRepository(DatabaseAccess):
    """
    Lazily opened shared connection. The parent directory is created on first
    connect, so constructing a repository never touches the filesystem.
    """

    def __init__(self, db_path: Path, *, check_same_thread: bool = False) -> None:
        self._db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._check_same_thread = check_same_thread
        self._conn_lock = RLock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def conn(self) -> sqlite3.Connection:
        return self.connect()

    def connect(self) -> sqlite3.Connection:
        with self._conn_lock:
            if self._conn is None:
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
                self._conn = create_sqlite_connection(
                    self._db_path, check_same_thread=self._check_same_thread
                )
                self._on_connect(self._conn)
            return self._conn

    def _on_connect(self, conn: sqlite3.Connection) -> None:
        """Hook for schema creation; called once per opened connection."""

    def close(self) -> None:
        with self._conn_lock:
            if self._conn is not None:
                try:
                    self._conn.close()
                finally:
                    self._conn = None
