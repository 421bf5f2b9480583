from __future__ import annotations
import json, sqlite3
from pathlib import Path
from typing import Any, Optional
from core.config.config_service import config_service
from core.common.db_interface import SQLiteRepository

def _to_json(v: Any) -> str:            # serialize
    try: return json.dumps(v)
    except TypeError: return json.dumps(str(v))

def _from_json(txt: str) -> Any:        # deserialize
    try: return json.loads(txt)
    except json.JSONDecodeError: return txt

# ------------------------------------------------------------------ #
class SettingsRepository(SQLiteRepository):
    """Key/value settings per (namespace, key, user_id); values stored as JSON text."""

    def __init__(self, db_path: Optional[Path] = None) -> None:
        super().__init__(db_path or config_service.database.settings, check_same_thread=False)

    # ------------------------- public API ---------------------------- #
    def get(self, ns: str, key: str, uid: str | None, fb: Any = None) -> Any | None:
        row = self.conn.execute(
            "SELECT value FROM settings WHERE namespace=? AND key=? AND user_id IS ?",
            (ns, key, uid),
        ).fetchone()
        return _from_json(row["value"]) if row else fb

    def set(self, ns: str, key: str, val: Any, uid: str | None) -> None:
        # NULL user_ids never collide in a primary key, so replace by hand
        with self.conn:
            self.conn.execute(
                "DELETE FROM settings WHERE namespace=? AND key=? AND user_id IS ?",
                (ns, key, uid),
            )
            self.conn.execute(
                "INSERT INTO settings (namespace,key,value,user_id) VALUES (?,?,?,?)",
                (ns, key, _to_json(val), uid),
            )

    def delete(self, ns: str, key: str, uid: str | None) -> None:
        with self.conn:
            self.conn.execute(
                "DELETE FROM settings WHERE namespace=? AND key=? AND user_id IS ?",
                (ns, key, uid),
            )

    # ------------------------- schema -------------------------------- #
    def _on_connect(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS settings(
                namespace TEXT NOT NULL,
                key       TEXT NOT NULL,
                value     TEXT NOT NULL,
                user_id   TEXT
            )
            """
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS ix_settings_lookup ON settings(namespace,key,user_id)"
        )
        conn.commit()
