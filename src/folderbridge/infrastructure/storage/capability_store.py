"""Persistent store for opaque directory capabilities.

Capabilities are keyed by folder id. The SQLite implementation keeps
pickled payloads in a single table under the state root; the in-memory
implementation backs tests and ephemeral sessions. Only FolderRegistry
reads from these stores.
"""

from __future__ import annotations

import pickle
import sqlite3
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import structlog

from folderbridge.infrastructure.time_utils import utc_now_iso

logger = structlog.get_logger()


class CapabilityStore(Protocol):
    def put(self, folder_id: str, capability: Any) -> None: ...

    def get(self, folder_id: str) -> Optional[Any]: ...

    def delete(self, folder_id: str) -> None: ...

    def keys(self) -> List[str]: ...


class InMemoryCapabilityStore:
    """Process-local capability store."""

    def __init__(self) -> None:
        self._items: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def put(self, folder_id: str, capability: Any) -> None:
        with self._lock:
            self._items[folder_id] = capability

    def get(self, folder_id: str) -> Optional[Any]:
        with self._lock:
            return self._items.get(folder_id)

    def delete(self, folder_id: str) -> None:
        with self._lock:
            self._items.pop(folder_id, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._items)


class SqliteCapabilityStore:
    """SQLite-backed capability store with atomic commits."""

    def __init__(self, db_path: Path) -> None:
        self._lock = threading.RLock()
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0, isolation_level=None)
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        return conn

    def _init_db(self) -> None:
        with self._lock, self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS folder_capabilities (
                    folder_id TEXT PRIMARY KEY,
                    stored_at TEXT NOT NULL,
                    payload BLOB NOT NULL
                )
                """
            )

    def put(self, folder_id: str, capability: Any) -> None:
        payload = pickle.dumps(capability, protocol=pickle.HIGHEST_PROTOCOL)
        with self._lock, self._connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                conn.execute(
                    "INSERT OR REPLACE INTO folder_capabilities(folder_id, stored_at, payload) "
                    "VALUES (?, ?, ?)",
                    (folder_id, utc_now_iso(), sqlite3.Binary(payload)),
                )
                conn.execute("COMMIT")
            except Exception:
                conn.execute("ROLLBACK")
                raise

    def get(self, folder_id: str) -> Optional[Any]:
        with self._lock, self._connect() as conn:
            row = conn.execute(
                "SELECT payload FROM folder_capabilities WHERE folder_id = ?",
                (folder_id,),
            ).fetchone()
        if row is None:
            return None
        try:
            return pickle.loads(bytes(row[0]))
        except Exception as exc:
            logger.warning("capability_payload_unreadable", folder_id=folder_id, error=str(exc))
            return None

    def delete(self, folder_id: str) -> None:
        with self._lock, self._connect() as conn:
            conn.execute("DELETE FROM folder_capabilities WHERE folder_id = ?", (folder_id,))

    def keys(self) -> List[str]:
        with self._lock, self._connect() as conn:
            rows = conn.execute("SELECT folder_id FROM folder_capabilities ORDER BY folder_id").fetchall()
        return [str(row[0]) for row in rows]
