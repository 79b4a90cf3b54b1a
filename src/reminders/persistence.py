"""Key-value persistence collaborators for the rule store."""

import sqlite3
from pathlib import Path
from typing import Optional, Protocol

import structlog

from db import wal_connect

from .errors import PersistenceError

logger = structlog.get_logger()


class Persistence(Protocol):
    """Opaque blob storage keyed by collection name."""

    def load(self, key: str) -> Optional[bytes]: ...

    def save(self, key: str, data: bytes) -> None: ...


class InMemoryPersistence:
    """Dict-backed persistence, for tests and ephemeral hosts."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._blobs: dict[str, bytes] = dict(initial or {})

    def load(self, key: str) -> Optional[bytes]:
        return self._blobs.get(key)

    def save(self, key: str, data: bytes) -> None:
        self._blobs[key] = bytes(data)

    def keys(self) -> list[str]:
        return sorted(self._blobs)


class SqlitePersistence:
    """SQLite key-value table, one row per collection."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path).expanduser()
        self._init_tables()

    def _init_tables(self):
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with wal_connect(self.db_path) as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value BLOB NOT NULL,
                        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)
        except (sqlite3.Error, OSError) as e:
            raise PersistenceError(f"Cannot open {self.db_path}: {e}") from e

    def load(self, key: str) -> Optional[bytes]:
        try:
            with wal_connect(self.db_path) as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"load {key!r} failed: {e}") from e
        return bytes(row[0]) if row else None

    def save(self, key: str, data: bytes) -> None:
        try:
            with wal_connect(self.db_path) as conn:
                conn.execute(
                    """INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at""",
                    (key, sqlite3.Binary(data)),
                )
        except sqlite3.Error as e:
            logger.error("persistence_save_error", key=key, error=str(e))
            raise PersistenceError(f"save {key!r} failed: {e}") from e
