"""Shared SQLite helpers: WAL mode and busy timeout defaults."""

import sqlite3
from pathlib import Path

DEFAULT_BUSY_TIMEOUT = 5.0


def wal_connect(db_path: str | Path, timeout: float = DEFAULT_BUSY_TIMEOUT) -> sqlite3.Connection:
    """Open SQLite connection with WAL journal mode.

    Args:
        db_path: Path to database file.
        timeout: Seconds to wait on a locked database before failing.
    """
    conn = sqlite3.connect(str(db_path), timeout=timeout)
    conn.execute("PRAGMA journal_mode=WAL")
    return conn
