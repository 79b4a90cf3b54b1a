"""Tests for shared SQLite helpers."""

from db import wal_connect


def test_wal_connect_enables_wal(tmp_path):
    conn = wal_connect(tmp_path / "kv.db")
    try:
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode == "wal"
        assert conn.row_factory is None
    finally:
        conn.close()


def test_wal_connect_busy_timeout(tmp_path):
    conn = wal_connect(tmp_path / "kv.db", timeout=1.5)
    try:
        assert conn.execute("PRAGMA busy_timeout").fetchone()[0] == 1500
    finally:
        conn.close()
