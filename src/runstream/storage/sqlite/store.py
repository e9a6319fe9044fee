"""SQLite location store."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import UTC, datetime
from pathlib import Path

from runstream.storage.sqlite.schema import ensure_schema

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = ".runstream/locations.db"
BUSY_TIMEOUT_MS = 200


class SqliteLocationStore:
    """Location store backed by an SQLite database in WAL mode.

    ``put_if_absent`` relies on ``INSERT OR IGNORE`` against the primary key,
    so racing writers, in this process or others, keep the first row.
    A read that hits a locked database returns ``None`` instead of waiting.
    """

    def __init__(self, db_path: Path) -> None:
        self.path = db_path
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            ensure_schema(self.path)
            conn = sqlite3.connect(self.path, check_same_thread=False, isolation_level=None)
            conn.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}")
            self._conn = conn
        return self._conn

    def get(self, declaring_type: str) -> str | None:
        with self._lock:
            try:
                row = (
                    self._connection()
                    .execute(
                        "SELECT file_path FROM locations WHERE declaring_type = ?",
                        (declaring_type,),
                    )
                    .fetchone()
                )
            except sqlite3.OperationalError as exc:
                logger.debug("Location cache read for %s skipped: %s", declaring_type, exc)
                return None
        return row[0] if row else None

    def put_if_absent(self, declaring_type: str, file_path: str) -> str:
        created_at = datetime.now(UTC).isoformat()
        with self._lock:
            conn = self._connection()
            cursor = conn.execute(
                "INSERT OR IGNORE INTO locations (declaring_type, file_path, created_at) "
                "VALUES (?, ?, ?)",
                (declaring_type, file_path, created_at),
            )
            if cursor.rowcount:
                logger.debug("Cached location %s => %s", declaring_type, file_path)
                return file_path
            row = conn.execute(
                "SELECT file_path FROM locations WHERE declaring_type = ?",
                (declaring_type,),
            ).fetchone()
        return row[0] if row else file_path

    def entries(self) -> dict[str, str]:
        with self._lock:
            rows = (
                self._connection()
                .execute("SELECT declaring_type, file_path FROM locations ORDER BY created_at")
                .fetchall()
            )
        return dict(rows)

    def clear(self) -> None:
        with self._lock:
            self._connection().execute("DELETE FROM locations")

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
