"""Schema upgrades for the SQLite location cache.

The file's schema version lives in ``PRAGMA user_version``. Step ``n`` in
:data:`SCHEMA_STEPS` upgrades a file from version ``n`` to ``n + 1``, so the
current version is simply the number of steps.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Sequence
from pathlib import Path

from runstream.errors import CacheSchemaError

logger = logging.getLogger(__name__)

SchemaStep = Callable[[sqlite3.Connection], None]


def _create_locations(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS locations (
            declaring_type TEXT PRIMARY KEY,
            file_path TEXT NOT NULL,
            created_at TEXT NOT NULL
        )
        """
    )


SCHEMA_STEPS: tuple[SchemaStep, ...] = (_create_locations,)


def schema_version(conn: sqlite3.Connection) -> int:
    version: int = conn.execute("PRAGMA user_version").fetchone()[0]
    return version


def ensure_schema(path: Path, steps: Sequence[SchemaStep] = SCHEMA_STEPS) -> int:
    """Upgrade the cache file at ``path`` to ``len(steps)`` and return that version.

    All pending steps run inside one exclusive transaction, so processes
    racing on a fresh file apply them once. A failing step leaves the file
    at its previous version.

    Raises:
        CacheSchemaError: If the file is newer than ``steps`` or a step hits an SQLite error.
    """
    target = len(steps)
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(path, timeout=5.0, isolation_level=None)
    try:
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("BEGIN EXCLUSIVE")
        current = schema_version(conn)
        if current >= target:
            conn.execute("ROLLBACK")
            if current > target:
                raise CacheSchemaError(path, current, target)
            return current

        try:
            for version, step in enumerate(steps[current:], start=current + 1):
                logger.debug("Upgrading location cache %s to schema v%d", path, version)
                step(conn)
            conn.execute(f"PRAGMA user_version = {target}")
        except sqlite3.Error as exc:
            conn.execute("ROLLBACK")
            raise CacheSchemaError(path, current, target, cause=exc) from exc
        conn.execute("COMMIT")
        return target
    finally:
        conn.close()
