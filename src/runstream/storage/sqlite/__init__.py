"""SQLite backend for the location cache."""

from runstream.storage.sqlite.store import SqliteLocationStore


__all__ = ["SqliteLocationStore"]
