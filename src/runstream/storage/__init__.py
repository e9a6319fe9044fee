"""Persistent location cache backends."""

from __future__ import annotations

from pathlib import Path

from runstream.storage.base import LocationStore
from runstream.storage.sqlite import SqliteLocationStore
from runstream.storage.text_file import TextFileLocationStore


SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")


def open_location_store(path: Path) -> LocationStore:
    """Return the backend matching the cache file's suffix."""
    if path.suffix in SQLITE_SUFFIXES:
        return SqliteLocationStore(path)
    return TextFileLocationStore(path)


__all__ = [
    "LocationStore",
    "SqliteLocationStore",
    "TextFileLocationStore",
    "open_location_store",
]
