"""Map a test's declaring type to a ``file:line`` or ``file:`` string."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from runstream.errors import CacheSchemaError
from runstream.location.search import SourceSearcher
from runstream.storage.base import LocationStore
from runstream.types import SourceLocation

logger = logging.getLogger(__name__)


class LocationResolver:
    """Resolve test locations, falling back to a cached source search.

    The static location is trusted only when it lies under ``source_root``.
    Otherwise the cached file for the declaring type is used, and on a miss
    the source tree is searched and the first match cached. Cached and
    searched locations carry no line number.
    """

    def __init__(
        self,
        source_root: Path,
        store: LocationStore | None = None,
        searcher: SourceSearcher | None = None,
    ) -> None:
        self.source_root = source_root.resolve()
        self.store = store
        self.searcher = searcher or SourceSearcher()

    def is_under_root(self, path: str) -> bool:
        if not path:
            return False
        try:
            return Path(path).resolve().is_relative_to(self.source_root)
        except (OSError, ValueError):
            return False

    def resolve(self, declaring_type: str, static_location: SourceLocation | None) -> str:
        if static_location is not None and self.is_under_root(static_location.path):
            return str(static_location)

        if not declaring_type:
            return ":"

        cached = self._cached(declaring_type)
        if cached is not None:
            return f"{cached}:"

        return f"{self._search(declaring_type)}:"

    def _cached(self, declaring_type: str) -> str | None:
        if self.store is None:
            return None
        try:
            return self.store.get(declaring_type)
        except (OSError, sqlite3.Error, CacheSchemaError) as exc:
            logger.warning("Location cache lookup for %s failed: %s", declaring_type, exc)
            return None

    def _search(self, declaring_type: str) -> str:
        try:
            found = self.searcher.find(self.source_root, declaring_type)
        except OSError as exc:
            logger.warning("Source search for %s failed: %s", declaring_type, exc)
            return ""

        if found is None:
            logger.debug("No definition of %s under %s", declaring_type, self.source_root)
            return ""

        file_path = str(found)
        if self.store is None:
            return file_path
        try:
            return self.store.put_if_absent(declaring_type, file_path)
        except (OSError, sqlite3.Error, CacheSchemaError) as exc:
            logger.warning("Could not cache location for %s: %s", declaring_type, exc)
            return file_path
