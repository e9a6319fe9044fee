"""Bounded recursive search for class definitions under a source root."""

from __future__ import annotations

import logging
import os
import re
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_IGNORED_DIRS = frozenset(
    {".git", ".hg", ".svn", "__pycache__", ".venv", "venv", ".tox", ".nox", "node_modules", ".runstream"}
)


class SearchTimeout(Exception):
    """Raised internally when the search deadline passes."""


@dataclass
class SourceSearcher:
    """Find the files that define a class, scanning ``*.py`` files in sorted order.

    Attributes
    ----------
    timeout
        Seconds the whole search may take. ``None`` disables the bound.
    exhaustive
        Keep scanning after the first match to report ambiguous definitions.
    """

    timeout: float | None = 10.0
    suffixes: tuple[str, ...] = (".py",)
    ignored_dirs: frozenset[str] = field(default=DEFAULT_IGNORED_DIRS)
    exhaustive: bool = False

    def _iter_files(self, root: Path, deadline: float | None) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in self.ignored_dirs)
            for filename in sorted(filenames):
                if deadline is not None and time.monotonic() > deadline:
                    raise SearchTimeout
                if filename.endswith(self.suffixes):
                    yield Path(dirpath) / filename

    def find_all(self, root: Path, declaring_type: str) -> list[Path]:
        """Return files defining ``declaring_type``; the first entry is authoritative."""
        pattern = re.compile(rf"^\s*class\s+{re.escape(declaring_type)}\b", re.MULTILINE)
        deadline = None if self.timeout is None else time.monotonic() + self.timeout
        matches: list[Path] = []
        try:
            for path in self._iter_files(root, deadline):
                try:
                    text = path.read_text(encoding="utf-8", errors="replace")
                except OSError as exc:
                    logger.debug("Skipping unreadable %s: %s", path, exc)
                    continue
                if pattern.search(text):
                    matches.append(path)
                    if not self.exhaustive:
                        break
        except SearchTimeout:
            logger.warning(
                "Search for class %s under %s timed out after %.1fs", declaring_type, root, self.timeout
            )
        return matches

    def find(self, root: Path, declaring_type: str) -> Path | None:
        matches = self.find_all(root, declaring_type)
        if len(matches) > 1:
            logger.debug(
                "Class %s is defined in %d files, using %s", declaring_type, len(matches), matches[0]
            )
        return matches[0] if matches else None
