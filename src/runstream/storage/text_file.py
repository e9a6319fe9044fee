"""Append-only text file backend using ``Type => path`` lines."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

SEPARATOR = " => "


def _parse(text: str) -> dict[str, str]:
    entries: dict[str, str] = {}
    for line in text.splitlines():
        declaring_type, sep, file_path = line.partition(SEPARATOR)
        if not sep or not declaring_type:
            continue
        # First line for a type wins.
        entries.setdefault(declaring_type, file_path.strip())
    return entries


class TextFileLocationStore:
    """Location store backed by a shared append-only text file.

    Each append is a single ``O_APPEND`` write, so lines from concurrent
    processes never interleave. Two processes may still both append a line
    for the same type; readers resolve that by taking the first one.
    """

    _locks: dict[Path, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, path: Path) -> None:
        self.path = path
        with self._locks_guard:
            self._lock = self._locks.setdefault(path.resolve(), threading.Lock())

    def _read(self) -> dict[str, str]:
        try:
            return _parse(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}

    def get(self, declaring_type: str) -> str | None:
        return self._read().get(declaring_type)

    def put_if_absent(self, declaring_type: str, file_path: str) -> str:
        line = f"{declaring_type}{SEPARATOR}{file_path}\n".encode()
        with self._lock:
            existing = self._read().get(declaring_type)
            if existing is not None:
                return existing
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
            try:
                os.write(fd, line)
            finally:
                os.close(fd)
        logger.debug("Cached location %s => %s", declaring_type, file_path)
        # Another process may have appended first.
        return self._read().get(declaring_type, file_path)

    def entries(self) -> dict[str, str]:
        return self._read()

    def clear(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)
