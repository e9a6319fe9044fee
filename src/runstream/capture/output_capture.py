"""Sys-level stdout capture for a single test window.

Captures Python-level output (print, sys.stdout.write). Does NOT capture
fd-level output (subprocesses, C extensions writing to fd 1).
"""

from __future__ import annotations

import io
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TextIO

from runstream.errors import CaptureError


@dataclass
class CaptureSession:
    """Captured stdout for exactly one test window."""

    original: TextIO
    buffer: io.StringIO = field(default_factory=io.StringIO)
    closed: bool = False
    _disabled: bool = field(default=False, repr=False)

    def getvalue(self) -> str:
        return self.buffer.getvalue()

    def text(self) -> str | None:
        """Captured output stripped of surrounding whitespace, ``None`` if empty."""
        return self.buffer.getvalue().strip() or None

    @contextmanager
    def disabled(self) -> Iterator[None]:
        """Temporarily disable capture, allowing output to pass through to real stdout."""
        self._disabled = True
        try:
            yield
        finally:
            self._disabled = False


class _SessionStream(io.TextIOBase):
    """Replacement for sys.stdout that writes into the active session."""

    def __init__(self, session: CaptureSession) -> None:
        self._session = session

    def write(self, s: str) -> int:
        if self._session._disabled:
            self._session.original.write(s)
        else:
            self._session.buffer.write(s)
        return len(s)

    def flush(self) -> None:
        if self._session._disabled:
            self._session.original.flush()

    @property
    def encoding(self) -> str | None:
        return getattr(self._session.original, "encoding", "utf-8")

    def fileno(self) -> int:
        return self._session.original.fileno()

    def isatty(self) -> bool:
        return False


class OutputCapture:
    """Owns the single stdout redirection used between test start and test end."""

    _active: CaptureSession | None = None
    _lock = threading.Lock()

    def __init__(self) -> None:
        self._session: CaptureSession | None = None

    @property
    def session(self) -> CaptureSession | None:
        return self._session

    @property
    def original_stdout(self) -> TextIO:
        """The stream output goes to when no session is open."""
        if self._session is not None:
            return self._session.original
        return sys.stdout

    def open(self) -> CaptureSession:
        """Redirect sys.stdout into a fresh session buffer."""
        with OutputCapture._lock:
            if OutputCapture._active is not None:
                msg = "Output capture already open; close the previous test window first"
                raise CaptureError(msg)
            session = CaptureSession(original=sys.stdout)
            sys.stdout = _SessionStream(session)
            OutputCapture._active = session
        self._session = session
        return session

    def close(self) -> str | None:
        """Restore sys.stdout and return the captured text, stripped.

        Returns ``None`` when nothing but whitespace was written.
        """
        session = self._session
        if session is None:
            msg = "Output capture closed without a matching open"
            raise CaptureError(msg)
        with OutputCapture._lock:
            sys.stdout = session.original
            session.closed = True
            OutputCapture._active = None
        self._session = None
        return session.text()

    @contextmanager
    def capture(self) -> Iterator[CaptureSession]:
        """Open a session for the duration of the block."""
        session = self.open()
        try:
            yield session
        finally:
            if not session.closed:
                self.close()


def get_active_session() -> CaptureSession | None:
    """Return the capture session currently receiving stdout, if any."""
    return OutputCapture._active
