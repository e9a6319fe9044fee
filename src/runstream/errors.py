"""Exception types raised by runstream."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from runstream.types import TestRecord


class RunstreamError(Exception):
    """Base class for runstream errors."""


class ClassificationError(RunstreamError):
    """Raised when a finished test is in none of the known outcome states."""

    def __init__(self, record: TestRecord, outcome: Any = None) -> None:
        self.record = record
        self.outcome = outcome
        super().__init__(
            f"Status not found for {record.qualified_name}: outcome={outcome!r}"
        )


class LifecycleError(RunstreamError):
    """Raised when the host engine calls reporter hooks out of order."""


class CaptureError(LifecycleError):
    """Raised when output capture is opened twice or closed while idle."""


class ConfigError(RunstreamError):
    """Raised when configuration values cannot be parsed."""


class CacheSchemaError(RunstreamError):
    """Raised when the SQLite location cache cannot be brought to the current schema."""

    def __init__(
        self,
        path: Path,
        current_version: int,
        target_version: int,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.current_version = current_version
        self.target_version = target_version
        self.cause = cause
        message = (
            f"Location cache {path} has schema v{current_version}, this runstream needs v{target_version}."
            " The cache only holds derived data; drop it with: runstream cache clear --yes"
        )
        if cause is not None:
            message += f" (cause: {cause})"
        super().__init__(message)
