"""Reporter interface driven by the unittest binding."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from runstream.types import TestRecord


@runtime_checkable
class Reporter(Protocol):
    """Receives run notifications in order: suite start, then a start/end
    pair per test, then suite end. Only one test is in flight at a time.
    """

    def on_suite_start(self, test_count: int) -> None: ...

    def on_test_start(self, record: TestRecord) -> None: ...

    def on_test_end(self, record: TestRecord) -> None:
        """``record`` carries its outcome, timing and assertion count."""
        ...

    def on_suite_end(self) -> None: ...
