"""Shared types for runstream: test records, outcomes and statuses."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from traceback import StackSummary


class Status(Enum):
    """Final status of a reported test."""

    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class Passed:
    """The test finished without failures."""


@dataclass(frozen=True, slots=True)
class Skipped:
    """The test was explicitly skipped."""

    reason: str = ""


@dataclass(frozen=True, slots=True)
class Failed:
    """An assertion in the test did not hold."""

    message: str
    trace: StackSummary = field(default_factory=StackSummary)


@dataclass(frozen=True, slots=True)
class Errored:
    """The test raised an unexpected exception."""

    message: str
    trace: StackSummary = field(default_factory=StackSummary)


Outcome = Passed | Skipped | Failed | Errored


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """File and line reported by the host engine for a test."""

    path: str
    line: int | None = None

    def __str__(self) -> str:
        return f"{self.path}:{'' if self.line is None else self.line}"


_ENGINE_PREFIX = re.compile(r"^test_\d*")
_COLON_PREFIX = re.compile(r"^test_: ")


def display_name(name: str) -> str:
    """Strip engine-generated prefixes from a test method name."""
    name = _COLON_PREFIX.sub("", name)
    name = _ENGINE_PREFIX.sub("", name)
    if name.startswith("_"):
        name = name[1:]
    return name.strip()


@dataclass(slots=True)
class TestRecord:
    """Everything the host engine knows about one test.

    Attributes
    ----------
    test_class
        Name of the class that groups the test, as shown to consumers.
    name
        Raw test method name.
    declaring_type
        Bare name of the class that defines the test, used as the location cache key.
    static_location
        Location supplied by the host engine. May be wrong or outside the source root.
    assertion_count
        Number of assertions executed.
    elapsed_seconds
        Run time, ``None`` when the test never finished.
    outcome
        Final outcome, ``None`` until the host engine finalizes the record.
    """

    __test__ = False

    test_class: str
    name: str
    declaring_type: str
    static_location: SourceLocation
    assertion_count: int = 0
    elapsed_seconds: float | None = None
    outcome: Outcome | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.test_class}#{self.name}"

    @property
    def display_name(self) -> str:
        return display_name(self.name)

    @property
    def failure(self) -> Failed | Errored | None:
        if isinstance(self.outcome, Failed | Errored):
            return self.outcome
        return None
