"""Shared fixtures for unit tests."""

import sys
import traceback
from pathlib import Path

import pytest

from runstream.capture import OutputCapture
from runstream.types import Outcome, Passed, SourceLocation, TestRecord


class RecordingReporter:
    """Reporter that remembers every hook call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def on_suite_start(self, test_count: int) -> None:
        self.calls.append(("suite_start", test_count))

    def on_test_start(self, record: TestRecord) -> None:
        self.calls.append(("test_start", record))

    def on_test_end(self, record: TestRecord) -> None:
        self.calls.append(("test_end", record))

    def on_suite_end(self) -> None:
        self.calls.append(("suite_end", None))

    @property
    def finished(self) -> list[TestRecord]:
        return [arg for name, arg in self.calls if name == "test_end"]


@pytest.fixture
def recording_reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture(autouse=True)
def release_capture():
    """Restore sys.stdout if a test left an output capture open."""
    original = sys.stdout
    yield
    if OutputCapture._active is not None:
        sys.stdout = original
        OutputCapture._active = None


def make_record(
    name: str = "test_adds_items",
    *,
    test_class: str = "CartTest",
    outcome: Outcome | None = None,
    path: str = "/app/tests/test_cart.py",
    line: int | None = 12,
    assertions: int = 1,
    elapsed: float | None = 0.01,
) -> TestRecord:
    return TestRecord(
        test_class=test_class,
        name=name,
        declaring_type=test_class,
        static_location=SourceLocation(path, line),
        assertion_count=assertions,
        elapsed_seconds=elapsed,
        outcome=outcome if outcome is not None else Passed(),
    )


def stack(*frames: tuple[str, int, str]) -> traceback.StackSummary:
    """Build a StackSummary from (filename, lineno, name) triples."""
    return traceback.StackSummary.from_list(
        [traceback.FrameSummary(filename, lineno, name, line="") for filename, lineno, name in frames]
    )


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """A small project with two modules defining test classes."""
    root = tmp_path / "project"
    (root / "tests" / "shop").mkdir(parents=True)
    (root / "tests" / "shop" / "test_cart.py").write_text(
        "import unittest\n\n\nclass CartTest(unittest.TestCase):\n    def test_total(self):\n        pass\n"
    )
    (root / "tests" / "test_user.py").write_text(
        "import unittest\n\n\nclass UserTest(unittest.TestCase):\n    pass\n\n\nclass UserTestHelpers:\n    pass\n"
    )
    return root


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def stack_factory():
    return stack
