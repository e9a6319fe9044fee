"""Legacy human-readable reporter, used when structured output is disabled."""

from __future__ import annotations

import re
import sys
from itertools import groupby
from typing import TextIO

from rich.console import Console
from rich.text import Text

from runstream.events.classifier import classify
from runstream.events.formatter import format_frame
from runstream.types import Status, TestRecord

STATUS_STYLES = {
    Status.PASSED: ("PASS", "green"),
    Status.FAILED: ("FAIL", "red"),
    Status.ERROR: ("ERROR", "red"),
    Status.SKIPPED: ("SKIP", "yellow"),
}

NAME_WIDTH = 64
_COLON_PREFIX = re.compile(r"^test_: ")


class ConsoleReporter:
    """Human-readable listing of test results, grouped by class."""

    def __init__(
        self,
        *,
        stream: TextIO | None = None,
        print_failure_summary: bool = False,
        verbosity: int = 0,
    ) -> None:
        self.console = Console(file=stream or sys.stdout, highlight=False)
        self.print_failure_summary = print_failure_summary
        self.verbosity = verbosity
        self.records: list[TestRecord] = []
        self._current_class: str | None = None

    def on_suite_start(self, test_count: int) -> None:
        if self.verbosity > 0:
            self.console.print(f"Running {test_count} tests")

    def on_test_start(self, record: TestRecord) -> None:
        if record.test_class != self._current_class:
            self._current_class = record.test_class
            self.console.print()
            self.console.print(record.test_class)

    def on_test_end(self, record: TestRecord) -> None:
        self.records.append(record)
        self._print_status(record)
        if not self.print_failure_summary and record.failure is not None:
            self._print_failure(record)
            self.console.print()

    def on_suite_end(self) -> None:
        if self.print_failure_summary:
            failed = sorted(
                (r for r in self.records if r.failure is not None),
                key=lambda r: (r.test_class, r.name),
            )
            if failed:
                self.console.print()
                self.console.print("Failures and errors:", style="red")
                for test_class, group in groupby(failed, key=lambda r: r.test_class):
                    self.console.print()
                    self.console.print(test_class)
                    for record in group:
                        self._print_status(record)
                        self._print_failure(record)
                        self.console.print()
        self._print_totals()

    def _print_status(self, record: TestRecord) -> None:
        label, style = STATUS_STYLES[classify(record)]
        name = _COLON_PREFIX.sub("test:", record.name)
        line = Text(f"  {name}".ljust(NAME_WIDTH))
        line.append(label, style=style)
        if record.elapsed_seconds is not None:
            line.append(f" ({record.elapsed_seconds:.2f}s)")
        self.console.print(line)

    def _print_failure(self, record: TestRecord) -> None:
        failure = record.failure
        if failure is None:
            return
        style = "red" if classify(record) is Status.ERROR else "yellow"
        self.console.print(Text(failure.message, style=style))
        for frame in failure.trace:
            self.console.print(Text(f"    {format_frame(frame)}", style="cyan"))

    def _print_totals(self) -> None:
        counts = {status: 0 for status in Status}
        for record in self.records:
            counts[classify(record)] += 1
        assertions = sum(r.assertion_count for r in self.records)
        color = "green" if not counts[Status.FAILED] and not counts[Status.ERROR] else "red"
        self.console.print()
        line = Text(f"{len(self.records)} tests, {assertions} assertions, ")
        line.append(
            f"{counts[Status.FAILED]} failures, {counts[Status.ERROR]} errors, ", style=color
        )
        line.append(f"{counts[Status.SKIPPED]} skips", style="yellow")
        self.console.print(line)
