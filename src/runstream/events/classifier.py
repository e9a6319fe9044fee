"""Outcome classification for finished tests."""

from __future__ import annotations

from runstream.errors import ClassificationError
from runstream.types import Errored, Failed, Passed, Skipped, Status, TestRecord


def classify(record: TestRecord) -> Status:
    """Return the status of a finished test.

    First match wins: passed, error, skipped, failed. A record in none of
    these states raises :class:`ClassificationError`.
    """
    outcome = record.outcome
    if isinstance(outcome, Passed):
        return Status.PASSED
    if isinstance(outcome, Errored):
        return Status.ERROR
    if isinstance(outcome, Skipped):
        return Status.SKIPPED
    if isinstance(outcome, Failed):
        return Status.FAILED
    raise ClassificationError(record, outcome)
