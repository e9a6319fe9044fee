"""Assemble test records into event payloads."""

from __future__ import annotations

from traceback import FrameSummary, StackSummary

from runstream.events.models import EventRecord
from runstream.types import Status, TestRecord

DEFAULT_TRANSIENT_DIR = "/cache/"

CYAN = "\x1b[36m"
RESET = "\x1b[0m"


def encodable(text: str | None) -> str | None:
    """Escape lone surrogates (e.g. from ``surrogateescape`` filenames) so the text is valid UTF-8."""
    if text is None:
        return None
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def format_frame(frame: FrameSummary) -> str:
    return f"{frame.filename}:{frame.lineno}:in `{frame.name}'"


def format_failure(
    message: str | None,
    trace: StackSummary | None = None,
    transient_dir: str = DEFAULT_TRANSIENT_DIR,
) -> str | None:
    """First line of ``message`` followed by every frame outside ``transient_dir``."""
    if message is None:
        return None

    first_line = message.split("\n", 1)[0]
    parts = ["\n", first_line]
    for frame in trace or ():
        line = format_frame(frame)
        if transient_dir and transient_dir in line:
            continue
        parts.append(f"\n    {CYAN}{line}{RESET}")
    return "".join(parts)


def format_event(
    record: TestRecord,
    location: str,
    status: Status,
    captured_output: str | None,
    attachments: list[str | None],
    transient_dir: str = DEFAULT_TRANSIENT_DIR,
) -> EventRecord:
    failure = record.failure
    fully_formatted = (
        format_failure(failure.message, failure.trace, transient_dir) if failure else None
    )
    return EventRecord(
        test_class=encodable(record.test_class),
        test_name=encodable(record.display_name),
        assertions_count=record.assertion_count,
        location=encodable(location),
        status=status,
        run_time_seconds=record.elapsed_seconds,
        fully_formatted_failure=encodable(fully_formatted),
        captured_output=encodable(captured_output),
        attachments=list(attachments),
    )
