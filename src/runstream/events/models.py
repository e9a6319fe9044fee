"""Structured payloads written to the event stream."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from runstream.types import Status


class SuiteStarted(BaseModel):
    """Payload of the ``minitest_start`` message."""

    test_count: int = Field(ge=0)


class EventRecord(BaseModel):
    """Payload of the ``minitest_test_finished`` message.

    Field names on the wire follow the consumer's established keys, so the
    Python names differ from the serialized ones for the last four fields.

    Attributes:
    ----------
    test_class: str
        Class that groups the test
    test_name: str
        Display name with engine prefixes stripped
    assertions_count: int
        Number of assertions executed
    location: str
        ``file:line`` or ``file:`` when only the file is known
    status: Status
        Final status
    run_time_seconds: float | None
        Run time, ``None`` when the test never finished
    fully_formatted_failure: str | None
        First failure line followed by the relevant trace frames
    captured_output: str | None
        Printed output with attachment tags removed
    attachments: list[str | None]
        Base64 payload per attachment kind
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    test_class: str
    test_name: str
    assertions_count: int = Field(ge=0)
    location: str
    status: Status
    run_time_seconds: float | None = Field(default=None, alias="run_time")
    fully_formatted_failure: str | None = Field(default=None, alias="fully_formatted")
    captured_output: str | None = Field(default=None, alias="output_inside")
    attachments: list[str | None] = Field(default_factory=lambda: [None], alias="screenshots_base64")
