"""Structured reporter emitting sentinel-framed events."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import TextIO

from runstream.capture import OutputCapture
from runstream.errors import LifecycleError
from runstream.events.attachments import extract_all, strip_tags
from runstream.events.classifier import classify
from runstream.events.emitter import MessageKind, ProtocolEmitter
from runstream.events.formatter import DEFAULT_TRANSIENT_DIR, format_event
from runstream.events.models import EventRecord, SuiteStarted
from runstream.location import LocationResolver
from runstream.types import TestRecord

logger = logging.getLogger(__name__)


class ReporterState(Enum):
    IDLE = "idle"
    SUITE_RUNNING = "suite_running"
    TEST_RUNNING = "test_running"


class StreamReporter:
    """Turn lifecycle notifications into ``minitest_*`` messages.

    Output printed between ``on_test_start`` and ``on_test_end`` is captured
    and moved into the finished event. Messages are only written while no
    capture is open.
    """

    def __init__(
        self,
        *,
        stream: TextIO | None = None,
        resolver: LocationResolver | None = None,
        transient_dir: str = DEFAULT_TRANSIENT_DIR,
    ) -> None:
        self.emitter = ProtocolEmitter(stream or sys.stdout)
        self.resolver = resolver or LocationResolver(Path.cwd())
        self.transient_dir = transient_dir
        self.capture = OutputCapture()
        self.state = ReporterState.IDLE
        self._current: TestRecord | None = None

    def _expect(self, state: ReporterState, hook: str) -> None:
        if self.state is not state:
            msg = f"{hook} called in state {self.state.value}, expected {state.value}"
            raise LifecycleError(msg)

    def on_suite_start(self, test_count: int) -> None:
        self._expect(ReporterState.IDLE, "on_suite_start")
        self.emitter.emit(MessageKind.MINITEST_START, SuiteStarted(test_count=test_count))
        self.state = ReporterState.SUITE_RUNNING

    def on_test_start(self, record: TestRecord) -> None:
        self._expect(ReporterState.SUITE_RUNNING, "on_test_start")
        self.capture.open()
        self._current = record
        self.state = ReporterState.TEST_RUNNING

    def on_test_end(self, record: TestRecord) -> None:
        self._expect(ReporterState.TEST_RUNNING, "on_test_end")
        if record is not self._current:
            msg = f"on_test_end for {record.qualified_name} does not match the running test"
            raise LifecycleError(msg)

        output = self.capture.close()
        self._current = None
        self.state = ReporterState.SUITE_RUNNING

        event = self.build_event(record, output)
        self.emitter.emit(MessageKind.MINITEST_TEST_FINISHED, event)

    def on_suite_end(self) -> None:
        self._expect(ReporterState.SUITE_RUNNING, "on_suite_end")
        self.state = ReporterState.IDLE

    def build_event(self, record: TestRecord, output: str | None) -> EventRecord:
        location = self.resolver.resolve(record.declaring_type, record.static_location)
        status = classify(record)
        attachments = extract_all(output)
        logger.debug("%s finished: %s at %s", record.qualified_name, status.value, location)
        return format_event(
            record,
            location,
            status,
            strip_tags(output),
            attachments,
            transient_dir=self.transient_dir,
        )
