"""runstream - structured test event reporter for unittest suites."""

from .capture import CaptureSession, OutputCapture
from .config import RunstreamConfig, load_config
from .errors import (
    CaptureError,
    ClassificationError,
    ConfigError,
    LifecycleError,
    RunstreamError,
)
from .events import EventRecord, MessageKind, ProtocolEmitter, parse_messages
from .location import LocationResolver, SourceSearcher
from .reports import ConsoleReporter, Reporter, StreamReporter, build_reporter
from .testing import AssertionCountingMixin, StreamTestRunner
from .types import Errored, Failed, Passed, Skipped, SourceLocation, Status, TestRecord
from .version import __version__


__all__ = [
    # Pipeline
    "OutputCapture",
    "CaptureSession",
    "LocationResolver",
    "SourceSearcher",
    "EventRecord",
    "MessageKind",
    "ProtocolEmitter",
    "parse_messages",
    # Reporters
    "Reporter",
    "StreamReporter",
    "ConsoleReporter",
    "build_reporter",
    # unittest binding
    "AssertionCountingMixin",
    "StreamTestRunner",
    # Records
    "TestRecord",
    "SourceLocation",
    "Status",
    "Passed",
    "Skipped",
    "Failed",
    "Errored",
    # Config and errors
    "RunstreamConfig",
    "load_config",
    "RunstreamError",
    "ClassificationError",
    "LifecycleError",
    "CaptureError",
    "ConfigError",
]
