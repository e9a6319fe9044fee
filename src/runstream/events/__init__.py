"""Event capture and formatting pipeline."""

from runstream.events.attachments import extract, extract_all, strip_tags
from runstream.events.classifier import classify
from runstream.events.emitter import MessageKind, ProtocolEmitter, parse_messages
from runstream.events.formatter import format_event, format_failure
from runstream.events.models import EventRecord, SuiteStarted


__all__ = [
    "EventRecord",
    "MessageKind",
    "ProtocolEmitter",
    "SuiteStarted",
    "classify",
    "extract",
    "extract_all",
    "format_event",
    "format_failure",
    "parse_messages",
    "strip_tags",
]
