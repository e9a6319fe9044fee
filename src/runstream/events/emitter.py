"""Sentinel-framed messages on a shared text stream."""

from __future__ import annotations

import json
import re
import threading
from enum import StrEnum
from typing import Any, TextIO

from pydantic import BaseModel

FRAME_PREFIX = "|||NEW_MESSAGE|||RUNNING|||"
DELIMITER = "|||"

_FRAME = re.compile(r"\|\|\|NEW_MESSAGE\|\|\|RUNNING\|\|\|(?P<kind>[^|\n]+)\|\|\|(?P<payload>.*?)\|\|\|$", re.MULTILINE)

_stream_locks: dict[int, threading.Lock] = {}
_stream_locks_guard = threading.Lock()


def _lock_for(stream: TextIO) -> threading.Lock:
    with _stream_locks_guard:
        return _stream_locks.setdefault(id(stream), threading.Lock())


class MessageKind(StrEnum):
    MINITEST_START = "minitest_start"
    MINITEST_TEST_FINISHED = "minitest_test_finished"


def frame(kind: str, payload: BaseModel) -> str:
    """Render one message, payload serialized as single-line JSON."""
    body = payload.model_dump_json(by_alias=True)
    return f"\n{FRAME_PREFIX}{kind}{DELIMITER}{body}{DELIMITER}\n"


class ProtocolEmitter:
    """Write framed messages to the uncaptured output stream.

    Each message is one ``write`` followed by ``flush`` under a lock shared by
    every emitter on the same stream, so frames from different workers never
    interleave. Write errors propagate to the caller.
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self._lock = _lock_for(stream)

    def emit(self, kind: MessageKind | str, payload: BaseModel) -> None:
        text = frame(str(kind), payload)
        with self._lock:
            self.stream.write(text)
            self.stream.flush()


def parse_messages(text: str) -> list[tuple[str, dict[str, Any]]]:
    """Extract ``(kind, payload)`` pairs from a stream mixed with plain output."""
    return [
        (match.group("kind"), json.loads(match.group("payload")))
        for match in _FRAME.finditer(text)
    ]
