from .assertions import AssertionCountingMixin
from .loader import load_tests
from .runner import StreamTestResult, StreamTestRunner, make_record

__all__ = [
    "AssertionCountingMixin",
    "StreamTestResult",
    "StreamTestRunner",
    "load_tests",
    "make_record",
]
