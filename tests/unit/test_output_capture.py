"""Tests for per-test stdout capture."""

import sys

import pytest

from runstream.capture import OutputCapture, get_active_session
from runstream.errors import CaptureError


class TestOutputCapture:
    def test_open_replaces_and_close_restores_stdout(self):
        original = sys.stdout
        capture = OutputCapture()

        capture.open()
        assert sys.stdout is not original

        capture.close()
        assert sys.stdout is original

    def test_close_returns_stripped_output(self):
        capture = OutputCapture()
        capture.open()
        print()
        print("  hello  ")
        print("world")

        assert capture.close() == "hello  \nworld"

    def test_empty_output_is_none(self):
        capture = OutputCapture()
        capture.open()

        assert capture.close() is None

    def test_whitespace_only_output_is_none(self):
        capture = OutputCapture()
        capture.open()
        print("   ")
        sys.stdout.write("\n\t\n")

        assert capture.close() is None

    def test_captured_output_is_hidden_from_terminal(self, capsys):
        capture = OutputCapture()
        capture.open()
        print("hidden")
        capture.close()

        out, _ = capsys.readouterr()
        assert "hidden" not in out

    def test_disabled_passes_through(self, capsys):
        capture = OutputCapture()
        session = capture.open()
        print("captured")
        with session.disabled():
            print("bypassed")
        text = capture.close()

        out, _ = capsys.readouterr()
        assert text == "captured"
        assert "bypassed" in out

    def test_sessions_do_not_share_output(self):
        capture = OutputCapture()
        capture.open()
        print("first")
        first = capture.close()
        capture.open()
        print("second")
        second = capture.close()

        assert (first, second) == ("first", "second")


class TestCaptureContract:
    def test_overlapping_windows_are_rejected(self):
        first = OutputCapture()
        second = OutputCapture()
        first.open()

        with pytest.raises(CaptureError):
            second.open()

        first.close()

    def test_close_without_open_raises(self):
        with pytest.raises(CaptureError):
            OutputCapture().close()

    def test_active_session_tracking(self):
        capture = OutputCapture()
        assert get_active_session() is None

        with capture.capture() as session:
            assert get_active_session() is session

        assert get_active_session() is None
        assert session.closed

    def test_original_stdout_bypasses_capture(self, capsys):
        capture = OutputCapture()
        with capture.capture():
            capture.original_stdout.write("direct\n")
            print("captured")

        out, _ = capsys.readouterr()
        assert out == "direct\n"
