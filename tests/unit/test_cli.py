"""Tests for the runstream command-line interface."""

import os
import sys
from pathlib import Path

import pytest

from runstream.cli import main
from runstream.events.emitter import parse_messages
from runstream.storage import TextFileLocationStore

PASSING_MODULE = """\
import unittest

from runstream.testing import AssertionCountingMixin


class CliPassingTest(AssertionCountingMixin, unittest.TestCase):
    def test_adds(self):
        self.assertEqual(1 + 1, 2)
"""

FAILING_MODULE = """\
import unittest


class CliFailingTest(unittest.TestCase):
    def test_breaks(self):
        self.assertEqual(1, 2)
"""


@pytest.fixture
def cli_project(tmp_path: Path, monkeypatch) -> Path:
    project = tmp_path / "proj"
    tests_dir = project / "tests"
    tests_dir.mkdir(parents=True)
    (project / "pyproject.toml").write_text(
        '[project]\nname = "proj"\n\n[tool.runstream]\ncache-path = ".runstream/locations.txt"\n'
    )
    (tests_dir / "test_cli_passing.py").write_text(PASSING_MODULE)
    monkeypatch.chdir(project)
    for key in [k for k in list(os.environ) if k.startswith("RUNSTREAM_")]:
        monkeypatch.delenv(key)
    yield project
    for name in ("test_cli_passing", "test_cli_failing"):
        sys.modules.pop(name, None)


def _exit_code(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestTestCommand:
    def test_passing_run_streams_events(self, cli_project: Path, capsys):
        code = _exit_code(["test", "tests"])

        out = capsys.readouterr().out
        messages = parse_messages(out)
        assert code == 0
        assert [kind for kind, _ in messages] == ["minitest_start", "minitest_test_finished"]
        assert messages[0][1] == {"test_count": 1}
        assert messages[1][1]["test_class"] == "CliPassingTest"
        assert messages[1][1]["status"] == "passed"

    def test_failing_run_exits_one(self, cli_project: Path, capsys):
        (cli_project / "tests" / "test_cli_failing.py").write_text(FAILING_MODULE)

        code = _exit_code(["test", "tests"])

        messages = parse_messages(capsys.readouterr().out)
        statuses = {p["test_class"]: p["status"] for k, p in messages if k == "minitest_test_finished"}
        assert code == 1
        assert statuses == {"CliPassingTest": "passed", "CliFailingTest": "failed"}

    def test_legacy_mode_prints_listing(self, cli_project: Path, capsys):
        code = _exit_code(["test", "tests", "--legacy"])

        out = capsys.readouterr().out
        assert code == 0
        assert "|||NEW_MESSAGE|||" not in out
        assert "CliPassingTest" in out
        assert "1 tests, 1 assertions, 0 failures, 0 errors, 0 skips" in out

    def test_unknown_reporter_exits_two(self, cli_project: Path, capsys):
        assert _exit_code(["test", "tests", "--reporter", "no-such-reporter"]) == 2

    def test_bad_config_exits_two(self, cli_project: Path, capsys):
        (cli_project / "pyproject.toml").write_text("[tool.runstream]\nstructured = 'maybe'\n")

        assert _exit_code(["test", "tests"]) == 2
        assert "structured" in capsys.readouterr().err


class TestCacheCommand:
    def _seed(self, project: Path) -> Path:
        path = project / ".runstream" / "locations.txt"
        TextFileLocationStore(path).put_if_absent("CartTest", "/src/tests/test_cart.py")
        return path

    def test_status_before_creation(self, cli_project: Path, capsys):
        assert _exit_code(["cache", "status"]) == 0
        out = capsys.readouterr().out
        assert "Backend: text" in out
        assert "not created yet" in out

    def test_status_counts_entries(self, cli_project: Path, capsys):
        self._seed(cli_project)

        assert _exit_code(["cache", "status"]) == 0
        assert "Entries: 1" in capsys.readouterr().out

    def test_show_lists_entries(self, cli_project: Path, capsys):
        self._seed(cli_project)

        assert _exit_code(["cache", "show"]) == 0
        assert "CartTest" in capsys.readouterr().out

    def test_show_missing_cache(self, cli_project: Path, capsys):
        assert _exit_code(["cache", "show"]) == 1

    def test_clear_requires_confirmation(self, cli_project: Path, capsys):
        path = self._seed(cli_project)

        assert _exit_code(["cache", "clear"]) == 1
        assert "runstream cache clear --yes" in capsys.readouterr().out
        assert TextFileLocationStore(path).get("CartTest") == "/src/tests/test_cart.py"

    def test_clear_with_yes(self, cli_project: Path, capsys):
        path = self._seed(cli_project)

        assert _exit_code(["cache", "clear", "--yes"]) == 0
        assert TextFileLocationStore(path).get("CartTest") is None

    def test_sqlite_backend_by_suffix(self, cli_project: Path, capsys):
        assert _exit_code(["cache", "status", "--cache-path", "other.db"]) == 0
        assert "Backend: sqlite" in capsys.readouterr().out


class TestDecodeCommand:
    def test_decodes_framed_file(self, cli_project: Path, capsys):
        stream = cli_project / "run.log"
        stream.write_text(
            'noise\n|||NEW_MESSAGE|||RUNNING|||minitest_start|||{"test_count": 3}|||\n'
        )

        assert _exit_code(["decode", str(stream)]) == 0
        out = capsys.readouterr().out
        assert "minitest_start" in out
        assert "test_count" in out

    def test_kind_filter_without_matches(self, cli_project: Path, capsys):
        stream = cli_project / "run.log"
        stream.write_text('|||NEW_MESSAGE|||RUNNING|||minitest_start|||{"test_count": 3}|||\n')

        assert _exit_code(["decode", str(stream), "--kind", "minitest_test_finished"]) == 1
