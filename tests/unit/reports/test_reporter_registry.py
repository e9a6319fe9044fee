"""Tests for runstream.reports.registry module."""

from pathlib import Path

import pytest

from runstream.config import RunstreamConfig
from runstream.reports import ConsoleReporter, StreamReporter, build_reporter
from runstream.reports.registry import (
    ReporterRegistry,
    default_registry,
    reporter,
    resolve_reporter,
    resolve_reporters,
)
from runstream.storage import TextFileLocationStore


@pytest.fixture(autouse=True)
def clean_registry():
    default_registry.reset()
    yield
    default_registry.reset()


class DummyReporter:
    def __init__(self, verbosity: int = 0):
        self.verbosity = verbosity

    def on_suite_start(self, test_count: int) -> None:
        pass

    def on_test_start(self, record) -> None:
        pass

    def on_test_end(self, record) -> None:
        pass

    def on_suite_end(self) -> None:
        pass


class NotAReporter:
    pass


class TestReporterDecorator:
    def test_registers_under_name(self):
        @reporter("dummy")
        class MyReporter(DummyReporter):
            pass

        assert default_registry.lookup("dummy") is MyReporter

    def test_disabled_registration(self):
        @reporter("disabled", enabled=False)
        class DisabledReporter(DummyReporter):
            pass

        assert "disabled" not in default_registry

    def test_reset_keeps_builtins(self):
        @reporter("temporary")
        class Temporary(DummyReporter):
            pass

        default_registry.reset()

        assert "temporary" not in default_registry
        assert default_registry.names() == ["console", "stream"]

    def test_rebinding_logs_warning(self, caplog):
        registry = ReporterRegistry()
        registry.add("dup", DummyReporter)

        registry.add("dup", NotAReporter)

        assert "rebound" in caplog.text


class TestResolveReporter:
    def test_resolve_with_options(self):
        @reporter("configurable")
        class ConfigurableReporter(DummyReporter):
            pass

        assert resolve_reporter("configurable", verbosity=2).verbosity == 2

    def test_builtins(self):
        assert default_registry.lookup("stream") is StreamReporter
        assert isinstance(resolve_reporter("console"), ConsoleReporter)

    def test_resolve_import_path(self):
        instance = resolve_reporter("runstream.reports.console:ConsoleReporter")
        assert isinstance(instance, ConsoleReporter)

    def test_resolve_nested_attribute(self):
        instance = resolve_reporter(f"{__name__}:Holder.Inner")
        assert isinstance(instance, DummyReporter)

    def test_resolve_unknown_lists_available(self):
        with pytest.raises(ValueError, match="Unknown reporter: nope. Available: console, stream"):
            resolve_reporter("nope")

    def test_resolve_missing_module(self):
        with pytest.raises(ModuleNotFoundError):
            resolve_reporter("nonexistent.module:Reporter")

    def test_resolve_non_reporter_raises(self):
        with pytest.raises(TypeError, match="is not a Reporter"):
            resolve_reporter(f"{__name__}:NotAReporter")

    def test_resolve_incomplete_path(self):
        with pytest.raises(ValueError, match="expected module:Class"):
            resolve_reporter("runstream.reports:")

    def test_resolve_many_with_options(self):
        @reporter("options")
        class OptionsReporter(DummyReporter):
            pass

        instances = resolve_reporters(["options", "console"], options={"options": {"verbosity": 3}})

        assert instances[0].verbosity == 3
        assert isinstance(instances[1], ConsoleReporter)


class Holder:
    class Inner(DummyReporter):
        pass


class TestBuildReporter:
    def test_structured_by_default(self, tmp_path: Path):
        config = RunstreamConfig(source_root=tmp_path, cache_path=tmp_path / "minitest_cache_file")

        built = build_reporter(config)

        assert isinstance(built, StreamReporter)
        assert isinstance(built.resolver.store, TextFileLocationStore)
        assert built.resolver.source_root == tmp_path.resolve()

    def test_legacy_mode(self, tmp_path: Path):
        config = RunstreamConfig(source_root=tmp_path, structured=False, print_failure_summary=True)

        built = build_reporter(config)

        assert isinstance(built, ConsoleReporter)
        assert built.print_failure_summary

    def test_named_reporter_wins(self, tmp_path: Path):
        config = RunstreamConfig(source_root=tmp_path, reporter="console")

        assert isinstance(build_reporter(config), ConsoleReporter)
