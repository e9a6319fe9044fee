"""Reporters for runstream test events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from runstream.reports.base import Reporter
from runstream.reports.console import ConsoleReporter
from runstream.reports.registry import (
    default_registry,
    register_builtin,
    reporter,
    resolve_reporter,
    resolve_reporters,
)
from runstream.reports.stream import ReporterState, StreamReporter

if TYPE_CHECKING:
    from runstream.config import RunstreamConfig


register_builtin("console", ConsoleReporter)
register_builtin("stream", StreamReporter)


def build_reporter(config: RunstreamConfig, **kwargs: Any) -> Reporter:
    """Return the reporter selected by ``config``.

    Structured mode uses :class:`StreamReporter`; otherwise the legacy
    :class:`ConsoleReporter` renders a human-readable listing.
    """
    if config.reporter:
        return resolve_reporter(config.reporter, **kwargs)
    if config.structured:
        from runstream.location import LocationResolver, SourceSearcher
        from runstream.storage import open_location_store

        resolver = LocationResolver(
            config.source_root,
            store=open_location_store(config.cache_path),
            searcher=SourceSearcher(timeout=config.search_timeout),
        )
        return StreamReporter(resolver=resolver, transient_dir=config.transient_dir, **kwargs)
    return ConsoleReporter(
        print_failure_summary=config.print_failure_summary,
        verbosity=config.verbosity,
        **kwargs,
    )


__all__ = [
    "ConsoleReporter",
    "Reporter",
    "ReporterState",
    "StreamReporter",
    "build_reporter",
    "default_registry",
    "reporter",
    "resolve_reporter",
    "resolve_reporters",
]
