"""CLI module for runstream."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from runstream.config import RunstreamConfig, load_config
from runstream.errors import CacheSchemaError, ConfigError
from runstream.events.emitter import parse_messages
from runstream.reports import build_reporter
from runstream.storage import SqliteLocationStore, open_location_store
from runstream.testing import StreamTestRunner, load_tests


def main(argv: list[str] | None = None) -> None:
    """Entry point for the runstream CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    verbosity = getattr(args, "verbose", 0) - getattr(args, "quiet", 0)
    _configure_logging(verbosity)

    try:
        config = load_config()
    except ConfigError as exc:
        Console(stderr=True).print(f"[red]{exc}[/red]")
        raise SystemExit(2) from exc

    if args.command == "test":
        raise SystemExit(_run_tests(args, config, verbosity))

    if args.command == "cache":
        raise SystemExit(_run_cache_command(args, config))

    if args.command == "decode":
        raise SystemExit(_run_decode(args))

    parser.print_help()
    raise SystemExit(0)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING - 10 * verbosity
    logging.basicConfig(
        level=max(logging.DEBUG, min(logging.CRITICAL, level)),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _add_verbosity(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Reduce log output")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log output")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="runstream", description="Structured unittest event reporter")
    subparsers = parser.add_subparsers(dest="command")

    test_parser = subparsers.add_parser("test", help="Run unittest tests and stream events")
    test_parser.add_argument("paths", nargs="*", help="Test files or directories")
    test_parser.add_argument("-k", "--keyword", help="Only run tests whose name matches this pattern")
    test_parser.add_argument("-p", "--pattern", help="File pattern for discovery (default: test*.py)")
    test_parser.add_argument(
        "--legacy",
        action="store_true",
        help="Print a human-readable listing instead of framed events",
    )
    test_parser.add_argument(
        "--summary",
        action="store_true",
        help="Legacy mode: print failures at the end instead of inline",
    )
    test_parser.add_argument("--reporter", help="Reporter name or import path")
    test_parser.add_argument("--source-root", type=Path, help="Project source root")
    test_parser.add_argument("--cache-path", type=Path, help="Location cache file")
    test_parser.add_argument("--search-timeout", type=float, help="Seconds allowed per source search")
    test_parser.add_argument("--failfast", action="store_true", help="Stop on first failure or error")
    _add_verbosity(test_parser)

    cache_parser = subparsers.add_parser("cache", help="Location cache management commands")
    cache_subparsers = cache_parser.add_subparsers(dest="cache_command")
    cache_subparsers.add_parser("status", help="Show cache backend and size")
    cache_subparsers.add_parser("show", help="List cached locations")
    clear_parser = cache_subparsers.add_parser("clear", help="Delete all cached locations")
    clear_parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm without prompting",
    )
    for p in [cache_parser, *cache_subparsers.choices.values()]:
        p.add_argument("--cache-path", type=Path, help="Location cache file")
        _add_verbosity(p)

    decode_parser = subparsers.add_parser("decode", help="Pretty-print framed events from a captured stream")
    decode_parser.add_argument("file", nargs="?", type=Path, help="Stream file (default: stdin)")
    decode_parser.add_argument("--kind", help="Only show messages of this kind")
    _add_verbosity(decode_parser)

    return parser


def _test_config(args: argparse.Namespace, config: RunstreamConfig, verbosity: int) -> RunstreamConfig:
    return config.with_overrides(
        source_root=args.source_root.resolve() if args.source_root else None,
        cache_path=args.cache_path,
        search_timeout=args.search_timeout,
        pattern=args.pattern,
        reporter=args.reporter,
        structured=False if args.legacy else None,
        print_failure_summary=True if args.summary else None,
        test_paths=args.paths or None,
        verbosity=config.verbosity + verbosity,
    )


def _run_tests(args: argparse.Namespace, config: RunstreamConfig, verbosity: int) -> int:
    config = _test_config(args, config, verbosity)
    try:
        suite = load_tests(config.test_paths, pattern=config.pattern, keyword=args.keyword)
        reporter = build_reporter(config)
    except (ImportError, ValueError, TypeError) as exc:
        Console(stderr=True).print(f"[red]{exc}[/red]")
        return 2

    result = StreamTestRunner(reporter, failfast=args.failfast).run(suite)
    return 0 if result.wasSuccessful() else 1


def _cache_path(args: argparse.Namespace, config: RunstreamConfig) -> Path:
    return args.cache_path or config.cache_path


def _run_cache_command(args: argparse.Namespace, config: RunstreamConfig) -> int:
    console = Console()
    path = _cache_path(args, config)

    try:
        if args.cache_command == "status":
            return _cache_status(console, path)
        if args.cache_command == "show":
            return _cache_show(console, path)
    except CacheSchemaError as exc:
        console.print(f"[red]{exc}[/red]")
        return 1
    if args.cache_command == "clear":
        return _cache_clear(console, path, confirmed=args.yes)

    console.print("Usage: runstream cache <status|show|clear>")
    return 1


def _cache_status(console: Console, path: Path) -> int:
    store = open_location_store(path)
    backend = "sqlite" if isinstance(store, SqliteLocationStore) else "text"
    console.print(f"Cache: {path}")
    console.print(f"Backend: {backend}")
    if not path.exists():
        console.print("[yellow]Status: not created yet[/yellow]")
        return 0
    console.print(f"Entries: {len(store.entries())}")
    console.print("[green]Status: ok[/green]")
    return 0


def _cache_show(console: Console, path: Path) -> int:
    if not path.exists():
        console.print(f"[red]Cache not found: {path}[/red]")
        return 1

    table = Table("Declaring type", "File")
    for declaring_type, file_path in sorted(open_location_store(path).entries().items()):
        table.add_row(declaring_type, file_path or "[dim](not found)[/dim]")
    console.print(table)
    return 0


def _cache_clear(console: Console, path: Path, *, confirmed: bool) -> int:
    if not confirmed:
        console.print("[bold red]WARNING: This will DELETE all cached test locations.[/bold red]")
        console.print()
        console.print(f"Cache: {path}")
        console.print()
        console.print("To proceed, run:")
        console.print("    runstream cache clear --yes")
        return 1

    if path.exists():
        try:
            open_location_store(path).clear()
        except CacheSchemaError:
            for stale in (path, path.with_name(f"{path.name}-wal"), path.with_name(f"{path.name}-shm")):
                stale.unlink(missing_ok=True)
    console.print(f"[green]Cache cleared: {path}[/green]")
    return 0


def _run_decode(args: argparse.Namespace) -> int:
    console = Console()
    text = args.file.read_text(encoding="utf-8") if args.file else sys.stdin.read()
    messages = parse_messages(text)
    if args.kind:
        messages = [(kind, payload) for kind, payload in messages if kind == args.kind]
    for kind, payload in messages:
        console.rule(kind)
        console.print_json(data=payload)
    return 0 if messages else 1


__all__ = ["main"]
