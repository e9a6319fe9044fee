"""Configuration loading for runstream.

Values come from ``[tool.runstream]`` in the project's ``pyproject.toml``,
then ``RUNSTREAM_*`` environment variables (a ``.env`` file is honoured),
then command-line flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from runstream.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "RUNSTREAM_"
DEFAULT_CACHE_PATH = Path(".runstream/locations.db")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class RunstreamConfig:
    """Resolved reporter settings.

    Attributes
    ----------
    source_root
        Tests whose static location lies under this directory are reported as-is.
    cache_path
        Location cache file. ``.db``/``.sqlite`` selects SQLite, anything else the text format.
    structured
        Emit framed events; ``False`` falls back to the console listing.
    print_failure_summary
        Console mode only: print failures at the end instead of inline.
    search_timeout
        Seconds allowed for one source search, ``None`` for no bound.
    transient_dir
        Trace frames containing this string are dropped from failures.
    """

    source_root: Path = field(default_factory=Path.cwd)
    cache_path: Path = DEFAULT_CACHE_PATH
    structured: bool = True
    print_failure_summary: bool = False
    search_timeout: float | None = 10.0
    transient_dir: str = "/cache/"
    test_paths: list[str] = field(default_factory=lambda: ["tests"])
    pattern: str = "test*.py"
    reporter: str | None = None
    verbosity: int = 0

    def with_overrides(self, **overrides: Any) -> RunstreamConfig:
        """Return a copy with every non-``None`` override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


DEFAULT_CONFIG = RunstreamConfig()


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from ``start`` to the first directory with ``pyproject.toml`` or ``.git``."""
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / "pyproject.toml").is_file() or (candidate / ".git").exists():
            return candidate
    return current


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    msg = f"{key}: expected a boolean, got {value!r}"
    raise ConfigError(msg)


def _parse_timeout(key: str, value: Any) -> float | None:
    if value is None or (isinstance(value, str) and value.strip().lower() in {"", "none"}):
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        msg = f"{key}: expected seconds, got {value!r}"
        raise ConfigError(msg) from exc
    return timeout if timeout > 0 else None


def _parse_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        msg = f"{key}: expected an integer, got {value!r}"
        raise ConfigError(msg) from exc


def _parse_paths(key: str, value: Any) -> list[str]:
    if isinstance(value, str):
        return [p for p in value.split(os.pathsep) if p]
    if isinstance(value, list) and all(isinstance(p, str) for p in value):
        return list(value)
    msg = f"{key}: expected a list of paths, got {value!r}"
    raise ConfigError(msg)


def _coerce(raw: Mapping[str, Any], root: Path) -> dict[str, Any]:
    known = {f.name for f in fields(RunstreamConfig)}
    values: dict[str, Any] = {}
    for key, value in raw.items():
        name = key.replace("-", "_")
        if name not in known:
            logger.warning("Ignoring unknown runstream setting %r", key)
            continue
        if name in {"source_root", "cache_path"}:
            path = Path(str(value)).expanduser()
            values[name] = path if path.is_absolute() else root / path
        elif name in {"structured", "print_failure_summary"}:
            values[name] = _parse_bool(key, value)
        elif name == "search_timeout":
            values[name] = _parse_timeout(key, value)
        elif name == "verbosity":
            values[name] = _parse_int(key, value)
        elif name == "test_paths":
            values[name] = _parse_paths(key, value)
        else:
            values[name] = None if value in ("", None) else str(value)
    return values


def _read_pyproject(root: Path) -> dict[str, Any]:
    pyproject = root / "pyproject.toml"
    if not pyproject.is_file():
        return {}
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid {pyproject}: {exc}"
        raise ConfigError(msg) from exc
    section = data.get("tool", {}).get("runstream", {})
    if not isinstance(section, dict):
        msg = f"[tool.runstream] in {pyproject} must be a table"
        raise ConfigError(msg)
    return section


def _read_env(environ: Mapping[str, str]) -> dict[str, str]:
    return {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.startswith(ENV_PREFIX)
    }


def load_config(start: Path | None = None, environ: Mapping[str, str] | None = None) -> RunstreamConfig:
    """Load configuration for the project containing ``start``."""
    root = find_project_root(start)
    if environ is None:
        load_dotenv(root / ".env")
        environ = os.environ

    values: dict[str, Any] = {"source_root": root, "cache_path": root / DEFAULT_CACHE_PATH}
    values.update(_coerce(_read_pyproject(root), root))
    values.update(_coerce(_read_env(environ), root))
    return RunstreamConfig(**values)
