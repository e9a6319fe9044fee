"""Named lookup of reporter classes.

Built-in reporters are registered under short names (``stream``,
``console``). Third-party reporters either register themselves with the
:func:`reporter` decorator or are referenced by a ``module:Class`` path.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from runstream.reports.base import Reporter

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=type)


class ReporterRegistry:
    """Maps reporter names to classes; built-in entries survive :meth:`reset`."""

    def __init__(self) -> None:
        self._entries: dict[str, type] = {}
        self._builtins: dict[str, type] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def names(self) -> list[str]:
        return sorted(self._entries)

    def add(self, name: str, cls: type, *, builtin: bool = False) -> None:
        if name in self._entries and self._entries[name] is not cls:
            logger.warning("Reporter name %r rebound from %s to %s", name, self._entries[name].__name__, cls.__name__)
        self._entries[name] = cls
        if builtin:
            self._builtins[name] = cls

    def reset(self) -> None:
        """Drop everything except built-ins."""
        self._entries = dict(self._builtins)

    def lookup(self, name: str) -> type:
        if name in self._entries:
            return self._entries[name]
        if ":" in name:
            return _import_reporter(name)
        msg = f"Unknown reporter: {name}. Available: {', '.join(self.names())}"
        raise ValueError(msg)

    def create(self, name: str, **options: Any) -> Reporter:
        return self.lookup(name)(**options)


def _import_reporter(path: str) -> type:
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        msg = f"Invalid reporter path: {path} (expected module:Class)"
        raise ValueError(msg)

    obj: Any = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)

    if not isinstance(obj, type) or not issubclass(obj, Reporter):
        msg = f"{path} is not a Reporter"
        raise TypeError(msg)
    return obj


default_registry = ReporterRegistry()


def reporter(name: str, *, enabled: bool = True) -> Callable[[R], R]:
    """Class decorator registering a reporter under ``name``.

        @reporter("junit")
        class JUnitReporter: ...
    """

    def decorator(cls: R) -> R:
        if enabled:
            default_registry.add(name, cls)
        return cls

    return decorator


def register_builtin(name: str, cls: type) -> None:
    default_registry.add(name, cls, builtin=True)


def resolve_reporter(name: str, **options: Any) -> Reporter:
    """Instantiate the reporter registered as ``name`` or importable as ``module:Class``.

    Raises:
        ValueError: If the name is neither registered nor an import path.
        TypeError: If the imported object lacks the reporter hooks.
    """
    return default_registry.create(name, **options)


def resolve_reporters(
    names: Iterable[str],
    options: Mapping[str, Mapping[str, Any]] | None = None,
) -> list[Reporter]:
    options = options or {}
    return [resolve_reporter(name, **options.get(name, {})) for name in names]


__all__ = [
    "ReporterRegistry",
    "default_registry",
    "register_builtin",
    "reporter",
    "resolve_reporter",
    "resolve_reporters",
]
