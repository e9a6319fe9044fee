"""Location store protocol shared by the cache backends."""

from __future__ import annotations

from typing import Protocol


class LocationStore(Protocol):
    """Persistent mapping from declaring type to source file.

    Entries are never overwritten: the first ``put_if_absent`` for a type
    wins and every later lookup returns that path.
    """

    def get(self, declaring_type: str) -> str | None:
        """Return the cached path for ``declaring_type``, if any."""
        ...

    def put_if_absent(self, declaring_type: str, file_path: str) -> str:
        """Store ``file_path`` unless an entry exists; return the stored path."""
        ...

    def entries(self) -> dict[str, str]:
        """Return all entries."""
        ...

    def clear(self) -> None:
        """Remove all entries."""
        ...
