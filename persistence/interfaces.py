from __future__ import annotations

from typing import Any, ContextManager, Protocol


class DocumentStore(Protocol):
    """
    A single JSON-like document holding every apartment, booking and id counter.
    """

    @property
    def lock(self) -> ContextManager[Any]:
        """Re-entrant lock guarding one read-modify-write cycle."""
        ...

    @property
    def description(self) -> str:
        """Where the document lives, for error reports."""
        ...

    def initialize(self, seed: dict[str, Any]) -> bool:
        """Write `seed` if nothing is stored yet. Returns True when it did."""
        ...

    def load(self) -> dict[str, Any]:
        """Load and return the full document; raises StorageUnavailable."""
        ...

    def save(self, doc: dict[str, Any]) -> None:
        """Replace the full document; raises StorageUnavailable."""
        ...
