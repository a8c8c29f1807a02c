from __future__ import annotations

import copy
import threading
from typing import Any

from errors import StorageUnavailable

from .interfaces import DocumentStore


class InMemoryDocumentStore(DocumentStore):
    """
    Keeps the document in a dict instead of a file. Used by tests.

    Documents are deep-copied in and out so callers never share state with
    what is "on disk".
    """

    def __init__(self, doc: dict[str, Any] | None = None):
        self._lock = threading.RLock()
        self._doc = copy.deepcopy(doc) if doc is not None else None
        self.save_count = 0

    @property
    def description(self) -> str:
        return "<memory>"

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def initialize(self, seed: dict[str, Any]) -> bool:
        with self._lock:
            if self._doc is not None:
                return False
            self._doc = copy.deepcopy(seed)
            return True

    def load(self) -> dict[str, Any]:
        with self._lock:
            if self._doc is None:
                raise StorageUnavailable(self.description, "missing")
            return copy.deepcopy(self._doc)

    def save(self, doc: dict[str, Any]) -> None:
        with self._lock:
            self._doc = copy.deepcopy(doc)
            self.save_count += 1
