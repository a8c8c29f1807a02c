from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from errors import StorageUnavailable
from json_store import atomic_write_json, read_json_document

from .interfaces import DocumentStore
from .locks import GLOBAL_PATH_LOCKS
from .paths import ensure_dir

logger = logging.getLogger(__name__)


class DiskJsonDocumentStore(DocumentStore):
    """
    Stores a single JSON document on disk at a fixed path.

    - load() raises StorageUnavailable on missing/invalid JSON.
    - Writes atomically (temp file + rename).
    - All instances for one path share a process-wide lock.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @property
    def description(self) -> str:
        return str(self._path)

    @property
    def lock(self) -> threading.RLock:
        return GLOBAL_PATH_LOCKS.lock_for(self._path)

    def initialize(self, seed: dict[str, Any]) -> bool:
        with self.lock:
            if self._path.exists():
                return False
            try:
                ensure_dir(self._path.parent)
            except OSError as e:
                logger.warning("STORE INIT: cannot create %s: %r", self._path.parent, e)
                raise StorageUnavailable(self._path, f"cannot create directory: {e}") from e
            atomic_write_json(self._path, seed)
            logger.info("STORE INIT: wrote seed document to %s", self._path)
            return True

    def load(self) -> dict[str, Any]:
        with self.lock:
            try:
                return read_json_document(self._path)
            except StorageUnavailable as e:
                logger.warning("STORE LOAD: %s unavailable: %s", self._path, e.reason)
                raise

    def save(self, doc: dict[str, Any]) -> None:
        with self.lock:
            try:
                atomic_write_json(self._path, doc)
            except StorageUnavailable as e:
                logger.warning("STORE SAVE: %s unavailable: %s", self._path, e.reason)
                raise
