from __future__ import annotations

import threading
from pathlib import Path


class PathLockRegistry:
    """
    Hands out one re-entrant lock per normalized file path.

    Every store object pointing at the same file shares the lock, so a whole
    load -> mutate -> save cycle can be held as one critical section while
    the store's own load/save calls re-acquire it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, path: Path) -> threading.RLock:
        key = str(path.resolve())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock


GLOBAL_PATH_LOCKS = PathLockRegistry()
