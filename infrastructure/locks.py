"""
In-process keyed locks.

SQLite's BEGIN IMMEDIATE serializes writers across processes; these locks keep
threads of one process from queueing on the database write lock for the same
wallet or market and give a deterministic acquisition order for multi-party
operations.
"""

import threading
from contextlib import contextmanager


class KeyedLockRegistry:
    """
    Hands out one threading.Lock per key, created lazily.

    Locks are never removed; the key space (user ids, market ids) is bounded by
    the rows in the database.
    """

    def __init__(self, name: str = "locks"):
        self.name = name
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def _get(self, key: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, *keys: int | None):
        """
        Hold the locks for every given key for the duration of the block.

        Keys are de-duplicated and acquired in ascending order; None is ignored.
        Locks are released in reverse order even when the block raises.
        """
        ordered = sorted({k for k in keys if k is not None})
        acquired: list[threading.Lock] = []
        try:
            for key in ordered:
                lock = self._get(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
