"""Per-event mutual exclusion for the ledger's check-and-write section."""

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager


class LockTimeout(Exception):
    """The lock for a key could not be acquired within the allowed wait."""

    def __init__(self, key: Hashable, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout}s waiting for lock {key}")
        self.key = key
        self.timeout = timeout


class EventLockRegistry:
    """Lazily creates one lock per event; different events never contend."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, key: Hashable, timeout: float) -> Iterator[None]:
        """Hold the lock for key, waiting at most timeout seconds.

        Raises:
            LockTimeout: If the lock is still taken after timeout.
        """
        lock = self._lock_for(key)
        if not lock.acquire(timeout=timeout):
            raise LockTimeout(key, timeout)
        try:
            yield
        finally:
            lock.release()
