"""In-memory TTL cache shared by market data providers."""

import threading
import time
from typing import Any, Callable, Hashable, Optional


class TTLCache:
    """
    Key/value cache with a validity window per entry.

    get_or_fetch holds a per-key lock while fetching, so concurrent callers
    trigger at most one fetch per key per validity window.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[Hashable, threading.Lock] = {}

    def get(
        self,
        key: Hashable,
        is_valid: Optional[Callable[[Any], bool]] = None,
    ) -> Optional[Any]:
        """Return the cached value if fresh (and accepted by is_valid), else None."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._clock() - stored_at > self._ttl:
            return None
        if is_valid is not None and not is_valid(value):
            return None
        return value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            now = self._clock()
            self._prune(now)
            self._entries[key] = (value, now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _prune(self, now: float) -> None:
        """Drop expired entries and idle per-key locks. Caller holds _lock."""
        expired = [k for k, (_, stored_at) in self._entries.items() if now - stored_at > self._ttl]
        for key in expired:
            del self._entries[key]
        idle = [
            k for k, lock in self._key_locks.items()
            if k not in self._entries and not lock.locked()
        ]
        for key in idle:
            del self._key_locks[key]

    def get_or_fetch(
        self,
        key: Hashable,
        fetch: Callable[[], Any],
        is_valid: Optional[Callable[[Any], bool]] = None,
    ) -> Any:
        """Return a fresh cached value or fetch, store and return a new one."""
        cached = self.get(key, is_valid)
        if cached is not None:
            return cached
        with self._key_lock(key):
            # Another caller may have fetched while we waited
            cached = self.get(key, is_valid)
            if cached is not None:
                return cached
            value = fetch()
            self.put(key, value)
            return value

    def _key_lock(self, key: Hashable) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock
