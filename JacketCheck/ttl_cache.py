"""Small in-memory key-value cache with a time-to-live per entry."""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    stored_at: float


class TTLCache:
    """
    Key-value store whose entries expire ``ttl_seconds`` after they were written.

    The clock is injectable so expiry can be tested without sleeping. Writes
    replace the whole entry under a lock, so the last successful write wins
    when two callers refresh the same key.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        """
        Initialize cache.

        Args:
            ttl_seconds: How long an entry stays fresh after being written
            clock: Returns the current time in seconds (defaults to time.time)
        """
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        age = self.clock() - entry.stored_at
        if age < self.ttl_seconds:
            logging.debug(f"Cache hit for {key} (age: {age:.1f}s, TTL: {self.ttl_seconds}s)")
            return entry.value

        # Expired entries stay in place so peek() can still serve them as a fallback
        logging.debug(f"Cache entry for {key} expired (age: {age:.1f}s >= TTL: {self.ttl_seconds}s)")
        return None

    def peek(self, key: Hashable) -> Optional[Any]:
        """Return the last value written for key, even if it has expired."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value=value, stored_at=self.clock())

    def age(self, key: Hashable) -> Optional[float]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return self.clock() - entry.stored_at

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
