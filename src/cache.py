import threading
import time
from collections.abc import Callable
from typing import Generic, TypeVar

from cachetools import TTLCache

V = TypeVar("V")


class ExpiringLRUCache(Generic[V]):
    """Thread-safe in-memory cache bounded both by entry count and by age.

    Backed by `cachetools.TTLCache`: entries whose age reaches `ttl_seconds` are
    reported as absent, and when the cache is full the least recently used entry
    is evicted to make room. Both `get` hits and `put` count as a use.
    """

    def __init__(
        self,
        max_size: int,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        self._max_size = max_size
        self._ttl_seconds = ttl_seconds
        # TTLCache is not thread-safe on its own.
        self._entries: TTLCache[str, V] = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=clock)
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: str) -> tuple[V | None, bool]:
        """Return `(value, True)` for a live entry, `(None, False)` otherwise."""
        with self._lock:
            try:
                return self._entries[key], True
            except KeyError:
                return None, False

    def put(self, key: str, value: V) -> None:
        """Insert or replace the entry for `key` with a fresh timestamp."""
        with self._lock:
            self._entries[key] = value

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
