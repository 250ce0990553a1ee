import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Hashable, List, Optional, TypeVar

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    key: Hashable
    value: V
    created_at: float
    expires_at: float


class TTLCache(Generic[V]):
    """Simple in-memory TTL cache.

    Reads and writes are synchronous and lock-guarded so the same instance can
    be shared by the event loop and worker threads. Entries are replaced on
    write, never mutated, and an expired entry is dropped on the read that
    notices it.
    """

    def __init__(
        self,
        default_ttl: float = 30.0,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._clock = clock
        self._cache: Dict[Hashable, CacheEntry[V]] = {}
        self._access_order: List[Hashable] = []
        self._lock = threading.Lock()

    def _discard(self, key: Hashable) -> None:
        self._cache.pop(key, None)
        if key in self._access_order:
            self._access_order.remove(key)

    def get_entry(self, key: Hashable) -> Optional[CacheEntry[V]]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if self._clock() >= entry.expires_at:
                self._discard(key)
                return None

            # Update access order for LRU
            if key in self._access_order:
                self._access_order.remove(key)
            self._access_order.append(key)

            return entry

    def get(self, key: Hashable) -> Optional[V]:
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def set(self, key: Hashable, value: V, ttl: Optional[float] = None) -> CacheEntry[V]:
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            raise ValueError("ttl must be positive")

        with self._lock:
            now = self._clock()
            entry = CacheEntry(key=key, value=value, created_at=now, expires_at=now + ttl)
            self._cache[key] = entry

            if key in self._access_order:
                self._access_order.remove(key)
            self._access_order.append(key)

            # Evict oldest if over max size
            while len(self._cache) > self.max_size:
                oldest_key = self._access_order.pop(0)
                self._cache.pop(oldest_key, None)

            return entry

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._cache.items() if now >= entry.expires_at]
            for key in expired:
                self._discard(key)
            return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self._access_order.clear()

    def size(self) -> int:
        return len(self._cache)

    def __contains__(self, key: Any) -> bool:
        return self.get_entry(key) is not None
