"""Cache for remote estimation answers.

Language model answers for the same ingredient and quantity do not change
within a session, so they are kept for a while instead of being requested
again every time the recipe is recalculated.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Hashable, Optional, Tuple


class Cache(ABC):
    """Abstract cache interface."""

    @abstractmethod
    def get(self, key: Hashable) -> Optional[object]:
        """Return the cached value, or None if missing or expired."""

    @abstractmethod
    def set(self, key: Hashable, value: object) -> None:
        """Store a value."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""


class InMemoryCache(Cache):
    """Thread-safe in-memory cache whose entries expire after a fixed TTL."""

    def __init__(
        self,
        ttl: Optional[float] = 900,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            ttl: Seconds an entry stays valid (None = never expires)
            clock: Time source, replaceable in tests
        """
        self._entries: Dict[Hashable, Tuple[object, Optional[float]]] = {}
        self._lock = threading.Lock()
        self._ttl = ttl
        self._clock = clock

    def get(self, key: Hashable) -> Optional[object]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: object) -> None:
        expires_at = None if self._ttl is None else self._clock() + self._ttl
        with self._lock:
            self._entries[key] = (value, expires_at)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class NullCache(Cache):
    """Cache that stores nothing, for when every answer must be fresh."""

    def get(self, key: Hashable) -> Optional[object]:
        return None

    def set(self, key: Hashable, value: object) -> None:
        pass

    def clear(self) -> None:
        pass
