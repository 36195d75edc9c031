"""
Review cache capability.

Owned and injected by the caller; the engine never creates one.
"""

import threading
import time
from typing import Any, Dict, Optional, Protocol, Tuple


class ReviewCache(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def put(self, key: str, value: Any) -> None:
        ...

    def expire(self, key: Optional[str] = None) -> None:
        ...


class InMemoryTTLCache:
    """Dict-backed cache whose entries expire ttl_seconds after they were stored."""

    def __init__(self, ttl_seconds: float = 300.0, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def expire(self, key: Optional[str] = None) -> None:
        """Drop one key, or every stale entry when key is None."""
        with self._lock:
            if key is not None:
                self._entries.pop(key, None)
                return
            now = self._clock()
            stale = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl_seconds]
            for k in stale:
                del self._entries[k]

    def __len__(self) -> int:
        return len(self._entries)
