"""In-memory checkout id -> reference note cache."""

from __future__ import annotations

from collections import OrderedDict
from threading import Lock
import time
from typing import Callable, Optional, Tuple


class NoteCache:
    """Bounded mapping with per-entry TTL.

    Entries are not durable. The oldest entry is evicted once the cache is
    full, and expired entries are dropped lazily on access and on insert.
    """

    def __init__(
        self,
        *,
        max_entries: int = 10000,
        ttl_seconds: int = 86400,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self._max_entries = max_entries
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = Lock()
        self._store: "OrderedDict[str, Tuple[str, float]]" = OrderedDict()

    def _purge_expired(self, now: float) -> None:
        # Insertion order is expiry order, so stop at the first live entry.
        while self._store:
            key, (_, expires_at) = next(iter(self._store.items()))
            if expires_at > now:
                break
            self._store.pop(key, None)

    def put(self, checkout_id: str, note: str) -> None:
        if not checkout_id or not note:
            return
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            self._store.pop(checkout_id, None)
            self._store[checkout_id] = (note, now + self._ttl)
            while len(self._store) > self._max_entries:
                self._store.popitem(last=False)

    def get(self, checkout_id: Optional[str]) -> Optional[str]:
        if not checkout_id:
            return None
        now = self._clock()
        with self._lock:
            entry = self._store.get(checkout_id)
            if entry is None:
                return None
            note, expires_at = entry
            if expires_at <= now:
                self._store.pop(checkout_id, None)
                return None
            return note

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._store)

    def __contains__(self, checkout_id: object) -> bool:
        return isinstance(checkout_id, str) and self.get(checkout_id) is not None
