"""In-memory key/value cache with per-entry absolute expiry."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

Clock = Callable[[], datetime]

# Number of lock stripes shared by all keys
DEFAULT_LOCK_STRIPES = 64


def utcnow() -> datetime:
    """Default clock: the current time as an aware UTC datetime."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class _CacheEntry(Generic[V]):
    value: V
    expires_at: datetime


class ExpiringCache(Generic[V]):
    """Thread-safe string-keyed cache where every entry carries its own deadline.

    Expired entries are purged lazily when read; :meth:`purge_expired` sweeps
    the whole store on demand.

    Single operations are atomic. Callers that need a read-modify-write on
    one key hold :meth:`lock` for that key around the whole sequence::

        with cache.lock(key):
            value = cache.get(key)
            cache.set(key, updated(value), expires_at)
    """

    def __init__(
        self,
        clock: Clock = utcnow,
        lock_stripes: int = DEFAULT_LOCK_STRIPES,
    ) -> None:
        if lock_stripes < 1:
            raise ValueError("lock_stripes must be at least 1")
        self._clock = clock
        self._entries: dict[str, _CacheEntry[V]] = {}
        self._lock = threading.Lock()
        self._stripes = [threading.RLock() for _ in range(lock_stripes)]

    # ── Public API ───────────────────────────────────────

    def get(self, key: str) -> V | None:
        """Return the value for *key*, or ``None`` if missing or expired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now >= entry.expires_at:
                del self._entries[key]
                logger.debug("Cache entry %s expired, purged on read", key)
                return None
            return entry.value

    def set(self, key: str, value: V, expires_at: datetime) -> None:
        """Store *value* under *key*, replacing any previous value and deadline."""
        with self._lock:
            self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def remove(self, key: str) -> None:
        """Delete *key* if present."""
        with self._lock:
            self._entries.pop(key, None)

    def lock(self, key: str) -> threading.RLock:
        """Return the re-entrant lock guarding *key*.

        Keys are striped over a fixed pool of locks, so two different keys
        may share a lock; the same key always gets the same one.
        """
        return self._stripes[hash(key) % len(self._stripes)]

    def purge_expired(self) -> int:
        """Remove every expired entry and return how many were dropped."""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))
        return len(expired)

    # ── Dunder helpers ───────────────────────────────────

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        """Number of stored entries, including expired ones not yet purged."""
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"ExpiringCache(size={len(self)}, stripes={len(self._stripes)})"
