"""
Timer Cache

Short-lived cache of the timer list with explicit invalidation on mutation.
Replaces the plugin-wide mutable state with a component owned by the adapter.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Awaitable, Callable, Generic, TypeVar

from dvbviewer_tv.schemas import TimerInfo


logger = logging.getLogger(__name__)

T = TypeVar("T")

TIMERS_CACHE_KEY = "timers"
DEFAULT_TIMER_TTL = timedelta(seconds=20)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A cached value and the moment it stops being served."""
    key: str
    value: T
    expires_at: datetime

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at


class TTLCache(Generic[T]):
    """
    Thread-safe in-memory cache with a per-entry time to live.

    Entries are immutable; storing a key replaces the previous entry as a
    whole. Expired entries are dropped on access.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._entries: dict[str, CacheEntry[T]] = {}
        self._clock = clock
        self._lock = Lock()

    def get(self, key: str) -> CacheEntry[T] | None:
        """Return the live entry for key, or None if missing or expired"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_live(self._clock()):
                del self._entries[key]
                return None
            return entry

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def set(self, key: str, value: T, ttl: timedelta) -> CacheEntry[T]:
        """Store value under key, expiring ttl from now"""
        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        with self._lock:
            self._entries[key] = entry
        return entry

    def delete(self, key: str) -> bool:
        """Drop key; returns True if an entry was present"""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class TimerCache:
    """
    Single-entry cache of the backend timer list.

    Mutating calls mark the cache stale; the next read drops the entry and
    refetches. The entry also expires on its own after ``ttl``. Concurrent
    readers that both miss will both fetch.
    """

    def __init__(self, ttl: timedelta = DEFAULT_TIMER_TTL, clock: Callable[[], datetime] = utc_now):
        self._cache: TTLCache[list[TimerInfo]] = TTLCache(clock=clock)
        self._ttl = ttl
        self._refresh_requested = False
        self._flag_lock = Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def refresh_requested(self) -> bool:
        return self._refresh_requested

    def invalidate(self) -> None:
        """Force the next read to fetch from the backend"""
        with self._flag_lock:
            self._refresh_requested = True

    def _consume_refresh_request(self) -> bool:
        with self._flag_lock:
            requested = self._refresh_requested
            self._refresh_requested = False
            return requested

    async def get_or_fetch(self, fetch: Callable[[], Awaitable[list[TimerInfo]]]) -> list[TimerInfo]:
        """
        Return the cached timer list, fetching it when missing, expired or stale.

        The fetched list is stored only after ``fetch`` completes, so a
        cancelled or failed fetch leaves no entry behind.

        Args:
            fetch: Coroutine function returning the full timer list

        Returns:
            The timer list
        """
        if self._consume_refresh_request():
            logger.debug("Timer refresh requested, dropping cached timers")
            self._cache.delete(TIMERS_CACHE_KEY)

        entry = self._cache.get(TIMERS_CACHE_KEY)
        if entry is None:
            logger.info("Add timers to memory cache")
            timers = await fetch()
            entry = self._cache.set(TIMERS_CACHE_KEY, list(timers), self._ttl)
        else:
            logger.info("Return timers from memory cache")

        return list(entry.value)

    def clear(self) -> None:
        self._cache.clear()
