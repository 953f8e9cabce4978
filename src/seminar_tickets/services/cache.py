"""Expiring key-value cache used for tokens and replayed fulfillments."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for short-lived values."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value that expires after ``ttl_seconds``."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


class InMemoryCache(Cache):
    """Process-local cache.

    Expired entries are dropped when read and swept on every write, so keys
    that are written once and never read again do not accumulate.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _CacheEntry] = {}

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        now = datetime.now(tz=UTC)
        self._prune(now)
        self._entries[key] = _CacheEntry(
            value=value, expires_at=now + timedelta(seconds=ttl_seconds)
        )

    def _prune(self, now: datetime) -> None:
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
