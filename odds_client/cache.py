import time
import typing as t

from odds_client.models import CacheEntry, QuotaHeaders


class ResponseCache:
    """In-memory TTL cache. Expired entries are dropped by the read that finds them."""

    __slots__ = ("_entries", "_clock")

    _entries: dict[str, CacheEntry[t.Any]]

    def __init__(self, clock: t.Callable[[], float] = time.monotonic):
        self._entries = {}
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries)

    def get(self, key: str) -> CacheEntry[t.Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not isinstance(entry, CacheEntry):
            self._entries.pop(key, None)
            return None
        if self._clock() > entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry

    def set(self, key: str, data: t.Any, ttl: float, quota: QuotaHeaders) -> None:
        self._entries[key] = CacheEntry(
            data=data, expires_at=self._clock() + ttl, quota=quota
        )

    def clear(self) -> None:
        self._entries.clear()
