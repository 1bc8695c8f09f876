from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Generic, Hashable, Optional, TypeVar

from .datetime_utils import now_local

V = TypeVar("V")


@dataclass(frozen=True)
class _Entry(Generic[V]):
    value: V
    stored_at: datetime


class TTLCache(Generic[V]):
    """Key -> (value, timestamp) cache with an injected clock.

    Entries older than ``ttl_seconds`` are treated as missing. Built once by the
    container and handed to the components that need it.
    """

    def __init__(self, ttl_seconds: float, *, clock: Callable[[], datetime] = now_local):
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[Hashable, _Entry[V]] = {}

    def get(self, key: Hashable) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if (self._clock() - entry.stored_at).total_seconds() >= self._ttl:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: Hashable, value: V) -> None:
        self._entries[key] = _Entry(value=value, stored_at=self._clock())

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        """Drop one key, or everything when no key is given."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def invalidate_where(self, predicate: Callable[[Any], bool]) -> int:
        stale = [k for k in self._entries if predicate(k)]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)
