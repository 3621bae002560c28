"""
Cache-or-compute with a freshness window.

TTLMemo knows nothing about where entries live: it is given a loader and a
writer for its backing store (a table, Redis, a dict) and a compute function
for misses. Stale entries are handed to the writer as a replacement; they are
never patched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Generic, Hashable, Optional, TypeVar

from jobhunt.models.types import as_utc, utcnow

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CachedEntry(Generic[V]):
    value: V
    stored_at: datetime


class TTLMemo(Generic[K, V]):
    def __init__(
        self,
        ttl: timedelta,
        load: Callable[[K], Optional[CachedEntry[V]]],
        store: Callable[[K, V], V],
        clock: Callable[[], datetime] = utcnow,
        name: str = "memo",
    ):
        self.ttl = ttl
        self._load = load
        self._store = store
        self._clock = clock
        self.name = name

    def is_fresh(self, entry: CachedEntry[V]) -> bool:
        return self._clock() - as_utc(entry.stored_at) < self.ttl

    def get_or_compute(self, key: K, compute: Callable[[K], V]) -> V:
        """Return the fresh cached value for key, or compute, store and return a new one.

        The returned value on a miss is whatever the writer hands back, so hits
        and misses produce the same representation.
        """
        entry = self._load(key)
        if entry is not None and self.is_fresh(entry):
            logger.debug("%s cache hit key=%s", self.name, key)
            return entry.value
        logger.debug("%s cache %s key=%s", self.name, "stale" if entry else "miss", key)
        return self._store(key, compute(key))
