import json
import logging
import time
from collections.abc import Callable
from typing import Any

import aiosqlite

from pokevalutor.models.cache_db import CacheRow, CacheStore
from pokevalutor.utils.constants import CACHE_PATH, CACHE_PREFIX, MAX_CACHE_ENTRIES


LOG = logging.getLogger(__name__)

# Anything the store or the JSON layer may throw. The cache only ever saves
# work, so these degrade to a miss instead of failing the caller.
CACHE_ERRORS = (aiosqlite.Error, OSError, TypeError, ValueError)


class ResponseCache:
    def __init__(
        self,
        store: CacheStore | None = None,
        max_entries: int = MAX_CACHE_ENTRIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store or CacheStore(CACHE_PATH, CACHE_PREFIX)
        self.max_entries = max_entries
        self.clock = clock

    def _key(self, key: str) -> str:
        prefix = self.store.prefix
        return key if key.startswith(prefix) else f"{prefix}{key}"

    async def get(self, key: str) -> Any | None:
        full_key = self._key(key)
        try:
            row = await self.store.get(full_key)
            if row is None:
                LOG.debug("cache miss %s", full_key)
                return None

            if self.clock() > row.expires_at:
                LOG.debug("cache expired %s", full_key)
                await self.store.delete(full_key)
                return None

            try:
                value = json.loads(row.value)
            except ValueError:
                LOG.warning("Dropping corrupted cache entry %s", full_key)
                await self.store.delete(full_key)
                return None
        except CACHE_ERRORS:
            LOG.warning("Cache read failed for %s", full_key, exc_info=True)
            return None

        LOG.debug("cache hit %s", full_key)
        return value

    async def set(self, key: str, value: Any, ttl: float) -> None:
        if ttl <= 0:
            LOG.debug("Not caching %s with non-positive ttl %s", key, ttl)
            return

        full_key = self._key(key)
        now = self.clock()
        try:
            row = CacheRow(
                key=full_key,
                value=json.dumps(value),
                saved_at=now,
                expires_at=now + ttl,
            )
            await self.store.put(row)
        except CACHE_ERRORS:
            LOG.warning("Cache write failed for %s", full_key, exc_info=True)
            return

        await self.sweep()

    async def sweep(self) -> None:
        try:
            expired = await self.store.delete_expired(self.clock())
            alive = await self.store.count()
            evicted = 0
            if alive > self.max_entries:
                evicted = await self.store.evict_oldest(self.max_entries)
        except CACHE_ERRORS:
            LOG.warning("Cache sweep failed", exc_info=True)
            return

        if expired or evicted:
            LOG.debug("cache sweep removed %d expired, %d evicted", expired, evicted)

    async def clear(self) -> None:
        try:
            await self.store.clear()
        except CACHE_ERRORS:
            LOG.warning("Cache clear failed", exc_info=True)
