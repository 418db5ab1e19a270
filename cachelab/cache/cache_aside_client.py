"""
Cache-aside data access over a simulated backing store.

Reads check the cache tier first and fall back to the store on a miss,
populating the cache in the background afterwards. The cache tier is
best-effort: its failures degrade to misses on read and are logged on
write-back.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any

from cachelab.logging import Logger
from cachelab.logging.cachelab_logging_models import (
    CacheAccessDebug,
    CacheAccessError,
    CacheAccessInfo,
)

from .cache_fallback_policy import CacheFallbackPolicy
from .cache_lookup import CacheLookupStatus
from .cache_tier import CacheTier, content_key
from .errors import CacheError
from .in_memory_cache_tier import InMemoryCacheTier
from .mock_store import MockStore, generate_random_string


class CacheAsideClient:
    def __init__(
        self,
        store: MockStore | None = None,
        cache: CacheTier | None = None,
        cache_enabled: bool = False,
        policy: CacheFallbackPolicy | None = None,
        rng: random.Random | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._store = store if store is not None else MockStore(rng=self._rng)
        self._cache = cache if cache is not None else InMemoryCacheTier()
        self._policy = policy if policy else CacheFallbackPolicy()
        self._cache_enabled = cache_enabled

        self._owns_logger = logger is None
        self._logger = logger if logger else Logger()

        self._write_backs: set[asyncio.Task] = set()
        self._counts: dict[str, int] = {
            "hits": 0,
            "misses": 0,
            "unavailable": 0,
            "not_found": 0,
            "write_backs": 0,
            "write_back_failures": 0,
        }

    @property
    def store(self) -> MockStore:
        return self._store

    @property
    def cache(self) -> CacheTier:
        return self._cache

    @property
    def policy(self) -> CacheFallbackPolicy:
        return self._policy

    @property
    def cache_enabled(self) -> bool:
        return self._cache_enabled

    @property
    def pending_write_backs(self) -> int:
        return len(self._write_backs)

    def set_cache_enabled(self, enabled: bool) -> None:
        """Takes effect on the next fetch; in-flight fetches are unaffected."""
        self._cache_enabled = enabled

    def turn_on_cache(self) -> None:
        self.set_cache_enabled(True)

    def turn_off_cache(self) -> None:
        self.set_cache_enabled(False)

    async def fetch(self, key: str) -> str | None:
        """
        Return the value for key, or None when the store does not have it.

        Backing-store errors propagate. Cache-tier errors never do.
        """
        if self._cache_enabled is False:
            await self._logger.log(
                CacheAccessDebug(
                    message=f"Cache disabled, reading {key} from store",
                    key=key,
                    cache_enabled=False,
                ),
                name="cache_aside_client",
            )

            return await self._read_store(key)

        lookup = await self._policy.lookup(self._cache, key)

        if self._policy.treats_as_miss(lookup) is False:
            self._counts["hits"] += 1
            await self._logger.log(
                CacheAccessDebug(
                    message=f"Cache hit for {key}",
                    key=key,
                    cache_enabled=True,
                ),
                name="cache_aside_client",
            )

            return lookup.value

        if lookup.status == CacheLookupStatus.UNAVAILABLE:
            self._counts["unavailable"] += 1
            await self._logger.log(
                CacheAccessDebug(
                    message=f"Cache unavailable for {key}, treating as miss - {lookup.error}",
                    key=key,
                    cache_enabled=True,
                ),
                name="cache_aside_client",
            )

        else:
            self._counts["misses"] += 1
            await self._logger.log(
                CacheAccessDebug(
                    message=f"Cache miss for {key}",
                    key=key,
                    cache_enabled=True,
                ),
                name="cache_aside_client",
            )

        value = await self._read_store(key)
        if value is not None:
            self._schedule_write_back(key, value)

        return value

    def seed(self, key: str, value: str) -> None:
        self._store.put(key, value)

    async def seed_random(self, count: int, size: int) -> list[str]:
        """
        Generate count random values of the given size, upload each to the
        cache tier, and seed the store under the key the tier returns.
        """
        if count < 0:
            raise ValueError("Err. - count must not be negative")

        await self._logger.log(
            CacheAccessInfo(
                message=f"Seeding {count} values of size {size}",
                key="*",
                cache_enabled=self._cache_enabled,
            ),
            name="cache_aside_client",
        )

        keys: list[str] = []
        for _ in range(count):
            value = generate_random_string(size, rng=self._rng)

            try:
                key = await self._cache.write(value)

            except CacheError as err:
                key = content_key(value)
                await self._logger.log(
                    CacheAccessError(
                        message=f"Failed to upload seed value {key} to cache - {err}",
                        key=key,
                        cache_enabled=self._cache_enabled,
                    ),
                    name="cache_aside_client",
                )

            self._store.put(key, value)
            keys.append(key)

        return keys

    async def random_fetch(self) -> str | None:
        key = self._store.random_key()
        if key is None:
            await self._logger.log(
                CacheAccessInfo(
                    message="Store is empty, nothing to fetch",
                    key="*",
                    cache_enabled=self._cache_enabled,
                ),
                name="cache_aside_client",
            )

            return None

        return await self.fetch(key)

    async def drain(self) -> None:
        """Wait for scheduled cache write-backs to finish."""
        if self._write_backs:
            await asyncio.gather(*list(self._write_backs), return_exceptions=True)

    async def close(self) -> None:
        await self.drain()

        if self._owns_logger:
            await self._logger.close()

    def stats(self) -> dict[str, Any]:
        return {
            **self._counts,
            "store_reads": self._store.reads,
            "store_size": len(self._store),
            "pending_write_backs": len(self._write_backs),
            "cache_enabled": self._cache_enabled,
        }

    async def _read_store(self, key: str) -> str | None:
        value = await self._store.read(key)
        if value is None:
            self._counts["not_found"] += 1

        return value

    def _schedule_write_back(self, key: str, value: str) -> None:
        task = asyncio.ensure_future(self._write_back(key, value))
        self._write_backs.add(task)
        task.add_done_callback(self._write_backs.discard)

    async def _write_back(self, key: str, value: str) -> None:
        try:
            await self._cache.write(value, key=key)
            self._counts["write_backs"] += 1

            await self._logger.log(
                CacheAccessDebug(
                    message=f"Wrote {key} back to cache",
                    key=key,
                    cache_enabled=self._cache_enabled,
                ),
                name="cache_aside_client",
            )

        except Exception as err:
            self._counts["write_back_failures"] += 1

            await self._logger.log(
                CacheAccessError(
                    message=f"Failed to write {key} back to cache - {err}",
                    key=key,
                    cache_enabled=self._cache_enabled,
                ),
                name="cache_aside_client",
            )
