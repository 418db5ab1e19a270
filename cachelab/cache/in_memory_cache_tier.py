import asyncio

from cachelab.env.time_parser import TimeParser

from .bounded_lru_cache import BoundedLRUCache, SizeBoundedLRUCache
from .cache_mode import CacheMode
from .cache_tier import CacheTier, content_key, value_size
from .errors import CacheUnavailableError, CacheWriteError


class InMemoryCacheTier(CacheTier):
    """
    LRU cache tier with an optional simulated round trip.

    In item mode at most max_entries values are held. In capacity mode the
    UTF-8 encoded size of the held values is kept within max_bytes, and a
    value that alone exceeds max_bytes is refused with CacheWriteError.
    Unlimited mode never evicts.
    """

    def __init__(
        self,
        max_entries: int = 1024,
        delay: str | float = 0.0,
        mode: CacheMode | str = CacheMode.ITEM,
        max_bytes: int = 1048576,
    ) -> None:
        self._mode = CacheMode.parse(mode)

        if self._mode == CacheMode.CAPACITY:
            self._entries: BoundedLRUCache[str, str] | SizeBoundedLRUCache[str, str] = (
                SizeBoundedLRUCache(max_bytes, size_of=value_size)
            )

        elif self._mode == CacheMode.UNLIMITED:
            self._entries = BoundedLRUCache(None)

        else:
            self._entries = BoundedLRUCache(max_entries)

        self._delay = TimeParser(delay).time

        if self._delay < 0:
            raise ValueError("Err. - cache delay must not be negative")

        self.available = True
        self.reads = 0
        self.writes = 0

    @property
    def mode(self) -> CacheMode:
        return self._mode

    async def read(self, key: str) -> str | None:
        await self._round_trip()
        self.reads += 1

        return self._entries.get(key)

    async def write(self, value: str, key: str | None = None) -> str:
        await self._round_trip()

        if key is None:
            key = content_key(value)

        try:
            self._entries.put(key, value)

        except ValueError as err:
            raise CacheWriteError(f"Err. - could not cache {key} - {err}") from err

        self.writes += 1

        return key

    def set_available(self, available: bool) -> None:
        self.available = available

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict[str, int | str | None]:
        stats: dict[str, int | str | None] = {
            "mode": self._mode.value,
            "size": len(self._entries),
        }

        if isinstance(self._entries, SizeBoundedLRUCache):
            stats["bytes"] = self._entries.total_bytes
            stats["max_bytes"] = self._entries.max_bytes

        else:
            stats["max_size"] = self._entries.max_size

        stats.update(
            {
                "evictions": self._entries.evictions,
                "reads": self.reads,
                "writes": self.writes,
            }
        )

        return stats

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def _round_trip(self) -> None:
        if self._delay > 0:
            await asyncio.sleep(self._delay)

        if self.available is False:
            raise CacheUnavailableError("Err. - cache tier is unavailable")
