from .cache_lookup import CacheLookup, CacheLookupStatus
from .cache_tier import CacheTier


class CacheFallbackPolicy:
    """
    Cache unavailable, treat as miss.

    Any error raised by the cache tier on read is reported as UNAVAILABLE,
    and UNAVAILABLE is handled exactly like a MISS: the caller falls back
    to the backing store. Cache degradation never surfaces to the caller.
    """

    async def lookup(self, tier: CacheTier, key: str) -> CacheLookup:
        try:
            value = await tier.read(key)

        except Exception as err:
            return CacheLookup(
                key=key,
                status=CacheLookupStatus.UNAVAILABLE,
                error=err,
            )

        if value is None:
            return CacheLookup(
                key=key,
                status=CacheLookupStatus.MISS,
            )

        return CacheLookup(
            key=key,
            status=CacheLookupStatus.HIT,
            value=value,
        )

    def treats_as_miss(self, lookup: CacheLookup) -> bool:
        return lookup.status in (
            CacheLookupStatus.MISS,
            CacheLookupStatus.UNAVAILABLE,
        )
