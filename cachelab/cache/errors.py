"""
Cache-tier exceptions.

None of these reach the caller of CacheAsideClient.fetch: read failures are
downgraded to misses by CacheFallbackPolicy and write-back failures are
logged.
"""


class CacheError(Exception):
    pass


class CacheUnavailableError(CacheError):
    """Raised by a cache tier that cannot be reached."""
    pass


class CacheWriteError(CacheError):
    """Raised by a cache tier that refused to store a value."""
    pass
