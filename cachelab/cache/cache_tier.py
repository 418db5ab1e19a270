import hashlib
from abc import ABC, abstractmethod


def content_key(value: str) -> str:
    """Derive the storage key for a value from its content."""
    digest = hashlib.sha256(value.encode()).digest()
    return str(int.from_bytes(digest[:8], "big"))


def value_size(value: str) -> int:
    return len(value.encode())


class CacheTier(ABC):
    """
    Access interface for a cache tier.

    read returns None on an explicit miss. Both operations raise a
    CacheError subclass when the tier fails.
    """

    @abstractmethod
    async def read(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def write(self, value: str, key: str | None = None) -> str:
        """Store value and return its key, derived from content when key is None."""
        ...
