from .bounded_lru_cache import (
    BoundedLRUCache as BoundedLRUCache,
    SizeBoundedLRUCache as SizeBoundedLRUCache,
)
from .cache_aside_client import CacheAsideClient as CacheAsideClient
from .cache_fallback_policy import CacheFallbackPolicy as CacheFallbackPolicy
from .cache_lookup import (
    CacheLookup as CacheLookup,
    CacheLookupStatus as CacheLookupStatus,
)
from .cache_mode import CacheMode as CacheMode, CacheModeName as CacheModeName
from .cache_tier import (
    CacheTier as CacheTier,
    content_key as content_key,
    value_size as value_size,
)
from .errors import (
    CacheError as CacheError,
    CacheUnavailableError as CacheUnavailableError,
    CacheWriteError as CacheWriteError,
)
from .in_memory_cache_tier import InMemoryCacheTier as InMemoryCacheTier
from .mock_store import MockStore as MockStore, generate_random_string as generate_random_string
