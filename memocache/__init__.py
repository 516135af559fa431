"""memocache

Generic in-process cache: bounded LRU/TTL store with metrics and a
single-flight compute-if-absent primitive.
"""

from memocache.app import CacheRegistry, cache_lifespan, setup_logging
from memocache.cache import (
    CacheService,
    NamespacedCache,
    PeriodicCleanup,
    filter_key,
    join_key,
)
from memocache.errors import CacheConfigError, CacheError
from memocache.models import (
    CacheConfig,
    CacheInfo,
    CacheMetricsSnapshot,
    EvictionStrategy,
)

__all__ = [
    "CacheConfig",
    "CacheConfigError",
    "CacheError",
    "CacheInfo",
    "CacheMetricsSnapshot",
    "CacheRegistry",
    "CacheService",
    "EvictionStrategy",
    "NamespacedCache",
    "PeriodicCleanup",
    "cache_lifespan",
    "filter_key",
    "join_key",
    "setup_logging",
]

__version__ = "0.1.0"
