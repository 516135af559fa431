from memocache.models.cache import CacheConfig, CacheEntry, CacheInfo, CacheMetricsSnapshot
from memocache.models.enums import EvictionStrategy

__all__ = [
    "CacheConfig",
    "CacheEntry",
    "CacheInfo",
    "CacheMetricsSnapshot",
    "EvictionStrategy",
]
