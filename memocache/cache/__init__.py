from memocache.cache.cleanup import PeriodicCleanup
from memocache.cache.metrics import CacheMetrics
from memocache.cache.namespaced import NamespacedCache, filter_key, join_key
from memocache.cache.policies import (
    EvictionPolicy,
    FIFOPolicy,
    LFUPolicy,
    LRUPolicy,
    get_policy,
)
from memocache.cache.service import CacheService

__all__ = [
    "CacheMetrics",
    "CacheService",
    "EvictionPolicy",
    "FIFOPolicy",
    "LFUPolicy",
    "LRUPolicy",
    "NamespacedCache",
    "PeriodicCleanup",
    "filter_key",
    "get_policy",
    "join_key",
]
