"""Cumulative hit/miss statistics for a cache instance."""

from memocache.models.cache import CacheMetricsSnapshot


class CacheMetrics:
    """Tracks cache hit/miss statistics.

    Args:
        enabled: When False every recording call is a no-op and
            ``snapshot`` always reports zeros.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.expirations = 0

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        total = self.total_requests
        if total == 0:
            return 0.0
        return self.hits / total

    def record_hit(self) -> None:
        if self.enabled:
            self.hits += 1

    def record_miss(self) -> None:
        if self.enabled:
            self.misses += 1

    def record_eviction(self) -> None:
        if self.enabled:
            self.evictions += 1

    def record_expiration(self, count: int = 1) -> None:
        if self.enabled:
            self.expirations += count

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.expirations = 0

    def snapshot(self, entries_count: int) -> CacheMetricsSnapshot:
        """Return a read-only copy of the counters."""
        if not self.enabled:
            return CacheMetricsSnapshot()
        return CacheMetricsSnapshot(
            hits=self.hits,
            misses=self.misses,
            total_requests=self.total_requests,
            hit_rate=self.hit_rate,
            entries_count=entries_count,
            evictions=self.evictions,
            expirations=self.expirations,
        )
