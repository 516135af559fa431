"""Tests for memocache.cache.metrics: CacheMetrics counters and snapshots."""

import pytest

from memocache.cache.metrics import CacheMetrics


class TestCacheMetrics:
    def test_initial_state(self):
        m = CacheMetrics()
        assert m.hits == 0
        assert m.misses == 0
        assert m.total_requests == 0
        assert m.hit_rate == 0.0

    def test_hit_rate_calculation(self):
        m = CacheMetrics()
        m.hits = 3
        m.misses = 1
        assert m.hit_rate == 0.75
        assert m.total_requests == 4

    def test_record_calls(self):
        m = CacheMetrics()
        m.record_hit()
        m.record_miss()
        m.record_miss()
        m.record_eviction()
        m.record_expiration(2)
        assert (m.hits, m.misses, m.evictions, m.expirations) == (1, 2, 1, 2)
        assert m.hit_rate == pytest.approx(1 / 3)

    def test_disabled_records_nothing(self):
        m = CacheMetrics(enabled=False)
        m.record_hit()
        m.record_miss()
        m.record_eviction()
        m.record_expiration()
        assert m.total_requests == 0
        assert m.evictions == 0

    def test_reset(self):
        m = CacheMetrics()
        m.record_hit()
        m.record_eviction()
        m.reset()
        assert m.hits == 0
        assert m.evictions == 0

    def test_snapshot(self):
        m = CacheMetrics()
        m.record_hit()
        m.record_miss()
        snap = m.snapshot(entries_count=7)
        assert snap.hits == 1
        assert snap.total_requests == 2
        assert snap.hit_rate == 0.5
        assert snap.entries_count == 7

    def test_disabled_snapshot_is_zero(self):
        snap = CacheMetrics(enabled=False).snapshot(entries_count=7)
        assert snap.entries_count == 0
        assert snap.hit_rate == 0.0
