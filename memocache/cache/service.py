"""In-memory TTL cache with pluggable eviction, metrics and single-flight compute."""

import asyncio
import concurrent.futures
import inspect
import itertools
import logging
import re
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from memocache.cache.metrics import CacheMetrics
from memocache.cache.policies import EvictionPolicy, get_policy
from memocache.cache.sizing import estimate_entry_size, format_bytes
from memocache.errors import CacheConfigError
from memocache.models.cache import CacheConfig, CacheEntry, CacheInfo, CacheMetricsSnapshot

logger = logging.getLogger(__name__)

_MISSING: Any = object()


def _build_config(config: CacheConfig | None, overrides: dict[str, Any]) -> CacheConfig:
    try:
        if config is None:
            return CacheConfig(**overrides)
        if overrides:
            return CacheConfig(**{**config.model_dump(), **overrides})
        return config
    except ValidationError as exc:
        raise CacheConfigError(f"Invalid cache configuration: {exc}") from exc


class CacheService:
    """Bounded key/value cache with per-entry TTL.

    Values are opaque: the cache never copies or serialises them. Expired
    entries are treated as absent by every read and removed when
    encountered, on ``cleanup()``, or by a ``PeriodicCleanup`` task.

    ``get_or_set`` coalesces concurrent callers for the same key into one
    factory invocation, including callers running on event loops in other
    threads.

    Args:
        config: Base configuration. Defaults to ``CacheConfig()``.
        clock: Monotonic time source in seconds. Injectable for tests.
        **overrides: Individual ``CacheConfig`` fields, applied on top of
            *config*.

    Raises:
        CacheConfigError: If the resulting configuration is invalid.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        **overrides: Any,
    ) -> None:
        self.config = _build_config(config, overrides)
        self._clock = clock
        self._policy: EvictionPolicy = get_policy(self.config.strategy)
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._pending: dict[str, concurrent.futures.Future[Any]] = {}
        self._seq = itertools.count()
        self._lock = threading.RLock()
        self.metrics = CacheMetrics(enabled=self.config.enable_metrics)

    # ── Direct access ────────────────────────────────────────────────────

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for *key*, or *default* when absent or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self.metrics.record_miss()
                return default

            if entry.is_expired(self._clock()):
                del self._store[key]
                self.metrics.record_expiration()
                self.metrics.record_miss()
                return default

            entry.access_count += 1
            self._policy.on_access(self._store, key)
            self.metrics.record_hit()
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Insert or replace *key*.

        A missing, zero or negative *ttl_seconds* falls back to
        ``config.default_ttl_seconds``.
        """
        ttl = ttl_seconds if ttl_seconds and ttl_seconds > 0 else self.config.default_ttl_seconds
        with self._lock:
            if key not in self._store and len(self._store) >= self.config.max_entries:
                # Expired entries go first; a live entry is only evicted if none were found.
                if not self._purge_expired():
                    self._evict_one()
            self._store[key] = CacheEntry(
                key=key,
                value=value,
                expires_at=self._clock() + ttl,
                inserted_seq=next(self._seq),
            )
            self._policy.on_insert(self._store, key)

    def has(self, key: str) -> bool:
        """Report whether *key* holds a live value. Metrics and recency are untouched."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._clock()):
                del self._store[key]
                return False
            return True

    def delete(self, key: str) -> bool:
        """Remove *key*. Returns True if a live entry was removed."""
        with self._lock:
            entry = self._store.pop(key, None)
            if entry is None:
                return False
            if entry.is_expired(self._clock()):
                self.metrics.record_expiration()
                return False
            return True

    def clear(self) -> None:
        """Remove every entry. Cumulative metrics are preserved."""
        with self._lock:
            self._store.clear()

    def reset_metrics(self) -> None:
        with self._lock:
            self.metrics.reset()

    def invalidate_pattern(self, pattern: str, *, regex: bool = False) -> int:
        """Remove every key starting with *pattern*.

        Args:
            pattern: Literal key prefix, or a regular expression when
                *regex* is True (matched with ``re.search``).
            regex: Interpret *pattern* as a regular expression.

        Returns:
            Number of live entries removed. Matching entries that had
            already expired are dropped too but not counted.
        """
        if regex:
            compiled = re.compile(pattern)
            matches: Callable[[str], bool] = lambda key: compiled.search(key) is not None  # noqa: E731
        else:
            matches = lambda key: key.startswith(pattern)  # noqa: E731

        with self._lock:
            now = self._clock()
            removed = expired = 0
            for key in [key for key in self._store if matches(key)]:
                if self._store.pop(key).is_expired(now):
                    expired += 1
                else:
                    removed += 1
            self.metrics.record_expiration(expired)

        if removed:
            logger.debug("Invalidated %d entries matching %r", removed, pattern)
        return removed

    def cleanup(self) -> int:
        """Remove all expired entries. Returns the number removed."""
        with self._lock:
            removed = self._purge_expired()

        if removed:
            logger.info("Cache cleanup: removed %d expired entries", removed)
        return removed

    # ── Compute-if-absent ────────────────────────────────────────────────

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Any],
        ttl_seconds: float | None = None,
    ) -> Any:
        """Return the cached value for *key*, computing it with *factory* on a miss.

        *factory* may return a value or an awaitable. Callers arriving while
        a computation for *key* is in flight await that computation instead
        of starting another. A failing factory caches nothing and its
        exception reaches every waiting caller unchanged. Waiting callers may
        run on another thread's event loop.
        """
        with self._lock:
            cached = self.get(key, _MISSING)
            if cached is not _MISSING:
                return cached

            pending = self._pending.get(key)
            if pending is None:
                future: concurrent.futures.Future[Any] = concurrent.futures.Future()
                self._pending[key] = future

        if pending is not None:
            return await asyncio.shield(asyncio.wrap_future(pending))

        try:
            result = factory()
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            future.set_exception(exc)
            raise
        except BaseException:
            # Owner cancelled; waiting callers get CancelledError.
            future.cancel()
            raise
        else:
            self.set(key, result, ttl_seconds)
            future.set_result(result)
            return result
        finally:
            with self._lock:
                if self._pending.get(key) is future:
                    del self._pending[key]

    @property
    def pending_count(self) -> int:
        """Number of ``get_or_set`` computations currently in flight."""
        with self._lock:
            return len(self._pending)

    # ── Diagnostics ──────────────────────────────────────────────────────

    def get_metrics(self) -> CacheMetricsSnapshot:
        with self._lock:
            return self.metrics.snapshot(entries_count=len(self._store))

    def get_info(self) -> CacheInfo:
        """Size, approximate memory usage and oldest/newest keys of live entries."""
        with self._lock:
            now = self._clock()
            live = [entry for entry in self._store.values() if not entry.is_expired(now)]
            memory = sum(estimate_entry_size(entry.key, entry.value) for entry in live)

        oldest = min(live, key=lambda entry: entry.inserted_seq, default=None)
        newest = max(live, key=lambda entry: entry.inserted_seq, default=None)
        return CacheInfo(
            size=len(live),
            memory_usage=format_bytes(memory),
            oldest_entry=oldest.key if oldest is not None else None,
            newest_entry=newest.key if newest is not None else None,
        )

    def _purge_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
        for key in expired:
            del self._store[key]
        self.metrics.record_expiration(len(expired))
        return len(expired)

    def _evict_one(self) -> None:
        victim = self._policy.select_victim(self._store)
        if victim is None:
            return
        del self._store[victim]
        self.metrics.record_eviction()
        logger.debug("Evicted %r (%s)", victim, self._policy.strategy)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)
