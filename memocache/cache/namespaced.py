"""Namespace facade over a shared ``CacheService``.

Groups keys under ``<namespace>:<group>[:<rest>]``, assigns TTLs by named
tier, and cascades invalidation from one group to the groups derived
from it (for example, invalidating ``revenues`` also drops ``stats``).
"""

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from typing import Any
from urllib.parse import quote

from memocache.cache.service import CacheService

logger = logging.getLogger(__name__)

SEPARATOR = ":"


def join_key(*parts: object) -> str:
    """Join key parts with ``:``, e.g. ``join_key("revenue", 42) == "revenue:42"``."""
    return SEPARATOR.join(str(part) for part in parts)


def _render_filter_value(value: object) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return quote(value, safe="")
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(sorted(_render_filter_value(item) for item in value))
    return str(value)


def filter_key(filters: Mapping[str, object]) -> str:
    """Build a deterministic key fragment from a filter mapping.

    Keys are sorted, sequence values are sorted and comma-joined, dates are
    rendered as ISO dates, strings are URL-quoted. ``None`` and empty values
    are skipped so that equivalent filters map to the same key.
    """
    parts = []
    for name in sorted(filters):
        value = filters[name]
        if value is None or value == "" or (isinstance(value, (list, tuple, set, frozenset)) and not value):
            continue
        parts.append(f"{name}:{_render_filter_value(value)}")
    return "|".join(parts)


class NamespacedCache:
    """Key-prefixing view of a ``CacheService``.

    Args:
        cache: Underlying cache, usually shared with other namespaces.
        namespace: Prefix for every key written through this view.
        ttl_tiers: Named TTLs in seconds, e.g. ``{"master_data": 1800}``.
        dependencies: Maps a group to the groups that must be invalidated
            with it. Followed transitively.
    """

    def __init__(
        self,
        cache: CacheService,
        namespace: str,
        *,
        ttl_tiers: Mapping[str, float] | None = None,
        dependencies: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        self.cache = cache
        self.namespace = namespace
        self.ttl_tiers = dict(ttl_tiers or {})
        self.dependencies = {group: tuple(deps) for group, deps in (dependencies or {}).items()}

    def key(self, *parts: object) -> str:
        """Full cache key for *parts*, e.g. ``key("revenue", 42) == "financial:revenue:42"``."""
        return join_key(self.namespace, *parts)

    def _ttl(self, tier: str | None, ttl_seconds: float | None) -> float | None:
        if ttl_seconds is not None:
            return ttl_seconds
        if tier is None:
            return None
        return self.ttl_tiers[tier]

    def get(self, *parts: object, default: Any = None) -> Any:
        return self.cache.get(self.key(*parts), default)

    def set(
        self,
        *parts: object,
        value: Any,
        tier: str | None = None,
        ttl_seconds: float | None = None,
    ) -> None:
        """Store *value* under the key built from *parts*.

        Raises:
            KeyError: If *tier* is not a configured TTL tier.
        """
        self.cache.set(self.key(*parts), value, self._ttl(tier, ttl_seconds))

    def has(self, *parts: object) -> bool:
        return self.cache.has(self.key(*parts))

    def delete(self, *parts: object) -> bool:
        return self.cache.delete(self.key(*parts))

    async def get_or_set(
        self,
        *parts: object,
        factory: Callable[[], Any],
        tier: str | None = None,
        ttl_seconds: float | None = None,
    ) -> Any:
        return await self.cache.get_or_set(self.key(*parts), factory, self._ttl(tier, ttl_seconds))

    def invalidate(self, group: str) -> int:
        """Drop *group* and every group that depends on it.

        A group covers the key ``<namespace>:<group>`` and all keys below
        ``<namespace>:<group>:``.

        Returns:
            Total number of entries removed.
        """
        removed = 0
        seen: set[str] = set()
        queue = deque([group])
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            qualified = self.key(current)
            removed += int(self.cache.delete(qualified))
            removed += self.cache.invalidate_pattern(qualified + SEPARATOR)
            queue.extend(self.dependencies.get(current, ()))

        logger.debug("Invalidated groups %s in '%s' (%d entries)", sorted(seen), self.namespace, removed)
        return removed

    def invalidate_all(self) -> int:
        return self.cache.invalidate_pattern(self.namespace + SEPARATOR)

    async def preload(
        self,
        loaders: Mapping[str, Callable[[], Any]],
        *,
        tier: str | None = None,
    ) -> dict[str, Any]:
        """Warm several keys concurrently. Returns the loaded values by name."""
        names = list(loaders)
        values = await asyncio.gather(
            *(self.get_or_set(name, factory=loaders[name], tier=tier) for name in names)
        )
        logger.debug("Preloaded %d keys in '%s'", len(names), self.namespace)
        return dict(zip(names, values, strict=True))
