"""Eviction policies.

The store is an ``OrderedDict`` keyed by cache key. Policies decide how
access reorders it and which key is sacrificed when the cache is full.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict

from memocache.models.cache import CacheEntry
from memocache.models.enums import EvictionStrategy

Store = OrderedDict[str, CacheEntry]


class EvictionPolicy(ABC):
    strategy: EvictionStrategy

    def on_insert(self, store: Store, key: str) -> None:
        """Called after *key* has been written (new or replaced)."""
        store.move_to_end(key)

    @abstractmethod
    def on_access(self, store: Store, key: str) -> None:
        """Called on a cache hit for *key*."""

    @abstractmethod
    def select_victim(self, store: Store) -> str | None:
        """Return the key to evict, or None if the store is empty."""


class LRUPolicy(EvictionPolicy):
    """Least recently used: hits move an entry to the back of the store."""

    strategy = EvictionStrategy.LRU

    def on_access(self, store: Store, key: str) -> None:
        store.move_to_end(key)

    def select_victim(self, store: Store) -> str | None:
        return next(iter(store), None)


class FIFOPolicy(EvictionPolicy):
    """First in, first out: hits do not affect eviction order."""

    strategy = EvictionStrategy.FIFO

    def on_access(self, store: Store, key: str) -> None:
        return None

    def select_victim(self, store: Store) -> str | None:
        return next(iter(store), None)


class LFUPolicy(EvictionPolicy):
    """Least frequently used, ties broken by insertion order.

    Victim selection is a linear scan, fine for the small working sets
    this cache targets.
    """

    strategy = EvictionStrategy.LFU

    def on_access(self, store: Store, key: str) -> None:
        return None

    def select_victim(self, store: Store) -> str | None:
        victim: CacheEntry | None = None
        for entry in store.values():
            if victim is None or entry.access_count < victim.access_count:
                victim = entry
        return victim.key if victim is not None else None


_POLICIES: dict[EvictionStrategy, type[EvictionPolicy]] = {
    EvictionStrategy.LRU: LRUPolicy,
    EvictionStrategy.FIFO: FIFOPolicy,
    EvictionStrategy.LFU: LFUPolicy,
}


def get_policy(strategy: EvictionStrategy | str) -> EvictionPolicy:
    """Instantiate the policy registered for *strategy*.

    Raises:
        ValueError: If *strategy* is not a known strategy name.
    """
    return _POLICIES[EvictionStrategy(str(strategy).upper())]()
