"""Exception hierarchy for the cache service."""


class CacheError(Exception):
    """Base class for all cache errors."""


class CacheConfigError(CacheError, ValueError):
    """Invalid cache configuration supplied at construction time."""
