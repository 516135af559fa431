"""Composition root: logging, named cache instances and their lifecycle.

Nothing here runs at import time. Applications build a ``CacheRegistry``
(directly or through ``cache_lifespan``) and pass caches to the services
that need them.
"""

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pydantic import ValidationError

from memocache.cache.cleanup import PeriodicCleanup
from memocache.cache.service import CacheService
from memocache.config import Settings, get_settings
from memocache.errors import CacheConfigError

logger = logging.getLogger(__name__)

DEFAULT_CACHE = "default"
WIDGET_CACHE = "widgets"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "memocache.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def _attach(root: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root.addHandler(handler)


def setup_logging(log_level: str, log_dir: Path | None = None) -> None:
    """Send cache logs to stderr and, optionally, a rotating file.

    Safe to call more than once: each handler kind is attached only once,
    while the level is always updated. Unknown level names fall back to
    INFO.

    Args:
        log_level: Level name such as ``"DEBUG"`` or ``"warning"``.
        log_dir: Directory for ``memocache.log``. Created if missing.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    # FileHandler subclasses StreamHandler, hence the exact type match.
    if not any(type(handler) is logging.StreamHandler for handler in root.handlers):
        _attach(root, logging.StreamHandler(), level)

    if log_dir is None or any(isinstance(handler, RotatingFileHandler) for handler in root.handlers):
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    _attach(
        root,
        RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        ),
        level,
    )


class CacheRegistry:
    """Named cache instances owned by the application.

    Args:
        settings: Source of the built-in cache configurations.
    """

    def __init__(self, settings: Settings) -> None:
        try:
            default_config = settings.default_cache_config()
            widget_config = settings.widget_cache_config()
        except ValidationError as exc:
            raise CacheConfigError(f"Invalid cache settings: {exc}") from exc

        self._caches: dict[str, CacheService] = {
            DEFAULT_CACHE: CacheService(default_config),
            WIDGET_CACHE: CacheService(widget_config),
        }

    def get(self, name: str = DEFAULT_CACHE) -> CacheService:
        """Return the cache registered as *name*.

        Raises:
            KeyError: If no cache has that name.
        """
        return self._caches[name]

    def register(self, name: str, cache: CacheService) -> None:
        if name in self._caches:
            raise ValueError(f"Cache '{name}' is already registered")
        self._caches[name] = cache

    def names(self) -> list[str]:
        return sorted(self._caches)

    def items(self) -> Iterator[tuple[str, CacheService]]:
        return iter(self._caches.items())

    def clear_all(self) -> None:
        for cache in self._caches.values():
            cache.clear()


@asynccontextmanager
async def cache_lifespan(settings: Settings | None = None) -> AsyncIterator[CacheRegistry]:
    """Build the registry and run periodic cleanup for each cache while open."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_dir)

    registry = CacheRegistry(settings)
    sweepers = [PeriodicCleanup(cache, name=name) for name, cache in registry.items()]
    for sweeper in sweepers:
        sweeper.start()
    logger.info("Caches initialized: %s", ", ".join(registry.names()))

    try:
        yield registry
    finally:
        for sweeper in sweepers:
            await sweeper.stop()
        registry.clear_all()
        logger.info("Caches closed")
