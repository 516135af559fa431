"""Background sweep of expired cache entries."""

import asyncio
import logging

from memocache.cache.service import CacheService

logger = logging.getLogger(__name__)


class PeriodicCleanup:
    """Run ``cache.cleanup()`` on the running event loop at a fixed interval.

    Args:
        cache: Cache to sweep.
        interval_seconds: Delay between sweeps. Defaults to the cache's
            ``cleanup_interval_seconds``.
        name: Label used in log messages.
    """

    def __init__(
        self,
        cache: CacheService,
        interval_seconds: float | None = None,
        name: str = "cache",
    ) -> None:
        self.cache = cache
        self.interval_seconds = interval_seconds or cache.config.cleanup_interval_seconds
        self.name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop. Calling it while running is a no-op."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"memocache-cleanup-{self.name}"
        )
        logger.debug("Cleanup for '%s' started (every %.1fs)", self.name, self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Cleanup for '%s' stopped", self.name)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.cache.cleanup()
            except Exception:
                logger.exception("Cleanup for '%s' failed", self.name)
