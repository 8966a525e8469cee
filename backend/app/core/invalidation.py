"""Stale-view signalling for clients rendering the profile listing."""

import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

InvalidationCallback = Callable[[str], Awaitable[None]]


class ViewInvalidator:
    """Tracks which rendered paths are stale and notifies subscribers."""

    def __init__(self):
        self._subscribers: list[InvalidationCallback] = []
        self.stale_paths: set[str] = set()

    def subscribe(self, callback: InvalidationCallback) -> None:
        self._subscribers.append(callback)

    def mark_fresh(self, path: str) -> None:
        """Called once ``path`` has been served again with current data."""
        self.stale_paths.discard(path)

    async def revalidate_path(self, path: str) -> None:
        """Mark ``path`` stale and notify every subscriber.

        A failing subscriber is logged and skipped so one broken listener
        cannot fail the mutation that triggered the signal.
        """
        self.stale_paths.add(path)
        logger.debug("View %s marked stale", path)
        for callback in list(self._subscribers):
            try:
                await callback(path)
            except Exception as e:
                logger.warning("Invalidation subscriber failed for %s: %s", path, e)
