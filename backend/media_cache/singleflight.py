"""
Single-flight coalescing for concurrent cache misses.

The first caller for a key starts the computation; callers arriving while
it runs await the same task instead of recomputing.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

logger = logging.getLogger(__name__)


class SingleFlight:
    """Per-process map from key to the in-progress computation for it."""

    def __init__(self):
        self._inflight: Dict[str, asyncio.Task] = {}

    @property
    def in_flight(self) -> int:
        return len(self._inflight)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark the exception retrieved even if every waiter was cancelled
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"[SingleFlight] Computation for {key[:16]}... failed: {task.exception()!r}")

    async def do(self, key: str, func: Callable[[], Awaitable[Any]]) -> Any:
        """
        Run ``func`` once per key among concurrent callers.

        Waiters are shielded: cancelling one caller does not cancel the
        shared work. Exceptions propagate to every waiter.
        """
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(func())
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.debug(f"[SingleFlight] Joined in-flight computation: {key[:16]}...")
        return await asyncio.shield(task)
