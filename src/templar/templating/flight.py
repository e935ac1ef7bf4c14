"""
Single-flight deduplication of concurrent cache misses.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

logger = logging.getLogger("templar.flight")


class SingleFlight:
    """Shares one in-flight call per key between concurrent callers.

    The first caller for a key starts the call as a task owned by the flight;
    every caller, the first included, awaits that task through a shield. A
    caller that is cancelled stops waiting without cancelling the shared call,
    so the others still receive its outcome, success or failure. Nothing is
    kept once the call lands, so a failed key is retried by the next caller.
    """

    def __init__(self):
        self._calls: Dict[str, asyncio.Task] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._calls

    def __len__(self) -> int:
        return len(self._calls)

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        task = self._calls.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._calls[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            logger.debug(f"Joining in-flight call for {key}")
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task):
        if self._calls.get(key) is task:
            del self._calls[key]
        if not task.cancelled():
            # mark retrieved; every caller may have gone
            task.exception()
