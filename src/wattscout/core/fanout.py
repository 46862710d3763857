from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def fan_out(
    worker: Callable[[T], Awaitable[R | None]],
    items: Sequence[T],
    stop_event: asyncio.Event | None = None,
) -> list[R | None]:
    """Run ``worker`` once per item concurrently and wait for every run.

    A run that has not started when ``stop_event`` is set is skipped; runs
    already awaiting I/O are left to finish. A run that raises is logged and
    reported as None so it never affects its siblings.
    """

    async def _guarded(item: T) -> R | None:
        if stop_event is not None and stop_event.is_set():
            return None
        return await worker(item)

    results = await asyncio.gather(
        *(_guarded(item) for item in items), return_exceptions=True
    )

    collected: list[R | None] = []
    for item, result in zip(items, results):
        if isinstance(result, BaseException):
            logger.error("Worker for %s failed: %r", item, result, exc_info=result)
            collected.append(None)
        else:
            collected.append(result)
    return collected
