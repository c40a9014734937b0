"""
Bounded worker pool over an asyncio.Queue.

A fixed number of worker coroutines pop items from a shared queue until it is
empty. At most `limit` handlers are in flight at any time, completion order is
unspecified, and the pool is fully drained before run_bounded returns.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

from backend_tzinfer.tzinfer_logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def run_bounded(
    items: Sequence[T],
    handler: Callable[[T], Awaitable[R]],
    limit: int,
    *,
    name: str = "pool",
) -> list[R]:
    """
    Run handler(item) for every item with at most `limit` concurrent workers.

    Returns results aligned with `items` (results[i] belongs to items[i]).
    If a handler raises, the remaining workers are cancelled and the exception propagates.
    """
    if limit < 1:
        raise ValueError("limit must be >= 1")
    if not items:
        return []

    queue: asyncio.Queue[tuple[int, T]] = asyncio.Queue()
    for index, item in enumerate(items):
        queue.put_nowait((index, item))
    results: list[R | None] = [None] * len(items)
    worker_count = min(limit, len(items))

    async def worker() -> None:
        while True:
            try:
                index, item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            results[index] = await handler(item)

    tasks = [asyncio.create_task(worker()) for _ in range(worker_count)]
    logger.debug("pool_started", pool=name, item_count=len(items), worker_count=worker_count)
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return results  # type: ignore[return-value]
