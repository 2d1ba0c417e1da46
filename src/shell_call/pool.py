"""Bounded-concurrency worker pool for homogeneous async work."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def execute_async(
    tasks: Sequence[T],
    process: Callable[[T], Awaitable[R]],
    workers_count: int,
) -> list[R]:
    """Run ``process`` over ``tasks`` with at most ``workers_count`` calls in flight.

    Results are index-aligned with ``tasks`` whatever the completion order.
    A failure in any ``process`` call propagates and no partial results are
    returned.
    """

    if workers_count < 1:
        raise ValueError(f"workers_count must be >= 1, got {workers_count}")

    results: dict[int, R] = {}
    cursor = 0
    failed = False

    async def worker(worker_no: int) -> None:
        nonlocal cursor, failed
        while not failed and cursor < len(tasks):
            # Claim and advance with no await in between.
            task_index = cursor
            cursor += 1
            logger.debug("Worker %d claimed task %d", worker_no, task_index)
            try:
                results[task_index] = await process(tasks[task_index])
            except Exception:
                # Stops further claims; tasks already in flight still finish.
                failed = True
                raise

    started = min(workers_count, len(tasks))
    logger.debug("Starting %d workers for %d tasks", started, len(tasks))
    await asyncio.gather(*(worker(worker_no) for worker_no in range(started)))
    return [results[index] for index in range(len(tasks))]
