"""Bounded worker pool on top of asyncio.

A fixed number of worker coroutines drain a queue; each blocking call
runs in a thread through ``asyncio.to_thread`` so no worker holds the
event loop across filesystem, probe or subprocess calls.
"""

import asyncio
import os
from typing import Callable, List, Optional, Sequence, TypeVar

from tqdm import tqdm

T = TypeVar("T")
R = TypeVar("R")


def cpu_count() -> int:
    return os.cpu_count() or 1


def worker_count(factor: float, cpus: Optional[int] = None) -> int:
    """
    Pool size for a stage, relative to the CPU count.

    Light I/O-bound stages use factors above 1, encode and transcode
    stages use 0.5.
    """
    cpus = cpus or cpu_count()
    return max(1, int(cpus * factor))


async def bounded_map(
    func: Callable[[T], R],
    items: Sequence[T],
    workers: int,
    on_done: Optional[Callable[[int, R], None]] = None,
) -> List[R]:
    """
    Apply a blocking function to every item with at most ``workers`` in flight.

    Results keep the order of ``items`` whatever the completion order.
    Exceptions raised by ``func`` propagate; callers that need isolation
    catch inside ``func``.

    Args:
        func: Blocking callable run in a worker thread.
        items: Inputs.
        workers: Maximum concurrent calls.
        on_done: Called in the event loop after each completion with
            (position, result).

    Returns:
        Results in input order.
    """
    results: List[Optional[R]] = [None] * len(items)
    queue: "asyncio.Queue[int]" = asyncio.Queue()
    for position in range(len(items)):
        queue.put_nowait(position)

    async def worker() -> None:
        while True:
            try:
                position = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                result = await asyncio.to_thread(func, items[position])
                results[position] = result
                if on_done is not None:
                    on_done(position, result)
            finally:
                queue.task_done()

    pool = [asyncio.create_task(worker()) for _ in range(max(1, min(workers, len(items))))]
    try:
        await asyncio.gather(*pool)
    except BaseException:
        for task in pool:
            task.cancel()
        raise
    return results


def run_bounded(
    func: Callable[[T], R],
    items: Sequence[T],
    workers: int,
    desc: str = "",
    unit: str = "file",
) -> List[R]:
    """
    Synchronous front-end to :func:`bounded_map` with an optional tqdm bar.

    Args:
        func: Blocking callable.
        items: Inputs.
        workers: Maximum concurrent calls.
        desc: Progress bar label; no bar when empty.
        unit: Progress bar unit.

    Returns:
        Results in input order.
    """
    if not items:
        return []

    if not desc:
        return asyncio.run(bounded_map(func, items, workers))

    with tqdm(total=len(items), desc=desc, unit=unit, leave=False) as pbar:
        return asyncio.run(bounded_map(func, items, workers, on_done=lambda _i, _r: pbar.update(1)))

