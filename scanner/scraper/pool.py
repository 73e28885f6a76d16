import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple

Task = Callable[[], Awaitable[Any]]


async def run_limited(tasks: Sequence[Task], limit: int) -> List[Any]:
    """
    Runs zero-argument coroutine factories with at most `limit` in flight.

    A fixed pool of workers pulls (index, task) pairs off a FIFO queue, so a
    new task starts as soon as a slot frees up. Results are stored by index:
    results[i] belongs to tasks[i] whatever order they finish in.
    A failing task is not swallowed: its exception propagates and the other
    workers are cancelled.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")
    if not tasks:
        return []

    queue: "asyncio.Queue[Tuple[int, Task]]" = asyncio.Queue()
    for index, task in enumerate(tasks):
        queue.put_nowait((index, task))

    results: List[Optional[Any]] = [None] * len(tasks)

    async def worker():
        while True:
            try:
                index, task = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            results[index] = await task()

    workers = [asyncio.ensure_future(worker()) for _ in range(min(limit, len(tasks)))]
    try:
        await asyncio.gather(*workers)
    except BaseException:
        for w in workers:
            w.cancel()
        raise

    return results
