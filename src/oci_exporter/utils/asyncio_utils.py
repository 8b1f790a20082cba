import asyncio
from typing import Awaitable, Callable, List, TypeVar

T = TypeVar("T")


async def gather_parallel(
    jobs: list[Callable[[], Awaitable[T]]], max_concurrency: int = 1
) -> List[T | BaseException]:
    """
    Run zero-argument coroutine factories with at most `max_concurrency` in flight.
    Results keep the order of `jobs`; a job that raises contributes its exception
    instead of cancelling the others.
    """
    sem = asyncio.Semaphore(max(1, max_concurrency))

    async def run_with_sem(job: Callable[[], Awaitable[T]]) -> T:
        async with sem:
            return await job()

    if not jobs:
        return []

    return await asyncio.gather(*[run_with_sem(j) for j in jobs], return_exceptions=True)
