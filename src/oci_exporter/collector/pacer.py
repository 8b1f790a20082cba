from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable


class CallPacer:
    """Enforces a minimum spacing between the starts of consecutive outbound calls.

    One instance is shared by every worker of a sweep, so the spacing holds
    globally rather than per worker.
    """

    def __init__(
        self,
        min_interval_sec: float = 0.1,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._min_interval_sec = min_interval_sec
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_call: float | None = None

    @property
    def min_interval_sec(self) -> float:
        return self._min_interval_sec

    async def wait(self) -> None:
        """Block until the next call may start, then claim the slot."""
        async with self._lock:
            if self._last_call is not None and self._min_interval_sec > 0:
                remaining = self._min_interval_sec - (self._clock() - self._last_call)
                if remaining > 0:
                    await self._sleep(remaining)
            self._last_call = self._clock()
