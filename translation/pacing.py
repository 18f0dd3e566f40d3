"""Call pacing for the translation service.

Delays between outbound calls are expressed through a ``Pacer`` instead of
bare ``asyncio.sleep`` so the clock and the sleep function can be swapped in
tests.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, List, Optional


Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


class Pacer:
    """Fixed-interval gate: ``defer(n)`` holds the next ``wait()`` back by n seconds."""

    def __init__(self, clock: Optional[Clock] = None, sleep: Optional[Sleeper] = None) -> None:
        self._clock: Clock = clock or time.monotonic
        self._sleep: Sleeper = sleep or asyncio.sleep
        self._ready_at = 0.0
        self._lock = asyncio.Lock()
        self.waits: List[float] = []

    def defer(self, seconds: float) -> None:
        if seconds <= 0:
            return
        self._ready_at = max(self._ready_at, self._clock() + float(seconds))

    async def wait(self) -> float:
        """Block until the gate opens; returns the seconds actually slept."""
        async with self._lock:
            remaining = self._ready_at - self._clock()
            if remaining <= 0:
                return 0.0
            await self._sleep(remaining)
            self.waits.append(remaining)
            return remaining

    async def pause(self, seconds: float) -> float:
        self.defer(seconds)
        return await self.wait()

    @property
    def total_waited(self) -> float:
        return sum(self.waits)
