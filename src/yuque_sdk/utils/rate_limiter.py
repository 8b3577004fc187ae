"""Request pacing for the Yuque API."""

import asyncio
from time import monotonic


class RateLimiter:
    """Semaphore-bounded limiter that spaces request starts.

    Ensures at most ``max_concurrent`` requests are in flight and that new
    requests start at least ``delay_seconds`` apart. The first request is
    never delayed.
    """

    def __init__(self, delay_seconds: float = 0.2, max_concurrent: int = 1):
        self.delay_seconds = delay_seconds
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()
        self.request_count: int = 0

    async def acquire(self) -> None:
        """Acquire a slot, then enforce the minimum delay since the last start."""
        await self._semaphore.acquire()
        async with self._lock:
            if self._last_request_time is not None:
                wait_time = self.delay_seconds - (monotonic() - self._last_request_time)
                if wait_time > 0:
                    await asyncio.sleep(wait_time)
            self._last_request_time = monotonic()
            self.request_count += 1

    def release(self) -> None:
        """Release a concurrency slot."""
        self._semaphore.release()

    def reset(self) -> None:
        self._last_request_time = None
        self.request_count = 0

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()
