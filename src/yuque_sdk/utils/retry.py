"""Exponential backoff for transient request failures."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MAX_RETRY_DELAY = 60.0  # Never sleep longer than this on a single retry


async def call_with_retry(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 0.2,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """Await ``func`` until it succeeds, sleeping ``base_delay * 2**attempt`` between tries.

    The last error is re-raised once ``max_retries`` retries are used up.
    """
    attempt = 0
    while True:
        try:
            return await func()
        except retry_on as e:
            if attempt >= max_retries:
                raise
            logger.warning("Request failed: %s, retrying (%d/%d)...", e, attempt + 1, max_retries)
            delay = min(base_delay * (2 ** attempt), _MAX_RETRY_DELAY)
            await asyncio.sleep(delay)
            attempt += 1
