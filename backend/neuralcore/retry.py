"""Bounded exponential-backoff retry for a single backend attempt."""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from neuralcore.config import INITIAL_DELAY_MS, MAX_RETRIES
from neuralcore.errors import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_retry(
    attempt: Callable[[], Awaitable[T]],
    max_retries: int = MAX_RETRIES,
    initial_delay_ms: int = INITIAL_DELAY_MS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``attempt`` once, then retry up to ``max_retries`` times on TransportError.

    The delay starts at ``initial_delay_ms`` and doubles before each retry.
    ConfigurationError and ParseError propagate immediately.
    """
    delay_ms = initial_delay_ms
    retries_left = max_retries
    while True:
        try:
            return await attempt()
        except TransportError as e:
            if retries_left <= 0:
                logger.error("Backend call failed after %d retries: %s", max_retries, e.message)
                raise
            logger.warning("Backend call failed, retrying in %dms... (%d retries left): %s",
                           delay_ms, retries_left, e.message)
            await sleep(delay_ms / 1000)
            delay_ms *= 2
            retries_left -= 1
