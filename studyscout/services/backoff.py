from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from loguru import logger

from studyscout.errors import TransientUpstreamOverload

T = TypeVar("T")

OVERLOAD_STATUS = 503


def is_overloaded(exc: BaseException) -> bool:
    """True when the error carries the upstream "service overloaded" signal."""
    if isinstance(exc, TransientUpstreamOverload):
        return True
    for attr in ("status_code", "status", "code"):
        if getattr(exc, attr, None) == OVERLOAD_STATUS:
            return True
    return False


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay_ms: int = 1000,
) -> T:
    """Await ``operation()``, retrying overload failures with exponential backoff.

    The wait before retry ``n`` (0-based) is ``base_delay_ms * 2**n``. Any
    non-overload error propagates immediately; once attempts run out the last
    error propagates.
    """
    attempts = max(int(max_retries), 1)
    last_error: BaseException | None = None

    for attempt in range(attempts):
        try:
            return await operation()
        except Exception as exc:
            last_error = exc
            if not is_overloaded(exc) or attempt >= attempts - 1:
                raise
            delay_ms = base_delay_ms * (2**attempt)
            logger.warning(
                f"API overloaded, retrying in {delay_ms}ms (attempt {attempt + 1}/{attempts})"
            )
            await asyncio.sleep(delay_ms / 1000)

    raise RuntimeError(f"Retries exhausted: {last_error}")
