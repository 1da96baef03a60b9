"""
Rate-limit waiter for the Helix API client

Twitch reports quota on every Helix response through the Ratelimit-Remaining
and Ratelimit-Reset (Unix seconds) headers. Once the quota is exhausted the
waiter holds the caller until the reset time, then lets the call path continue.
It never retries and never raises.
"""

import asyncio
import time
from typing import Callable, Optional, Tuple

import httpx

from chatrelay.utils.logging import get_logger

logger = get_logger(__name__, category="rate_limit")

REMAINING_HEADER = "Ratelimit-Remaining"
RESET_HEADER = "Ratelimit-Reset"


def seconds_until_reset(remaining: int, reset: int, now: float) -> int:
    """
    Number of whole seconds to hold before the next request.

    Returns 0 while quota remains or once the reset time has passed.
    """
    if remaining > 0:
        return 0
    diff = int(reset) - int(now)
    return diff if diff > 0 else 0


def wait_for_rate_limit(
    remaining: int,
    reset: int,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Block the calling thread until the quota window resets, if exhausted."""
    delay = seconds_until_reset(remaining, reset, clock())
    if delay:
        logger.info(
            "Waiting on rate limit to pass before sending next request (%d seconds)",
            delay,
        )
        sleep(delay)


async def wait_for_rate_limit_async(
    remaining: int,
    reset: int,
    clock: Callable[[], float] = time.time,
) -> None:
    """
    Suspend the awaiting task until the quota window resets, if exhausted.

    Only the task that hit the limit is delayed; no shared lock is taken.
    """
    delay = seconds_until_reset(remaining, reset, clock())
    if delay:
        logger.info(
            "Waiting on rate limit to pass before sending next request (%d seconds)",
            delay,
        )
        await asyncio.sleep(delay)


def parse_rate_limit_headers(headers: httpx.Headers) -> Optional[Tuple[int, int]]:
    """Return (remaining, reset) from a Helix response, or None if absent."""
    remaining = headers.get(REMAINING_HEADER)
    reset = headers.get(RESET_HEADER)
    if remaining is None or reset is None:
        return None
    try:
        return int(remaining), int(float(reset))
    except ValueError:
        logger.debug(
            "Ignoring unparsable rate limit headers: remaining=%r reset=%r",
            remaining,
            reset,
        )
        return None


async def rate_limit_hook(response: httpx.Response) -> None:
    """httpx response event hook: wait out an exhausted Helix quota."""
    parsed = parse_rate_limit_headers(response.headers)
    if parsed is None:
        return
    remaining, reset = parsed
    await wait_for_rate_limit_async(remaining, reset)
