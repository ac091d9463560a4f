"""
Client-side pacing and retry for model calls.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from slidegen.agents.exceptions import GenerationCancelledError, get_retry_delay, is_retryable
from slidegen.config.logging_config import get_logger
from slidegen.config.settings import RateLimitConfig, RetryConfig

logger = get_logger(__name__)

T = TypeVar("T")

SECONDS_PER_DAY = 86400


class RateLimiter:
    """Simple rate limiter for API calls."""

    def __init__(self, calls_per_minute: int = 60, calls_per_day: int = 1500, clock: Callable[[], float] = time.time):
        self.calls_per_minute = calls_per_minute
        self.calls_per_day = calls_per_day
        self.minute_calls = []
        self.day_calls = []
        self.lock = asyncio.Lock()
        self._clock = clock

    @classmethod
    def from_config(cls, config: RateLimitConfig) -> "RateLimiter":
        return cls(config.requests_per_minute, config.requests_per_day)

    async def acquire(self):
        """Wait if necessary to respect rate limits."""
        async with self.lock:
            now = self._clock()

            # Clean old calls
            self.minute_calls = [t for t in self.minute_calls if now - t < 60]
            self.day_calls = [t for t in self.day_calls if now - t < SECONDS_PER_DAY]

            if len(self.minute_calls) >= self.calls_per_minute:
                wait_time = 60 - (now - self.minute_calls[0])
                if wait_time > 0:
                    logger.warning(f"[GATEWAY] Rate limit reached, waiting {wait_time:.1f}s")
                    await asyncio.sleep(wait_time)

            if len(self.day_calls) >= self.calls_per_day:
                wait_time = SECONDS_PER_DAY - (now - self.day_calls[0])
                if wait_time > 0:
                    logger.warning(f"[GATEWAY] Daily rate limit reached, waiting {wait_time:.1f}s")
                    await asyncio.sleep(wait_time)

            now = self._clock()
            self.minute_calls.append(now)
            self.day_calls.append(now)


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(config.attempts, config.base_delay, config.multiplier)


async def _sleep_or_cancel(delay: float, cancel_event: Optional[asyncio.Event]) -> None:
    if cancel_event is None:
        await asyncio.sleep(delay)
        return
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return
    raise GenerationCancelledError("Generation cancelled while waiting to retry")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    cancel_event: Optional[asyncio.Event] = None,
    description: str = "model call"
) -> T:
    """Run operation, retrying retryable ModelErrors with exponential backoff.

    The last error is re-raised once attempts are exhausted.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            attempt += 1
            if not is_retryable(e) or attempt >= policy.attempts:
                raise
            delay = get_retry_delay(e, attempt - 1, policy.base_delay, policy.multiplier)
            logger.warning(
                f"[GATEWAY] {description} failed (attempt {attempt}/{policy.attempts}): {e}. "
                f"Retrying in {delay:.1f}s"
            )
            await _sleep_or_cancel(delay, cancel_event)
