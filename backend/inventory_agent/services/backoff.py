"""Exponential backoff for rate-limited external calls.

``run_with_backoff`` retries only on ``RateLimitedError``. The attempt budget
counts real attempts: ``max_attempts=3`` runs the operation at most three
times, sleeping ``min(base_delay_s * 2**attempt, max_delay_s)`` after each
rate-limited attempt that still has a successor.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from inventory_agent.config import Settings
from inventory_agent.errors import ExhaustedRetriesError, RateLimitedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_S = 1.0
DEFAULT_MAX_DELAY_S = 30.0

Sleep = Callable[[float], Awaitable[None]]


def backoff_delay(
    attempt: int,
    base_delay_s: float = DEFAULT_BASE_DELAY_S,
    max_delay_s: float = DEFAULT_MAX_DELAY_S,
) -> float:
    """Seconds to wait after the failed attempt number ``attempt`` (1-based)."""
    return min(base_delay_s * (2 ** attempt), max_delay_s)


async def run_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    base_delay_s: float = DEFAULT_BASE_DELAY_S,
    max_delay_s: float = DEFAULT_MAX_DELAY_S,
    sleep: Sleep = asyncio.sleep,
    description: str = "operation",
) -> T:
    """Run ``operation``, retrying while it reports rate limiting.

    Args:
        operation: Zero-argument coroutine factory. It must raise
            ``RateLimitedError`` for rate limiting; anything else is final.
        max_attempts: Total number of attempts, at least 1.
        base_delay_s: Base of the exponential delay.
        max_delay_s: Upper bound on a single delay.
        sleep: Awaitable sleep, injectable for tests.
        description: Name used in log lines.

    Raises:
        ExhaustedRetriesError: every attempt was rate limited.
        Exception: any non rate-limit failure, unchanged and without retry.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    attempt = 1
    while True:
        try:
            return await operation()
        except RateLimitedError as e:
            if attempt >= max_attempts:
                logger.error("%s still rate limited after %d attempt(s)", description, attempt)
                raise ExhaustedRetriesError(
                    f"{description} rate limited after {attempt} attempt(s)",
                    attempts=attempt,
                ) from e

            delay = backoff_delay(attempt, base_delay_s, max_delay_s)
            logger.warning(
                "%s rate limited (attempt %d/%d). Retrying in %.1fs",
                description,
                attempt,
                max_attempts,
                delay,
            )
            await sleep(delay)
            attempt += 1


@dataclass(frozen=True)
class BackoffPolicy:
    """Configured backoff parameters shared by the model and embedding calls."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_s: float = DEFAULT_BASE_DELAY_S
    max_delay_s: float = DEFAULT_MAX_DELAY_S
    sleep: Sleep = field(default=asyncio.sleep, compare=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "BackoffPolicy":
        return cls(
            max_attempts=settings.backoff_max_attempts,
            base_delay_s=settings.backoff_base_delay_s,
            max_delay_s=settings.backoff_max_delay_s,
        )

    async def run(self, operation: Callable[[], Awaitable[T]], description: str = "operation") -> T:
        return await run_with_backoff(
            operation,
            self.max_attempts,
            base_delay_s=self.base_delay_s,
            max_delay_s=self.max_delay_s,
            sleep=self.sleep,
            description=description,
        )
