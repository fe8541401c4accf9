"""
Retry policy.

Retries one async fetch with exponential backoff when it fails with a
retryable error. Other errors propagate on the first attempt.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from loguru import logger

from app.config.settings import settings
from app.utils.exceptions import RETRYABLE


T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff.

    ``max_attempts`` counts every call, the first one included. The delay
    after failed attempt ``n`` is ``base_delay * multiplier ** (n - 1)``,
    so the defaults wait 1s then 2s.

    Example:
        policy = RetryPolicy(max_attempts=3)
        wallet = await policy.run(lambda: source.fetch_wallet(member_id))
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    retry_on: tuple[type[BaseException], ...] = RETRYABLE
    sleep: Callable[[float], Awaitable[None]] = field(
        default=asyncio.sleep, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")
        if self.multiplier < 1:
            raise ValueError("multiplier must be at least 1")

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        """Policy configured by FETCH_MAX_ATTEMPTS / FETCH_BACKOFF_BASE_SECONDS."""
        return cls(
            max_attempts=settings.fetch_max_attempts,
            base_delay=settings.fetch_backoff_base_seconds,
        )

    def delay_for(self, attempt: int) -> float:
        """
        Seconds to wait after failed attempt number ``attempt`` (1-based).

        Example:
            >>> [RetryPolicy().delay_for(n) for n in (1, 2)]
            [1.0, 2.0]
        """
        if attempt < 1:
            raise ValueError("attempt is 1-based")
        return self.base_delay * self.multiplier ** (attempt - 1)

    async def run(self, fetch: Callable[[], Awaitable[T]]) -> T:
        """
        Call ``fetch`` until it succeeds or attempts run out.

        Args:
            fetch: Zero-argument coroutine factory

        Returns:
            Result of the first successful call

        Raises:
            The last retryable error once attempts are exhausted, or any
            non-retryable error immediately
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await fetch()
            except self.retry_on as e:
                if attempt == self.max_attempts:
                    logger.warning(
                        f"Giving up after {attempt} attempts: {e}",
                        extra={"attempts": attempt},
                    )
                    raise

                delay = self.delay_for(attempt)
                logger.info(
                    f"Attempt {attempt}/{self.max_attempts} failed ({e}), "
                    f"retrying in {delay:.1f}s"
                )
                await self.sleep(delay)

        raise AssertionError("unreachable")
