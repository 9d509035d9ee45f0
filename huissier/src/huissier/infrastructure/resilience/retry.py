"""
Retry with exponential backoff and jitter.

Only transient transport failures should be listed in ``retry_on``;
semantic rejections from an upstream must surface immediately.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from huissier.infrastructure.monitoring.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    """Maximum number of attempts (including the initial one)"""

    initial_delay: float = 0.5
    """Delay before the first retry in seconds"""

    max_delay: float = 10.0
    """Upper bound on any single delay in seconds"""

    backoff_multiplier: float = 2.0
    """Exponential growth factor between retries"""

    jitter: bool = True
    """Add random jitter to prevent thundering herd"""

    jitter_factor: float = 0.1
    """Jitter factor (0.0-1.0). 0.1 means +/-10% randomness"""

    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    """Exception types to retry on"""


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_exception: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_exception = last_exception


class Retry:
    """
    Async retry handler.

    Example:
        retry = Retry(RetryConfig(max_attempts=3, retry_on=(aiohttp.ClientError,)))
        result = await retry.execute_async(session_call, url)
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config or RetryConfig()
        self._sleep = sleep

    def _calculate_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (0-indexed)."""
        delay = self.config.initial_delay * (self.config.backoff_multiplier**attempt)
        delay = min(delay, self.config.max_delay)

        if self.config.jitter:
            jitter_range = delay * self.config.jitter_factor
            delay = max(0.0, delay + random.uniform(-jitter_range, jitter_range))

        return delay

    async def execute_async(
        self, func: Callable[..., Awaitable[Any]], *args, **kwargs
    ) -> Any:
        """
        Execute async function with retry logic.

        Raises:
            RetryError: When all attempts are exhausted
            Exception: Non-retryable exceptions, unchanged
        """
        for attempt in range(self.config.max_attempts):
            try:
                result = await func(*args, **kwargs)
            except self.config.retry_on as e:
                if attempt >= self.config.max_attempts - 1:
                    raise RetryError(
                        f"All {self.config.max_attempts} attempts exhausted. "
                        f"Last error: {type(e).__name__}: {e}",
                        attempts=self.config.max_attempts,
                        last_exception=e,
                    ) from e

                delay = self._calculate_delay(attempt)
                logger.warning(
                    f"{type(e).__name__}: {e}. "
                    f"Attempt {attempt + 1}/{self.config.max_attempts}. "
                    f"Retrying in {delay:.2f}s..."
                )
                await self._sleep(delay)
                continue

            if attempt > 0:
                logger.info(
                    f"Operation succeeded on attempt "
                    f"{attempt + 1}/{self.config.max_attempts}"
                )
            return result

        raise RetryError("Retry configured with no attempts", attempts=0)
