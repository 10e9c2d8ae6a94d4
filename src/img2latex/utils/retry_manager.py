"""
Retry management for transient API failures with exponential backoff.

Conversions are single-attempt by default; a RetryManager with
``max_retries=0`` runs the operation exactly once.
"""

import asyncio
import random
from typing import Any, Awaitable, Callable, Optional, Set, Type

from ..constants import DEFAULT_MAX_RETRIES, MAX_RETRIES_LIMIT
from ..exceptions import (
    CredentialError,
    ProtocolError,
    RateLimitError,
    TransportError,
)
from ..logging import get_logger

logger = get_logger(__name__)


class RetryManager:
    """
    Manages retry logic with exponential backoff and jitter.

    Retries transport failures, rate limiting and server errors (5xx);
    credential and protocol errors are never retried.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
        retryable_exceptions: Optional[Set[Type[Exception]]] = None,
        non_retryable_exceptions: Optional[Set[Type[Exception]]] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the RetryManager.

        Args:
            max_retries: Maximum number of retry attempts
            base_delay: Initial delay between retries in seconds
            max_delay: Maximum delay between retries in seconds
            exponential_base: Base for exponential backoff calculation
            jitter: Whether to add random jitter to delays
            retryable_exceptions: Exception types that should trigger retries
            non_retryable_exceptions: Exception types that should never retry
            sleep: Coroutine used to wait between attempts
        """
        if max_retries < 0 or max_retries > MAX_RETRIES_LIMIT:
            raise ValueError(f"max_retries must be between 0 and {MAX_RETRIES_LIMIT}")

        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self._sleep = sleep

        self.retryable_exceptions = retryable_exceptions if retryable_exceptions is not None else {
            TransportError,
            RateLimitError,
        }

        self.non_retryable_exceptions = non_retryable_exceptions if non_retryable_exceptions is not None else {
            CredentialError,
            ProtocolError,
            ValueError,
            TypeError,
        }

    def calculate_delay(self, attempt: int, retry_after: Optional[float] = None) -> float:
        """
        Calculate the delay for the given retry attempt.

        Args:
            attempt: The current attempt number (0-based)
            retry_after: Optional delay specified by the API (Retry-After header)

        Returns:
            Delay in seconds before the next retry
        """
        if retry_after is not None:
            base_delay = retry_after
        else:
            base_delay = self.base_delay * (self.exponential_base**attempt)

        if self.jitter:
            jitter_amount = base_delay * 0.1 * (2 * random.random() - 1)
            base_delay += jitter_amount

        return max(0.0, min(base_delay, self.max_delay))

    def is_retryable(self, exception: Exception) -> bool:
        """
        Determine if an exception should trigger a retry.

        Args:
            exception: The exception to evaluate

        Returns:
            True if the exception is retryable, False otherwise
        """
        if any(isinstance(exception, exc_type) for exc_type in self.non_retryable_exceptions):
            return False

        if any(isinstance(exception, exc_type) for exc_type in self.retryable_exceptions):
            return True

        status = getattr(exception, "status_code", None)
        if status is not None:
            return status >= 500 or status == 429

        return False

    def extract_retry_after(self, exception: Exception) -> Optional[float]:
        """Return the server-requested delay carried by the exception, if any."""
        retry_after = getattr(exception, "retry_after", None)
        if retry_after:
            return float(retry_after)
        return None

    async def execute_with_retry_async(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """
        Execute an async function with retry logic.

        Args:
            func: The async function to execute
            *args: Positional arguments for the function
            **kwargs: Keyword arguments for the function

        Returns:
            The result of the successful function call

        Raises:
            The last exception if all retries are exhausted
        """
        last_exception: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):  # +1 for initial attempt
            try:
                result = await func(*args, **kwargs)
                if attempt > 0:
                    logger.info("Operation succeeded after retries", retries=attempt)
                return result

            except Exception as e:
                last_exception = e

                if attempt >= self.max_retries:
                    break

                if not self.is_retryable(e):
                    logger.debug("Exception not retryable", error_type=type(e).__name__)
                    break

                delay = self.calculate_delay(attempt, self.extract_retry_after(e))

                logger.warning(
                    "Attempt failed, retrying",
                    attempt=attempt + 1,
                    max_attempts=self.max_retries + 1,
                    error_type=type(e).__name__,
                    delay_seconds=round(delay, 2),
                )

                await self._sleep(delay)

        if self.max_retries > 0:
            logger.error(
                "All retry attempts exhausted",
                error_type=type(last_exception).__name__,
            )
        raise last_exception


def create_retry_manager(max_retries: int = DEFAULT_MAX_RETRIES, **kwargs: Any) -> RetryManager:
    """
    Create a RetryManager for the configured retry budget.

    Args:
        max_retries: Retry budget from configuration
        **kwargs: Additional RetryManager options

    Returns:
        Configured RetryManager instance
    """
    return RetryManager(max_retries=max_retries, **kwargs)
