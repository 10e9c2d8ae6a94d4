"""Tests for the retry manager used around conversion requests."""

from unittest.mock import AsyncMock

import pytest

from img2latex.exceptions import (
    APIRequestError,
    CredentialError,
    ProtocolError,
    RateLimitError,
    TransportError,
)
from img2latex.utils.retry_manager import RetryManager, create_retry_manager


class TestRetryManager:
    """Test the RetryManager class."""

    def test_retry_manager_default_initialization(self):
        """Conversions are single-attempt unless retries are configured."""
        manager = RetryManager()
        assert manager.max_retries == 0
        assert manager.base_delay == 1.0
        assert manager.max_delay == 60.0
        assert manager.exponential_base == 2.0
        assert manager.jitter is True

    @pytest.mark.parametrize("max_retries", [-1, 11])
    def test_retry_budget_is_bounded(self, max_retries):
        with pytest.raises(ValueError, match="max_retries must be between 0 and 10"):
            RetryManager(max_retries=max_retries)

    def test_retry_manager_custom_exceptions(self):
        custom_retryable = {KeyError}
        custom_non_retryable = {AttributeError}

        manager = RetryManager(
            retryable_exceptions=custom_retryable, non_retryable_exceptions=custom_non_retryable
        )

        assert manager.retryable_exceptions == custom_retryable
        assert manager.non_retryable_exceptions == custom_non_retryable

    def test_calculate_delay_basic(self):
        manager = RetryManager(base_delay=2.0, exponential_base=2.0, jitter=False)

        assert manager.calculate_delay(0) == 2.0
        assert manager.calculate_delay(1) == 4.0
        assert manager.calculate_delay(2) == 8.0

    def test_calculate_delay_with_max(self):
        manager = RetryManager(base_delay=10.0, max_delay=15.0, jitter=False)
        assert manager.calculate_delay(5) == 15.0

    def test_calculate_delay_with_retry_after(self):
        manager = RetryManager(base_delay=2.0, jitter=False)
        assert manager.calculate_delay(3, retry_after=5.0) == 5.0

    def test_calculate_delay_with_jitter(self):
        """Jitter stays within ten percent of the base delay."""
        manager = RetryManager(base_delay=10.0, jitter=True)

        for _ in range(20):
            assert 9.0 <= manager.calculate_delay(0) <= 11.0


class TestRetryClassification:
    """Which failures are worth another attempt."""

    @pytest.mark.parametrize(
        "exception",
        [
            TransportError("Network error"),
            RateLimitError("Rate limit exceeded"),
            APIRequestError("Server error", status_code=500),
            APIRequestError("Overloaded", status_code=529),
        ],
    )
    def test_transient_failures_are_retryable(self, exception):
        assert RetryManager().is_retryable(exception) is True

    @pytest.mark.parametrize(
        "exception",
        [
            CredentialError("Invalid API key", status_code=401),
            CredentialError("Forbidden", status_code=403),
            ProtocolError("Invalid response format"),
            APIRequestError("Bad request", status_code=400),
            ValueError("bad value"),
            KeyError("unknown"),
        ],
    )
    def test_permanent_failures_are_not_retryable(self, exception):
        assert RetryManager().is_retryable(exception) is False

    def test_extract_retry_after(self):
        manager = RetryManager()

        assert manager.extract_retry_after(RateLimitError("slow", retry_after=30)) == 30.0
        assert manager.extract_retry_after(RateLimitError("slow")) is None
        assert manager.extract_retry_after(TransportError("down")) is None


class TestExecuteWithRetry:
    """Test async execution with retries."""

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self):
        sleep = AsyncMock()
        manager = RetryManager(max_retries=3, sleep=sleep)
        func = AsyncMock(return_value="\\alpha")

        result = await manager.execute_with_retry_async(func, "arg", key="value")

        assert result == "\\alpha"
        func.assert_awaited_once_with("arg", key="value")
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_success_after_retries(self):
        sleep = AsyncMock()
        manager = RetryManager(max_retries=3, base_delay=0.5, jitter=False, sleep=sleep)
        func = AsyncMock(
            side_effect=[TransportError("down"), RateLimitError("busy"), "\\beta"]
        )

        result = await manager.execute_with_retry_async(func)

        assert result == "\\beta"
        assert func.await_count == 3
        assert [call.args[0] for call in sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_retry_after_is_honoured(self):
        sleep = AsyncMock()
        manager = RetryManager(max_retries=1, jitter=False, sleep=sleep)
        func = AsyncMock(side_effect=[RateLimitError("slow", retry_after=12), "ok"])

        assert await manager.execute_with_retry_async(func) == "ok"
        sleep.assert_awaited_once_with(12.0)

    @pytest.mark.asyncio
    async def test_non_retryable_error_raises_immediately(self):
        sleep = AsyncMock()
        manager = RetryManager(max_retries=3, sleep=sleep)
        func = AsyncMock(side_effect=CredentialError("Invalid API key", status_code=401))

        with pytest.raises(CredentialError):
            await manager.execute_with_retry_async(func)

        assert func.await_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_exhausted_raises_last_error(self):
        sleep = AsyncMock()
        manager = RetryManager(max_retries=2, jitter=False, sleep=sleep)
        func = AsyncMock(
            side_effect=[TransportError("first"), TransportError("second"), TransportError("third")]
        )

        with pytest.raises(TransportError, match="third"):
            await manager.execute_with_retry_async(func)

        assert func.await_count == 3
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_zero_retries_means_single_attempt(self):
        sleep = AsyncMock()
        manager = RetryManager(max_retries=0, sleep=sleep)
        func = AsyncMock(side_effect=RateLimitError("slow"))

        with pytest.raises(RateLimitError):
            await manager.execute_with_retry_async(func)

        assert func.await_count == 1
        sleep.assert_not_awaited()


class TestCreateRetryManager:
    def test_create_retry_manager_defaults(self):
        assert create_retry_manager().max_retries == 0

    def test_create_retry_manager_with_options(self):
        manager = create_retry_manager(4, base_delay=0.25, jitter=False)

        assert manager.max_retries == 4
        assert manager.base_delay == 0.25
        assert manager.jitter is False
