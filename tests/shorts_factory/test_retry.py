"""
Tests for shorts_factory.retry

Covers rate-limit classification, the exponential backoff law, immediate
propagation of permanent errors and cancellation before each attempt.
"""

import pytest
from unittest.mock import AsyncMock

from shorts_factory.cancellation import CancellationToken
from shorts_factory.errors import (
    AuthenticationError,
    GenerationCancelled,
    InvalidRequestError,
    ProviderError,
    RateLimitError,
    classify_provider_error,
)
from shorts_factory.retry import calculate_backoff_delay, is_rate_limit_error, with_retry


class StatusError(Exception):
    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class TestIsRateLimitError:
    def test_rate_limit_error_class(self):
        assert is_rate_limit_error(RateLimitError("slow down"))

    @pytest.mark.parametrize("attr", ["status", "status_code", "code"])
    def test_status_attribute_429(self, attr):
        error = Exception("quota")
        setattr(error, attr, 429)
        assert is_rate_limit_error(error)

    def test_message_mentions_429(self):
        assert is_rate_limit_error(Exception("HTTP 429 Too Many Requests"))

    def test_other_errors_are_not_rate_limits(self):
        assert not is_rate_limit_error(AuthenticationError("bad key", status_code=401))
        assert not is_rate_limit_error(StatusError("server error", status=500))
        assert not is_rate_limit_error(ValueError("boom"))

    def test_non_429_status_with_429_in_message(self):
        assert not is_rate_limit_error(StatusError("payload size 14290 bytes exceeds the limit", status=400))

    def test_classified_invalid_request_is_not_rate_limit(self):
        error = InvalidRequestError("Invalid Gemini request: payload size 14290 bytes", status_code=400)
        assert not is_rate_limit_error(error)


class TestBackoffDelay:
    def test_doubles_per_attempt(self):
        assert calculate_backoff_delay(1, 2000) == 2000
        assert calculate_backoff_delay(2, 2000) == 4000
        assert calculate_backoff_delay(3, 2000) == 8000

    def test_uses_initial_delay(self):
        assert calculate_backoff_delay(1, 1000) == 1000
        assert calculate_backoff_delay(2, 3000) == 6000


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_success_first_attempt(self, no_sleep):
        operation = AsyncMock(return_value="ok")
        assert await with_retry(operation) == "ok"
        assert operation.await_count == 1
        assert no_sleep == []

    @pytest.mark.asyncio
    async def test_rate_limited_twice_then_success(self, no_sleep):
        operation = AsyncMock(side_effect=[
            RateLimitError("429"),
            RateLimitError("429"),
            "script",
        ])
        result = await with_retry(operation, max_attempts=3, initial_delay_ms=2000)
        assert result == "script"
        assert operation.await_count == 3
        assert no_sleep == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_rate_limit_on_final_attempt_propagates(self, no_sleep):
        error = RateLimitError("still throttled")
        operation = AsyncMock(side_effect=[RateLimitError("429"), RateLimitError("429"), error])
        with pytest.raises(RateLimitError) as exc_info:
            await with_retry(operation, max_attempts=3)
        assert exc_info.value is error
        assert operation.await_count == 3
        assert no_sleep == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_permanent_error_invoked_once(self, no_sleep):
        error = ProviderError("model not found", status_code=404)
        operation = AsyncMock(side_effect=error)
        with pytest.raises(ProviderError) as exc_info:
            await with_retry(operation, max_attempts=3)
        assert exc_info.value is error
        assert operation.await_count == 1
        assert no_sleep == []

    @pytest.mark.asyncio
    async def test_single_attempt_budget(self, no_sleep):
        operation = AsyncMock(side_effect=RateLimitError("429"))
        with pytest.raises(RateLimitError):
            await with_retry(operation, max_attempts=1)
        assert operation.await_count == 1
        assert no_sleep == []

    @pytest.mark.asyncio
    async def test_cancelled_before_first_attempt(self, no_sleep):
        token = CancellationToken()
        token.cancel()
        operation = AsyncMock(return_value="never")
        with pytest.raises(GenerationCancelled, match="Cancelled by user"):
            await with_retry(operation, token=token)
        operation.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancelled_between_attempts(self, monkeypatch):
        token = CancellationToken()

        async def cancel_during_backoff(seconds):
            token.cancel()

        monkeypatch.setattr("shorts_factory.retry.sleep", cancel_during_backoff)
        operation = AsyncMock(side_effect=[RateLimitError("429"), "late"])
        with pytest.raises(GenerationCancelled):
            await with_retry(operation, max_attempts=3, token=token)
        assert operation.await_count == 1

    @pytest.mark.asyncio
    async def test_invalid_attempt_budget(self):
        with pytest.raises(ValueError):
            await with_retry(AsyncMock(), max_attempts=0)

    @pytest.mark.asyncio
    async def test_bad_request_mentioning_429_runs_once(self, no_sleep):
        raw = StatusError("Request payload size 14290 bytes exceeds the limit", status=400)
        error = classify_provider_error(raw, "Gemini")
        operation = AsyncMock(side_effect=error)
        with pytest.raises(InvalidRequestError):
            await with_retry(operation, max_attempts=3)
        assert operation.await_count == 1
        assert no_sleep == []

    @pytest.mark.asyncio
    async def test_raw_400_mentioning_429_runs_once(self, no_sleep):
        operation = AsyncMock(side_effect=StatusError("payload size 14290 bytes", status=400))
        with pytest.raises(StatusError):
            await with_retry(operation, max_attempts=3)
        assert operation.await_count == 1
        assert no_sleep == []
