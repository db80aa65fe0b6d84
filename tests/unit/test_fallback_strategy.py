"""
Unit tests for the retry and fallback strategy.
"""

from unittest.mock import AsyncMock, call, patch

import pytest

from skeleton_core.llm.fallback import FallbackStrategy
from skeleton_core.llm.interfaces.llm_provider_interface import (
    AIError,
    AIErrorType,
    AllProvidersFailedError,
    ProviderHTTPError,
    ResponseFormatError,
)


@pytest.fixture
def strategy():
    return FallbackStrategy(retry_count=2, retry_delay=0)


class TestFallbackStrategyInit:

    def test_defaults(self):
        strategy = FallbackStrategy()
        assert strategy.retry_count == 2
        assert strategy.retry_delay == 1.0

    def test_negative_retry_count_rejected(self):
        with pytest.raises(ValueError):
            FallbackStrategy(retry_count=-1)


class TestExecuteWithFallback:
    """Ordering, retries and failure aggregation."""

    @pytest.mark.asyncio
    async def test_first_success_wins(self, strategy, make_provider):
        a = make_provider("a", outcomes=["from a"])
        b = make_provider("b", outcomes=["from b"])

        result = await strategy.execute_with_fallback([a, b], "prompt")

        assert result.content == "from a"
        assert result.provider == "a"
        assert a.calls == 1
        assert b.calls == 0

    @pytest.mark.asyncio
    async def test_retry_then_success_on_same_provider(self, strategy, make_provider):
        a = make_provider("a", outcomes=[ProviderHTTPError(429, "Too Many Requests"), "ok"])
        b = make_provider("b", outcomes=["from b"])

        result = await strategy.execute_with_fallback([a, b], "prompt")

        assert result.content == "ok"
        assert a.calls == 2
        assert b.calls == 0

    @pytest.mark.asyncio
    async def test_exhausted_provider_falls_back(self, strategy, make_provider):
        a = make_provider("a", outcomes=[ProviderHTTPError(503, "Service Unavailable")])
        b = make_provider("b", outcomes=["from b"])

        result = await strategy.execute_with_fallback([a, b], "prompt")

        assert result.provider == "b"
        assert a.calls == 3
        assert b.calls == 1

    @pytest.mark.asyncio
    async def test_auth_error_stops_everything(self, strategy, make_provider):
        a = make_provider("a", outcomes=[ProviderHTTPError(401, "Unauthorized")])
        b = make_provider("b", outcomes=["from b"])

        with pytest.raises(AIError) as exc_info:
            await strategy.execute_with_fallback([a, b], "prompt")

        assert exc_info.value.error_type == AIErrorType.AUTH_ERROR
        assert exc_info.value.provider == "a"
        assert a.calls == 1
        assert b.calls == 0

    @pytest.mark.asyncio
    async def test_all_failed_collects_one_failure_per_provider(self, strategy, make_provider):
        a = make_provider("a", outcomes=[Exception("network down")])
        b = make_provider("b", outcomes=[Exception("Request timeout")])

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await strategy.execute_with_fallback([a, b], "prompt")

        error = exc_info.value
        assert error.providers == ["a", "b"]
        assert [f.provider for f in error.errors] == ["a", "b"]
        assert all(f.attempts == 3 for f in error.errors)
        assert error.errors[0].error.error_type == AIErrorType.NETWORK_ERROR
        assert error.errors[1].error.error_type == AIErrorType.TIMEOUT
        assert a.calls == 3
        assert b.calls == 3

    @pytest.mark.asyncio
    async def test_unavailable_providers_are_skipped(self, strategy, make_provider):
        a = make_provider("a", api_key=None)
        b = make_provider("b", outcomes=["from b"])

        result = await strategy.execute_with_fallback([a, b], "prompt")

        assert result.provider == "b"
        assert a.calls == 0

    @pytest.mark.asyncio
    async def test_no_available_providers(self, strategy, make_provider):
        a = make_provider("a", enabled=False)

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await strategy.execute_with_fallback([a], "prompt")

        assert exc_info.value.providers == []
        assert exc_info.value.errors == []

    @pytest.mark.asyncio
    async def test_zero_retries_means_single_attempt(self, make_provider):
        strategy = FallbackStrategy(retry_count=0, retry_delay=0)
        a = make_provider("a", outcomes=[Exception("boom")])

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await strategy.execute_with_fallback([a], "prompt")

        assert a.calls == 1
        assert exc_info.value.errors[0].attempts == 1

    @pytest.mark.asyncio
    async def test_linear_backoff(self, make_provider):
        strategy = FallbackStrategy(retry_count=2, retry_delay=1.0)
        a = make_provider("a", outcomes=[Exception("boom")])

        with patch("skeleton_core.llm.fallback.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(AllProvidersFailedError):
                await strategy.execute_with_fallback([a], "prompt")

        assert sleep.await_args_list == [call(1.0), call(2.0)]

    @pytest.mark.asyncio
    async def test_no_sleep_before_first_attempt_of_next_provider(self, make_provider):
        strategy = FallbackStrategy(retry_count=0, retry_delay=5.0)
        a = make_provider("a", outcomes=[Exception("boom")])
        b = make_provider("b", outcomes=["ok"])

        with patch("skeleton_core.llm.fallback.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await strategy.execute_with_fallback([a, b], "prompt")

        assert result.provider == "b"
        sleep.assert_not_awaited()


class TestResponseHandler:
    """Handler failures count as provider failures."""

    @pytest.mark.asyncio
    async def test_handler_result_is_returned(self, strategy, make_provider):
        a = make_provider("a", outcomes=["payload"])

        result = await strategy.execute_with_fallback(
            [a], "prompt", response_handler=lambda r: r.content.upper()
        )

        assert result == "PAYLOAD"

    @pytest.mark.asyncio
    async def test_format_error_retries_and_falls_back(self, strategy, make_provider):
        a = make_provider("a", outcomes=["bad"])
        b = make_provider("b", outcomes=["good"])

        def handler(result):
            if result.content == "bad":
                raise ResponseFormatError("missing fields", provider=result.provider)
            return result.provider

        assert await strategy.execute_with_fallback([a, b], "prompt", response_handler=handler) == "b"
        assert a.calls == 3
        assert b.calls == 1
