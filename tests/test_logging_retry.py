"""Tests for the Timer helper and the retry policy."""

import pytest
import structlog
from structlog.testing import capture_logs

from podscribe.core.exceptions import ProviderError
from podscribe.core.logging_config import Timer, configure_logging
from podscribe.core.retry_config import RetryConfig, create_retry_decorator, is_retryable

FAST_RETRY = RetryConfig(max_attempts=3, min_wait_seconds=0.0, max_wait_seconds=0.0)


class TestTimer:
    def test_complete_logs_extra_fields_once(self):
        with capture_logs() as logs:
            with Timer(structlog.get_logger(), "stage_split") as timer:
                timer.complete(chunks_count=3)

        events = [entry["event"] for entry in logs]
        assert events == ["stage_split_started", "stage_split_completed"]
        assert logs[-1]["chunks_count"] == 3
        assert "duration_ms" in logs[-1]

    def test_failure_is_logged_and_propagates(self):
        with capture_logs() as logs:
            with pytest.raises(ValueError):
                with Timer(structlog.get_logger(), "stage_resolve", url="u"):
                    raise ValueError("bad feed")

        failed = logs[-1]
        assert failed["event"] == "stage_resolve_failed"
        assert failed["error_type"] == "ValueError"
        assert failed["url"] == "u"
        assert failed["log_level"] == "error"

    @pytest.mark.parametrize("log_format", ["colored", "plain", "json"])
    def test_configure_logging_accepts_formats(self, log_format):
        configure_logging(log_level="WARNING", log_format=log_format, log_timestamps=False)


class TestRetryPolicy:
    def test_is_retryable(self):
        assert is_retryable(ConnectionError(), (ConnectionError,))
        assert not is_retryable(ValueError(), (ConnectionError,))
        assert is_retryable(ProviderError("HTTP 503", provider="http", retryable=True), ())
        assert not is_retryable(ProviderError("HTTP 404", provider="http"), (ProviderError,))

    @pytest.mark.asyncio
    async def test_transient_errors_are_retried(self):
        calls = []

        @create_retry_decorator(FAST_RETRY, (ConnectionError,))
        async def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("reset")
            return "ok"

        assert await flaky() == "ok"
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_gives_up_and_reraises(self):
        calls = []

        @create_retry_decorator(FAST_RETRY, ())
        async def always_503():
            calls.append(1)
            raise ProviderError("HTTP 503", provider="http", retryable=True)

        with pytest.raises(ProviderError, match="HTTP 503"):
            await always_503()
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_permanent_errors_are_not_retried(self):
        calls = []

        @create_retry_decorator(FAST_RETRY, (ConnectionError,))
        async def not_found():
            calls.append(1)
            raise ProviderError("HTTP 404", provider="http")

        with pytest.raises(ProviderError):
            await not_found()
        assert len(calls) == 1

    def test_from_config(self, config):
        retry = RetryConfig.from_config(config)
        assert retry.max_attempts == config.retry_max_attempts
        assert retry.max_wait_seconds == config.retry_max_wait_seconds
