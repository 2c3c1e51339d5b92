"""Retry policy for podscribe collaborators.

Transcription requests and direct audio downloads are retried with
exponential backoff. An exception is retried when it is one of the
caller's transient types, or when it is a ``ProviderError`` flagged
``retryable`` (HTTP 5xx, timeouts).
"""

from __future__ import annotations

from typing import Any

from tenacity import (
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity import (
    retry as tenacity_retry,
)

from podscribe.core.exceptions import ProviderError
from podscribe.core.logging_config import get_logger

logger = get_logger(__name__)


class RetryConfig:
    """How often and how patiently to retry a failing call.

    Attributes:
        max_attempts: Total attempts, the first call included
        min_wait_seconds: Shortest pause between attempts
        max_wait_seconds: Longest pause between attempts
        exponential_multiplier: Backoff multiplier
    """

    def __init__(
        self,
        max_attempts: int = 3,
        min_wait_seconds: float = 4.0,
        max_wait_seconds: float = 60.0,
        exponential_multiplier: float = 1.0,
    ):
        self.max_attempts = max_attempts
        self.min_wait_seconds = min_wait_seconds
        self.max_wait_seconds = max_wait_seconds
        self.exponential_multiplier = exponential_multiplier

    @classmethod
    def from_config(cls, config: Any) -> RetryConfig:
        """Build a RetryConfig from the ``retry_*`` fields of PodscribeConfig."""
        return cls(
            max_attempts=config.retry_max_attempts,
            min_wait_seconds=config.retry_min_wait_seconds,
            max_wait_seconds=config.retry_max_wait_seconds,
            exponential_multiplier=config.retry_exponential_multiplier,
        )


def is_retryable(exception: BaseException, exception_types: tuple[type[Exception], ...]) -> bool:
    """Whether ``exception`` is worth another attempt."""
    if isinstance(exception, ProviderError):
        return exception.retryable
    return isinstance(exception, exception_types)


def log_retry_attempt(retry_state: RetryCallState) -> None:
    fn_name = retry_state.fn.__name__ if retry_state.fn else "unknown"
    exception = retry_state.outcome.exception() if retry_state.outcome else None

    logger.warning(
        "retry_attempt",
        function=fn_name,
        attempt=retry_state.attempt_number,
        wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
        error=str(exception) if exception else None,
        error_type=type(exception).__name__ if exception else None,
    )


def create_retry_decorator(
    config: RetryConfig,
    exception_types: tuple[type[Exception], ...],
) -> Any:
    """Create a tenacity retry decorator for one collaborator.

    Args:
        config: Attempt count and backoff bounds
        exception_types: Exception types the collaborator considers transient

    Returns:
        Configured retry decorator; the last exception is re-raised once
        attempts run out.
    """
    return tenacity_retry(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(
            multiplier=config.exponential_multiplier,
            min=config.min_wait_seconds,
            max=config.max_wait_seconds,
        ),
        retry=retry_if_exception(lambda e: is_retryable(e, exception_types)),
        before_sleep=log_retry_attempt,
        reraise=True,
    )


NO_RETRY = RetryConfig(max_attempts=1, min_wait_seconds=0.0, max_wait_seconds=0.0)
