"""Base generator mixin for report-writing LLM providers."""

from __future__ import annotations

from typing import Any

from podscribe.core.exceptions import ProviderError
from podscribe.core.logging_config import get_logger
from podscribe.core.retry_config import RetryConfig, create_retry_decorator

logger = get_logger(__name__)


class GeneratorMixin:
    """Mixin providing common functionality for generation providers.

    The default request is an OpenAI-style chat completion with a single
    user message; providers with a different API override ``_create`` and
    ``_extract_text``.

    Subclasses must set:
    - _provider_name: str
    - provider_name: short name used in progress messages
    - _retryable_exceptions: tuple[type[Exception], ...]
    - client: the SDK client
    """

    _provider_name: str = "generator"
    provider_name: str = "generator"
    _retryable_exceptions: tuple[type[Exception], ...] = (
        ConnectionError,
        TimeoutError,
    )
    client: Any

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str,
        max_tokens: int = 4096,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            api_key: Provider API key. If None, uses environment variable.
            model: LLM model to use.
            max_tokens: Upper bound on the length of the reply.
            retry_config: Retry configuration. Uses default if not provided.
        """
        self._model = model
        self.max_tokens = max_tokens
        self._retry_config = retry_config or RetryConfig()
        self._logger = logger.bind(provider=self._provider_name, model=model)
        self._api_key = api_key

    @property
    def model(self) -> str:
        """Get the current model name."""
        return self._model

    def _get_retry_decorator(self) -> Any:
        """Get retry decorator configured for provider API calls."""
        return create_retry_decorator(
            config=self._retry_config,
            exception_types=self._retryable_exceptions,
        )

    async def _create(self, prompt: str) -> Any:
        return await self.client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )

    def _extract_text(self, response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""

    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` as one user message and return the reply text.

        Raises:
            ProviderError: If the request fails after retries.
        """
        operation_logger = self._logger.bind(prompt_chars=len(prompt), operation="generate")
        operation_logger.debug("generation_started")

        retry_decorator = self._get_retry_decorator()

        @retry_decorator
        async def _generate_with_retry() -> Any:
            return await self._create(prompt)

        try:
            response = await _generate_with_retry()
        except Exception as e:
            operation_logger.error("generation_failed", error=str(e), error_type=type(e).__name__)
            raise await self._wrap_error(e, "generate") from e

        text = self._extract_text(response)
        operation_logger.info("generation_completed", answer_length=len(text))
        return text

    async def _wrap_error(self, e: Exception, operation: str) -> ProviderError:
        """Wrap provider errors with structured exception.

        Args:
            e: Original exception.
            operation: Name of the operation that failed.

        Returns:
            ProviderError with context.
        """
        return ProviderError(
            message=f"{self._provider_name} {operation} failed: {e}",
            provider=self._provider_name,
            retryable=isinstance(e, self._retryable_exceptions),
        )
