"""Base transcriber class for STT providers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from podscribe.core.exceptions import ProviderError
from podscribe.core.logging_config import get_logger
from podscribe.core.retry_config import RetryConfig, create_retry_decorator

logger = get_logger(__name__)


class TranscriberMixin:
    """Mixin providing common functionality for Whisper-style STT providers.

    Subclasses must set:
    - _provider_name: str
    - provider_name: short name used in progress messages
    - _retryable_exceptions: tuple[type[Exception], ...]
    - client: an SDK client exposing ``audio.transcriptions.create``
    """

    _provider_name: str = "transcriber"
    provider_name: str = "transcriber"
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
        retry_config: RetryConfig | None = None,
    ) -> None:
        """Initialize the transcriber.

        Args:
            api_key: Provider API key. If None, uses environment variable.
            model: STT model to use.
            retry_config: Retry configuration. Uses default if not provided.
        """
        self._model = model
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

    async def transcribe(self, audio_path: Path, language: str | None = None) -> str:
        """Transcribe one audio file to plain text.

        Args:
            audio_path: Path to the audio file (at most 25 MB).
            language: Optional language code (e.g., "en" for English).

        Raises:
            ProviderError: If the request fails after retries.
        """
        operation_logger = self._logger.bind(
            audio_path=str(audio_path),
            language=language,
            operation="transcribe",
        )
        operation_logger.debug("transcription_started")

        retry_decorator = self._get_retry_decorator()

        @retry_decorator
        async def _transcribe_with_retry() -> Any:
            kwargs: dict[str, Any] = {}
            if language:
                kwargs["language"] = language
            with open(audio_path, "rb") as audio_file:
                return await self.client.audio.transcriptions.create(
                    model=self.model,
                    file=audio_file,
                    response_format="text",
                    **kwargs,
                )

        try:
            response = await _transcribe_with_retry()
        except Exception as e:
            operation_logger.error(
                "transcription_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise await self._wrap_error(e, "transcribe") from e

        text = self._extract_text(response)
        operation_logger.info("transcription_completed", chars=len(text))
        return text

    def _extract_text(self, response: Any) -> str:
        """Plain text from a ``response_format="text"`` reply.

        The SDKs hand back either the bare string or an object with ``text``.
        """
        if isinstance(response, str):
            return response
        return getattr(response, "text", "") or ""

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
