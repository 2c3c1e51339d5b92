"""OpenAI Speech-to-Text provider using Whisper."""

from __future__ import annotations

from typing import Any

from openai import APIConnectionError, APIError, AsyncOpenAI, RateLimitError  # type: ignore

from podscribe.transcribe._base import TranscriberMixin


class OpenAITranscriber(TranscriberMixin):
    """Speech-to-Text provider using OpenAI's Whisper API."""

    MODEL_WHISPER_1 = "whisper-1"

    _provider_name: str = "openai_stt"
    provider_name: str = "openai"
    _retryable_exceptions: tuple[type[Exception], ...] = (
        RateLimitError,
        APIError,
        APIConnectionError,
        ConnectionError,
    )

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = "whisper-1",
        retry_config: Any | None = None,
    ) -> None:
        """Initialize OpenAI STT provider."""
        super().__init__(api_key=api_key, model=model, retry_config=retry_config)
        self.client = AsyncOpenAI(api_key=api_key)
