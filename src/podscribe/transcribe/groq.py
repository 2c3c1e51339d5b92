"""Groq Speech-to-Text provider using Whisper."""

from __future__ import annotations

from typing import Any

from groq import APIConnectionError, APIError, AsyncGroq, RateLimitError  # type: ignore

from podscribe.transcribe._base import TranscriberMixin


class GroqTranscriber(TranscriberMixin):
    """Speech-to-Text provider using Groq's Whisper API.

    Groq serves Whisper Large v3 Turbo through an OpenAI-compatible
    endpoint, so request and response handling is shared with OpenAI.
    """

    MODEL_WHISPER_LARGE_V3_TURBO = "whisper-large-v3-turbo"

    _provider_name: str = "groq_stt"
    provider_name: str = "groq"
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
        model: str = "whisper-large-v3-turbo",
        retry_config: Any | None = None,
    ) -> None:
        """Initialize Groq STT provider."""
        super().__init__(api_key=api_key, model=model, retry_config=retry_config)
        self.client = AsyncGroq(api_key=api_key)
