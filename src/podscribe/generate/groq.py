"""Groq generation provider."""

from __future__ import annotations

from typing import Any

from groq import APIConnectionError, APIError, AsyncGroq, RateLimitError  # type: ignore

from podscribe.generate._base import GeneratorMixin


class GroqGenerator(GeneratorMixin):
    """LLM generation through Groq's chat completions API.

    The request and reply shapes match OpenAI's, so the mixin's defaults
    apply unchanged.
    """

    _provider_name: str = "groq_generation"
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
        model: str = "llama-3.3-70b-versatile",
        max_tokens: int = 4096,
        retry_config: Any | None = None,
    ) -> None:
        """Initialize Groq generator."""
        super().__init__(api_key=api_key, model=model, max_tokens=max_tokens, retry_config=retry_config)
        self.client = AsyncGroq(api_key=api_key)
