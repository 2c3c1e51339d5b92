"""OpenAI generation provider."""

from __future__ import annotations

from typing import Any

from openai import APIConnectionError, APIError, AsyncOpenAI, RateLimitError  # type: ignore

from podscribe.generate._base import GeneratorMixin


class OpenAIGenerator(GeneratorMixin):
    """OpenAI LLM generation provider."""

    _provider_name: str = "openai_generation"
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
        model: str = "gpt-4o-mini",
        max_tokens: int = 4096,
        retry_config: Any | None = None,
    ) -> None:
        """Initialize OpenAI generator."""
        super().__init__(api_key=api_key, model=model, max_tokens=max_tokens, retry_config=retry_config)
        self.client = AsyncOpenAI(api_key=api_key)
