"""Anthropic Claude generation provider."""

from __future__ import annotations

from typing import Any

from anthropic import (  # type: ignore[import]
    APIConnectionError,
    AsyncAnthropic,
    InternalServerError,
    RateLimitError,
)

from podscribe.generate._base import GeneratorMixin


class AnthropicGenerator(GeneratorMixin):
    """Anthropic Claude LLM generation provider."""

    _provider_name: str = "anthropic_generation"
    provider_name: str = "anthropic"
    _retryable_exceptions: tuple[type[Exception], ...] = (
        RateLimitError,
        InternalServerError,
        APIConnectionError,
        ConnectionError,
        TimeoutError,
    )

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 4096,
        retry_config: Any | None = None,
    ) -> None:
        """Initialize Anthropic generator."""
        super().__init__(api_key=api_key, model=model, max_tokens=max_tokens, retry_config=retry_config)
        self.client = AsyncAnthropic(api_key=api_key)

    async def _create(self, prompt: str) -> Any:
        return await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )

    def _extract_text(self, response: Any) -> str:
        # Only text blocks carry report prose
        blocks = getattr(response, "content", None) or []
        return "".join(getattr(block, "text", "") or "" for block in blocks)
