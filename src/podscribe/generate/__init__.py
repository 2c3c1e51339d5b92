"""Generation (LLM) providers used for batch reports."""

from __future__ import annotations


def __getattr__(name: str):
    """Lazy import with clear error messages for missing dependencies."""
    if name == "OpenAIGenerator":
        try:
            from podscribe.generate.openai import OpenAIGenerator

            return OpenAIGenerator
        except ImportError:
            raise ImportError(
                "OpenAIGenerator requires 'openai'. Install with: pip install openai"
            ) from None
    if name == "GroqGenerator":
        try:
            from podscribe.generate.groq import GroqGenerator

            return GroqGenerator
        except ImportError:
            raise ImportError(
                "GroqGenerator requires 'groq'. Install with: pip install groq"
            ) from None
    if name == "AnthropicGenerator":
        try:
            from podscribe.generate.anthropic import AnthropicGenerator

            return AnthropicGenerator
        except ImportError:
            raise ImportError(
                "AnthropicGenerator requires 'anthropic'. Install with: pip install anthropic"
            ) from None
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AnthropicGenerator",
    "GroqGenerator",
    "OpenAIGenerator",
]
