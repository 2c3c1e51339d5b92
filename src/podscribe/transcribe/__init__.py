"""Transcription (STT) providers."""

from __future__ import annotations


def __getattr__(name: str):
    """Lazy import with clear error messages for missing dependencies."""
    if name == "OpenAITranscriber":
        try:
            from podscribe.transcribe.openai import OpenAITranscriber

            return OpenAITranscriber
        except ImportError:
            raise ImportError(
                "OpenAITranscriber requires 'openai'. Install with: pip install openai"
            ) from None
    if name == "GroqTranscriber":
        try:
            from podscribe.transcribe.groq import GroqTranscriber

            return GroqTranscriber
        except ImportError:
            raise ImportError(
                "GroqTranscriber requires 'groq'. Install with: pip install groq"
            ) from None
    if name == "transcribe_chunks":
        from podscribe.transcribe.chunked import transcribe_chunks

        return transcribe_chunks
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "GroqTranscriber",
    "OpenAITranscriber",
    "transcribe_chunks",
]
