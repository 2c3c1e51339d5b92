"""Structured exception hierarchy for podscribe.

Exception Hierarchy:
    PodscribeError (base)
    ├── PipelineError
    ├── ProviderError
    ├── ConfigurationError
    └── ResolutionError

Usage:
    from podscribe.core.exceptions import ConfigurationError, ProviderError

    try:
        results = await pipeline.run_batch(urls)
    except ConfigurationError as e:
        logger.error(f"Batch not started: {e}")
"""

from __future__ import annotations


class PodscribeError(Exception):
    """Base exception class for all podscribe errors.

    Catching this class catches every error raised by the library itself.
    """

    pass


class PipelineError(PodscribeError):
    """Exception raised when a stage of the per-item pipeline fails.

    Args:
        message: Human-readable error message.
        stage: The pipeline stage that failed (e.g., "resolve", "download").
        source_url: The URL of the item being processed, if available.

    Attributes:
        stage: The pipeline stage that failed.
        source_url: The source URL being processed.

    Example:
        raise PipelineError(
            "ffprobe could not read the file",
            stage="split",
            source_url="https://youtu.be/abc",
        )
    """

    def __init__(self, message: str, stage: str, source_url: str | None = None) -> None:
        """Initialize PipelineError with context."""
        super().__init__(message)
        self.stage = stage
        self.source_url = source_url


class ProviderError(PodscribeError):
    """Exception raised when an external collaborator fails.

    Wraps failures from the transcription backends, yt-dlp, ffmpeg and plain
    HTTP fetches, and records whether a retry could help.

    Args:
        message: Human-readable error message.
        provider: The name of the collaborator that failed (e.g., "groq_stt").
        retryable: Whether the error is transient and can be retried.

    Attributes:
        provider: The name of the failed collaborator.
        retryable: Whether the error can be retried.
    """

    def __init__(self, message: str, provider: str, retryable: bool = False) -> None:
        """Initialize ProviderError with context."""
        super().__init__(message)
        self.provider = provider
        self.retryable = retryable


class ConfigurationError(PodscribeError):
    """Exception raised when configuration is missing or invalid.

    A missing transcription API key is reported this way before a batch starts.

    Example:
        raise ConfigurationError(
            "Missing Groq API key. Set PODSCRIBE_GROQ_API_KEY or run 'podscribe setup'."
        )
    """

    def __init__(self, message: str) -> None:
        """Initialize ConfigurationError."""
        super().__init__(message)


class ResolutionError(PodscribeError):
    """Exception raised when a link cannot be turned into downloadable audio.

    Only raised for links that have no usable fallback, such as a Spotify
    episode whose title could not be found on YouTube.

    Attributes:
        url: The input link that could not be resolved.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        """Initialize ResolutionError with context."""
        super().__init__(message)
        self.url = url


__all__ = [
    "ConfigurationError",
    "PipelineError",
    "PodscribeError",
    "ProviderError",
    "ResolutionError",
]
