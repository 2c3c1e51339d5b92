"""Core podscribe components.

This module contains the protocols, models, configuration and error types
shared across the resolution, acquisition and transcription layers.
"""

from __future__ import annotations

from podscribe.core.config import PodscribeConfig
from podscribe.core.exceptions import (
    ConfigurationError,
    PipelineError,
    PodscribeError,
    ProviderError,
    ResolutionError,
)
from podscribe.core.logging_config import configure_logging, get_logger
from podscribe.core.models import (
    AcquiredAudio,
    AudioAsset,
    Chunk,
    EpisodeMetadata,
    PodcastResult,
    PodcastStatus,
    ProgressEvent,
    ResolvedSource,
)
from podscribe.core.protocols import (
    AudioSourceProvider,
    ReportGenerator,
    SourceResolver,
    STTProvider,
)
from podscribe.core.retry_config import RetryConfig, create_retry_decorator
from podscribe.core.tools import ToolPaths, resolve_tool_paths

__all__ = [
    # Models
    "AcquiredAudio",
    "AudioAsset",
    # Protocols
    "AudioSourceProvider",
    "Chunk",
    # Exceptions
    "ConfigurationError",
    "EpisodeMetadata",
    "PipelineError",
    "PodcastResult",
    "PodcastStatus",
    # Config
    "PodscribeConfig",
    "PodscribeError",
    "ProgressEvent",
    "ProviderError",
    "ReportGenerator",
    "ResolutionError",
    "ResolvedSource",
    "RetryConfig",
    "STTProvider",
    "SourceResolver",
    # Tools
    "ToolPaths",
    # Logging
    "configure_logging",
    "create_retry_decorator",
    "get_logger",
    "resolve_tool_paths",
]
