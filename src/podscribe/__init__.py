"""podscribe package.

Turns lists of podcast-episode links (YouTube, Spotify, Apple Podcasts, or
anything yt-dlp understands) into transcripts, one episode at a time.

Usage:
    from podscribe import PodcastPipeline, PodscribeConfig

    pipeline = PodcastPipeline(PodscribeConfig())
    results = await pipeline.run_batch(["https://youtu.be/..."])

A batch can then be summarized by an LLM with ``generate_report``.
"""

from __future__ import annotations

from podscribe.core import (
    PodcastResult,
    PodcastStatus,
    PodscribeConfig,
    ProgressEvent,
    RetryConfig,
    configure_logging,
    get_logger,
)
from podscribe.export import read_results_json, write_results_json
from podscribe.pipeline import PodcastPipeline
from podscribe.report import generate_report

__version__ = "0.1.0"

__all__ = [
    "PodcastPipeline",
    "PodcastResult",
    "PodcastStatus",
    "PodscribeConfig",
    "ProgressEvent",
    "RetryConfig",
    "__version__",
    "configure_logging",
    "generate_report",
    "get_logger",
    "read_results_json",
    "write_results_json",
]
