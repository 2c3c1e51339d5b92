"""Link resolution and audio acquisition."""

from __future__ import annotations


def __getattr__(name: str):
    """Lazy import with clear error messages for missing dependencies."""
    if name == "URLResolver":
        from podscribe.source.resolver import URLResolver

        return URLResolver
    if name == "AudioAcquirer":
        from podscribe.source.acquirer import AudioAcquirer

        return AudioAcquirer
    if name == "AudioSplitter":
        from podscribe.source.splitter import AudioSplitter

        return AudioSplitter
    if name == "URLSource":
        from podscribe.source.url import URLSource

        return URLSource
    if name == "HttpClient":
        try:
            from podscribe.source.http import HttpClient

            return HttpClient
        except ImportError:
            raise ImportError(
                "HttpClient requires 'aiohttp'. Install with: pip install aiohttp"
            ) from None
    if name == "YtDlpSource":
        from podscribe.source.ytdlp import YtDlpSource

        return YtDlpSource
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AudioAcquirer",
    "AudioSplitter",
    "HttpClient",
    "URLResolver",
    "URLSource",
    "YtDlpSource",
]
