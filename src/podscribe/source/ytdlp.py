"""yt-dlp collaborator: metadata, YouTube search and audio extraction."""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import Callable
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any, cast

from podscribe.core.exceptions import ProviderError
from podscribe.core.logging_config import get_logger
from podscribe.core.models import EpisodeMetadata
from podscribe.core.tools import ToolPaths
from podscribe.source.ydl_utils import (
    build_download_opts,
    build_metadata_opts,
    build_search_opts,
    normalize_upload_date,
)

if TYPE_CHECKING:
    from podscribe.core.config import PodscribeConfig

logger = get_logger(__name__)

AUDIO_SUFFIXES = (".mp3", ".m4a", ".wav", ".webm", ".opus")
INSTALL_HINT = "yt-dlp not found. Install with: pip install yt-dlp"


def _import_ytdlp() -> ModuleType:
    try:
        import yt_dlp
    except ImportError:
        raise ProviderError(message=INSTALL_HINT, provider="yt_dlp", retryable=False) from None
    return yt_dlp


def make_cancel_hook(
    cancelled: threading.Event, deadline: float, error_type: type[Exception]
) -> Callable[[dict[str, Any]], None]:
    """A yt-dlp progress hook that aborts the download from inside its thread.

    ``asyncio.wait_for`` cannot stop a worker thread, so the hook raises
    ``error_type`` on its next call once ``cancelled`` is set or the
    monotonic ``deadline`` has passed.
    """

    def hook(status: dict[str, Any]) -> None:
        if cancelled.is_set() or time.monotonic() > deadline:
            raise error_type("Download cancelled: deadline exceeded")

    return hook


class YtDlpSource:
    """Wraps the yt-dlp Python API.

    All calls run in a worker thread and are bounded by ``asyncio.wait_for``;
    lookups use the short timeout, downloads the long one.
    """

    _provider_name = "yt_dlp"

    def __init__(
        self,
        tools: ToolPaths,
        *,
        bitrate: str = "64k",
        max_filesize_mb: int = 200,
        lookup_timeout: float = 30.0,
        download_timeout: float = 600.0,
    ) -> None:
        self._tools = tools
        self._bitrate = bitrate
        self._max_filesize_mb = max_filesize_mb
        self._lookup_timeout = lookup_timeout
        self._download_timeout = download_timeout
        self._logger = logger.bind(provider=self._provider_name)

    @classmethod
    def from_config(cls, config: PodscribeConfig, tools: ToolPaths) -> YtDlpSource:
        return cls(
            tools,
            bitrate=config.audio_bitrate,
            max_filesize_mb=config.max_download_size_mb,
            lookup_timeout=config.lookup_timeout_seconds,
            download_timeout=config.media_timeout_seconds,
        )

    async def get_metadata(self, url: str) -> EpisodeMetadata | None:
        """Title and upload date for ``url``, or None if yt-dlp cannot tell."""
        operation_logger = self._logger.bind(url=url, operation="get_metadata")

        def _get_info() -> dict[str, Any] | None:
            yt_dlp = _import_ytdlp()
            opts = build_metadata_opts(self._tools, socket_timeout=self._lookup_timeout)
            with yt_dlp.YoutubeDL(cast(Any, opts)) as ydl:
                return ydl.extract_info(url, download=False)

        info = await asyncio.wait_for(asyncio.to_thread(_get_info), self._lookup_timeout)
        if not info:
            operation_logger.debug("metadata_empty")
            return None
        metadata = EpisodeMetadata(
            title=info.get("title") or "",
            date=normalize_upload_date(info.get("upload_date")),
        )
        operation_logger.debug("metadata_extracted", title=metadata.title, date=metadata.date)
        return metadata

    async def search_top_result(self, query: str) -> str | None:
        """URL of the first YouTube search hit for ``query``."""
        operation_logger = self._logger.bind(query=query, operation="search")

        def _search() -> dict[str, Any] | None:
            yt_dlp = _import_ytdlp()
            opts = build_search_opts(self._tools, socket_timeout=self._lookup_timeout)
            with yt_dlp.YoutubeDL(cast(Any, opts)) as ydl:
                return ydl.extract_info(f"ytsearch1:{query}", download=False)

        info = await asyncio.wait_for(asyncio.to_thread(_search), self._lookup_timeout)
        for entry in (info or {}).get("entries") or []:
            if not entry:
                continue
            url = entry.get("url") or entry.get("webpage_url")
            if not url and entry.get("id"):
                url = f"https://www.youtube.com/watch?v={entry['id']}"
            if url:
                operation_logger.info("search_hit", result_url=url)
                return url
        operation_logger.info("search_no_results")
        return None

    async def download(self, url: str, output_dir: Path) -> Path:
        """Extract audio from ``url`` into ``output_dir``.

        Returns the MP3 yt-dlp produced or, if the post-processor did not
        run, the first other audio file found.

        On timeout the worker thread is told to stop: progress and
        post-processor hooks raise ``DownloadCancelled`` at their next call,
        so yt-dlp abandons the transfer instead of running on in the
        background.

        Raises:
            ProviderError: yt-dlp missing, download failure, timeout, or no
                audio file produced (e.g. the source exceeded the size cap).
        """
        operation_logger = self._logger.bind(url=url, output_dir=str(output_dir), operation="download")
        operation_logger.info("download_started")
        yt_dlp = _import_ytdlp()
        cancelled = threading.Event()
        deadline = time.monotonic() + self._download_timeout
        hook = make_cancel_hook(cancelled, deadline, yt_dlp.utils.DownloadCancelled)

        def _download_sync() -> None:
            opts = build_download_opts(
                self._tools,
                output_dir,
                bitrate=self._bitrate,
                max_filesize_mb=self._max_filesize_mb,
                socket_timeout=self._lookup_timeout,
            )
            opts["progress_hooks"] = [hook]
            opts["postprocessor_hooks"] = [hook]
            with yt_dlp.YoutubeDL(cast(Any, opts)) as ydl:
                ydl.download([url])

        try:
            await asyncio.wait_for(asyncio.to_thread(_download_sync), self._download_timeout)
        except Exception as e:
            # a hook that fired at the deadline reads the same as wait_for timing out
            if isinstance(e, TimeoutError) or time.monotonic() >= deadline:
                cancelled.set()
                operation_logger.error("download_timeout", timeout_seconds=self._download_timeout)
                raise ProviderError(
                    message=f"Download failed: timed out after {self._download_timeout:.0f}s",
                    provider=self._provider_name,
                    retryable=True,
                ) from e
            operation_logger.error("download_failed", error=str(e), error_type=type(e).__name__)
            raise ProviderError(
                message=f"Download failed: {str(e)[:200]}",
                provider=self._provider_name,
                retryable=isinstance(e, ConnectionError),
            ) from e

        audio_path = find_audio_file(output_dir)
        if audio_path is None:
            raise ProviderError(
                message="No audio file found after download",
                provider=self._provider_name,
                retryable=False,
            )
        operation_logger.info("download_completed", file_path=str(audio_path))
        return audio_path


def find_audio_file(directory: Path) -> Path | None:
    """An MP3 in ``directory`` if there is one, else another audio file."""
    files = sorted(p for p in directory.iterdir() if p.is_file())
    for path in files:
        if path.suffix.lower() == ".mp3":
            return path
    for path in files:
        if path.suffix.lower() in AUDIO_SUFFIXES:
            return path
    return None
