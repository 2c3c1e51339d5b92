"""Audio acquisition: turn a resolved source into one local MP3."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from podscribe.core.logging_config import get_logger
from podscribe.core.models import (
    BYTES_PER_MB,
    AcquiredAudio,
    AudioAsset,
    EpisodeMetadata,
    ResolvedSource,
)
from podscribe.source.url import URLSource
from podscribe.source.ytdlp import YtDlpSource

logger = get_logger(__name__)


class AudioAcquirer:
    """Downloads the audio for a ``ResolvedSource`` into a work directory.

    Direct audio URLs are streamed and re-encoded by ``URLSource``; every
    other link goes through yt-dlp, which extracts and transcodes in one step.
    """

    def __init__(self, url_source: URLSource, ytdlp: YtDlpSource) -> None:
        self._url_source = url_source
        self._ytdlp = ytdlp
        self._logger = logger.bind(provider="audio_acquirer")

    async def acquire(
        self,
        resolved: ResolvedSource,
        work_dir: Path,
        notify: Callable[[str], None] | None = None,
    ) -> AcquiredAudio:
        """Download ``resolved`` into ``work_dir``.

        Raises:
            ProviderError: If the audio could not be downloaded or converted.
        """
        metadata = resolved.metadata.model_copy() if resolved.metadata else EpisodeMetadata()
        operation_logger = self._logger.bind(
            url=resolved.resolved_url,
            direct_audio=resolved.direct_audio,
            operation="acquire",
        )

        if resolved.direct_audio:
            if notify:
                notify("Downloading audio from RSS feed...")
            path = await self._url_source.download(
                resolved.resolved_url, work_dir, title=metadata.title, notify=notify
            )
        else:
            if not metadata.title:
                if notify:
                    notify("Getting metadata...")
                try:
                    found = await self._ytdlp.get_metadata(resolved.resolved_url)
                except Exception as e:
                    operation_logger.warning("metadata_lookup_failed", error=str(e))
                    found = None
                if found is not None:
                    metadata.title = found.title
                    metadata.date = metadata.date or found.date

            if notify:
                notify("Downloading audio...")
            path = await self._ytdlp.download(resolved.resolved_url, work_dir)
            if path.suffix.lower() != ".mp3":
                operation_logger.info("converting_non_mp3_download", file_path=str(path))
                path = await self._url_source.convert(path, path.with_suffix(".mp3"))

        asset = AudioAsset.from_path(path)
        if not metadata.title:
            metadata.title = path.stem

        acquired = AcquiredAudio(
            asset=asset,
            metadata=metadata,
            file_size_mb=round(asset.size_bytes / BYTES_PER_MB, 2),
        )
        operation_logger.info(
            "audio_acquired",
            file_path=str(path),
            file_size_mb=acquired.file_size_mb,
            title=metadata.title,
        )
        return acquired
