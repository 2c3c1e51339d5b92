"""Audio file splitter using ffmpeg."""

from __future__ import annotations

import math
from collections.abc import Callable

from podscribe.core.exceptions import ProviderError
from podscribe.core.logging_config import get_logger
from podscribe.core.models import AudioAsset, Chunk
from podscribe.source.transcode import MediaTools

logger = get_logger(__name__)


class AudioSplitter:
    """Splits audio assets that exceed the transcription size limit.

    The Whisper endpoints reject uploads above 25 MB; the default limit of
    24 MB leaves a margin for container overhead.
    """

    def __init__(self, media: MediaTools, max_size_mb: float = 24.0) -> None:
        """Initialize AudioSplitter.

        Args:
            media: ffmpeg / ffprobe runner
            max_size_mb: Largest chunk size in MB (default: 24.0)
        """
        self._media = media
        self.max_size_mb = max_size_mb
        self._logger = logger.bind(provider="audio_splitter", max_size_mb=max_size_mb)

    def chunk_count(self, asset: AudioAsset) -> int:
        """Number of chunks ``asset`` will be cut into."""
        if asset.size_mb <= self.max_size_mb:
            return 1
        return math.ceil(asset.size_mb / self.max_size_mb)

    async def split(
        self, asset: AudioAsset, notify: Callable[[str], None] | None = None
    ) -> list[Chunk]:
        """Split ``asset`` into ordered, size-bounded chunks.

        Assets within the limit come back as a single chunk pointing at the
        original file. Larger assets are cut into ``ceil(size / limit)``
        equal-duration segments, each re-encoded on its own. Segments that
        fail are skipped; if none succeed the whole asset is returned as one
        chunk.

        Raises:
            ProviderError: If the duration of an oversized asset cannot be probed.
        """
        operation_logger = self._logger.bind(
            audio_path=str(asset.path),
            size_mb=round(asset.size_mb, 2),
            operation="split",
        )

        num_chunks = self.chunk_count(asset)
        if num_chunks == 1:
            operation_logger.info("no_split_needed")
            return [Chunk(path=asset.path, sequence_index=0, is_original=True)]

        if notify:
            notify(f"Splitting large file ({asset.size_mb:.1f}MB) into {num_chunks} parts...")
        operation_logger.info("splitting_required", chunks_planned=num_chunks)

        total_duration = await self._media.probe_duration(asset.path)
        chunk_duration = total_duration / num_chunks
        stem = asset.path.stem

        chunks: list[Chunk] = []
        for i in range(num_chunks):
            chunk_path = asset.path.with_name(f"{stem}_chunk{i}.mp3")
            try:
                await self._media.extract_segment(
                    asset.path, chunk_path, i * chunk_duration, chunk_duration
                )
            except ProviderError as e:
                operation_logger.warning("chunk_failed", chunk_index=i, error=str(e))
                continue
            if chunk_path.exists():
                chunks.append(Chunk(path=chunk_path, sequence_index=i))

        if not chunks:
            operation_logger.warning("split_produced_no_chunks_using_original")
            return [Chunk(path=asset.path, sequence_index=0, is_original=True)]

        if len(chunks) < num_chunks:
            operation_logger.warning(
                "split_incomplete", chunks_count=len(chunks), chunks_planned=num_chunks
            )
        operation_logger.info("split_completed", chunks_count=len(chunks))
        return chunks
