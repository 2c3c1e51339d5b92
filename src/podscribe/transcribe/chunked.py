"""Transcribe an ordered list of chunks and stitch the text back together."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from podscribe.core.logging_config import get_logger
from podscribe.core.models import Chunk
from podscribe.core.protocols import STTProvider

logger = get_logger(__name__)


async def transcribe_chunks(
    chunks: list[Chunk],
    stt: STTProvider,
    *,
    provider: str | None = None,
    source_path: Path | None = None,
    notify: Callable[[str], None] | None = None,
    language: str | None = None,
) -> str:
    """Transcribe ``chunks`` one at a time, in ``sequence_index`` order.

    Each split segment is deleted as soon as its text is in hand. The
    original asset, owned by the caller, is never deleted: a chunk flagged
    ``is_original`` or located at ``source_path`` is left in place. The first
    failure stops the loop and propagates; chunks not yet transcribed are
    left for the caller's work-directory cleanup.

    Args:
        chunks: Chunks produced by the splitter.
        stt: Speech-to-text provider.
        provider: Name shown in progress messages; defaults to the provider's own.
        source_path: Path of the original asset, never deleted here. Optional;
            chunks the splitter marks ``is_original`` are kept without it.
        notify: Progress callback.
        language: Optional language code passed to the provider.

    Returns:
        The chunk texts joined with single spaces.
    """
    label = provider or stt.provider_name
    ordered = sorted(chunks, key=lambda c: c.sequence_index)
    total = len(ordered)
    operation_logger = logger.bind(provider=label, chunks_count=total, operation="transcribe_chunks")

    texts: list[str] = []
    for position, chunk in enumerate(ordered, start=1):
        if notify:
            if total > 1:
                notify(f"Transcribing part {position}/{total} ({label})...")
            else:
                notify(f"Transcribing audio ({label})...")

        texts.append(await stt.transcribe(chunk.path, language))

        if not chunk.is_original and chunk.path != source_path:
            try:
                chunk.path.unlink(missing_ok=True)
            except OSError as e:
                operation_logger.warning("chunk_cleanup_failed", chunk_path=str(chunk.path), error=str(e))

    operation_logger.info("chunks_transcribed")
    return " ".join(texts)
