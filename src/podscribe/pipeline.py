"""Batch orchestrator: podcast links in, transcripts out.

Each link runs through discrete Stage classes executed by a stage-runner
loop: resolve -> download, then split -> transcribe. Items are processed one
at a time, in input order, each inside its own temporary work directory.
A failing item is recorded in its ``PodcastResult`` and the batch moves on.
"""

from __future__ import annotations

import asyncio
import contextlib
import shutil
import tempfile
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from podscribe.core import (
    AcquiredAudio,
    AudioSourceProvider,
    Chunk,
    PipelineError,
    PodcastResult,
    PodcastStatus,
    PodscribeConfig,
    ProgressEvent,
    ResolvedSource,
    RetryConfig,
    SourceResolver,
    STTProvider,
    configure_logging,
    get_logger,
    resolve_tool_paths,
)
from podscribe.core.logging_config import Timer
from podscribe.core.provider_factory import create_stt_provider
from podscribe.progress import (
    ProgressCallback,
    batch_started,
    item_finished,
    item_started,
    item_step,
)
from podscribe.source.splitter import AudioSplitter
from podscribe.transcribe.chunked import transcribe_chunks

if TYPE_CHECKING:
    import structlog

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Item context - mutable bag of data passed through the stage pipeline
# ---------------------------------------------------------------------------
@dataclass
class ItemContext:
    """Mutable context shared across all stages of one item."""

    url: str
    index: int
    total: int
    work_dir: Path
    logger: structlog.stdlib.BoundLogger
    notify: Callable[[str], None]

    # Populated during execution
    resolved: ResolvedSource | None = None
    acquired: AcquiredAudio | None = None
    chunks: list[Chunk] = field(default_factory=list)
    transcript: str | None = None


# ---------------------------------------------------------------------------
# Stage base class
# ---------------------------------------------------------------------------
class Stage(ABC):
    """Abstract pipeline stage."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short, logging-friendly stage name (e.g. ``'download'``)."""

    @abstractmethod
    async def execute(self, ctx: ItemContext, pipeline: PodcastPipeline) -> None:
        """Run the stage, mutating *ctx* in place.

        Args:
            ctx: Shared mutable context for this item.
            pipeline: The pipeline instance (provides the collaborators).
        """


# ---------------------------------------------------------------------------
# Concrete stages
# ---------------------------------------------------------------------------
class ResolveStage(Stage):
    """Stage 1 - Turn the input link into a downloadable source."""

    @property
    def name(self) -> str:
        return "resolve"

    async def execute(self, ctx: ItemContext, pipeline: PodcastPipeline) -> None:
        with Timer(ctx.logger, "stage_resolve") as timer:
            ctx.resolved = await pipeline._resolver.resolve(ctx.url, ctx.notify)
            timer.complete(
                resolved_url=ctx.resolved.resolved_url,
                direct_audio=ctx.resolved.direct_audio,
            )


class DownloadStage(Stage):
    """Stage 2 - Download the audio into the item's work directory."""

    @property
    def name(self) -> str:
        return "download"

    async def execute(self, ctx: ItemContext, pipeline: PodcastPipeline) -> None:
        assert ctx.resolved is not None
        with Timer(ctx.logger, "stage_download") as timer:
            ctx.acquired = await pipeline._acquirer.acquire(ctx.resolved, ctx.work_dir, ctx.notify)
            timer.complete(
                title=ctx.acquired.metadata.title,
                file_size_mb=ctx.acquired.file_size_mb,
                file_path=str(ctx.acquired.asset.path),
            )


class SplitStage(Stage):
    """Stage 3 - Split large audio files into upload-sized chunks."""

    @property
    def name(self) -> str:
        return "split"

    async def execute(self, ctx: ItemContext, pipeline: PodcastPipeline) -> None:
        assert ctx.acquired is not None
        with Timer(ctx.logger, "stage_split") as timer:
            ctx.chunks = await pipeline._splitter.split(ctx.acquired.asset, ctx.notify)
            timer.complete(chunks_count=len(ctx.chunks))


class TranscribeStage(Stage):
    """Stage 4 - Transcribe the chunks and join their text."""

    @property
    def name(self) -> str:
        return "transcribe"

    async def execute(self, ctx: ItemContext, pipeline: PodcastPipeline) -> None:
        assert ctx.acquired is not None
        config = pipeline._config
        with Timer(ctx.logger, "stage_transcribe", parts=len(ctx.chunks)) as timer:
            ctx.transcript = await transcribe_chunks(
                ctx.chunks,
                pipeline._get_stt(),
                provider=config.transcription_provider,
                source_path=ctx.acquired.asset.path,
                notify=ctx.notify,
                language=config.stt_language,
            )
            timer.complete(chars=len(ctx.transcript))


# ---------------------------------------------------------------------------
# Default stage ordering
# ---------------------------------------------------------------------------
_ACQUIRE_STAGES: tuple[Stage, ...] = (
    ResolveStage(),
    DownloadStage(),
)

_TRANSCRIBE_STAGES: tuple[Stage, ...] = (
    SplitStage(),
    TranscribeStage(),
)


@contextlib.contextmanager
def item_workspace(prefix: str = "podscribe_") -> Iterator[Path]:
    """A fresh temporary directory, removed with its contents on exit."""
    work_dir = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield work_dir
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)
        logger.debug("work_directory_cleaned", work_dir=str(work_dir))


def clean_urls(urls: Iterable[str]) -> list[str]:
    """Strip input links and drop the blank ones, keeping order."""
    return [url.strip() for url in urls if url and url.strip()]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------
class PodcastPipeline:
    """Orchestrates resolution, download, splitting and transcription.

    Collaborators default to the concrete implementations built from config;
    any of them may be injected instead.
    """

    def __init__(
        self,
        config: PodscribeConfig,
        *,
        resolver: SourceResolver | None = None,
        acquirer: AudioSourceProvider | None = None,
        splitter: AudioSplitter | None = None,
        stt: STTProvider | None = None,
    ) -> None:
        """Initialize the pipeline with config and optional collaborator overrides.

        Args:
            config: podscribe configuration.
            resolver: Custom link resolver. Defaults to URLResolver.
            acquirer: Custom audio acquirer. Defaults to AudioAcquirer.
            splitter: Custom splitter. Defaults to AudioSplitter.
            stt: Custom STT provider. Defaults based on
                config.transcription_provider, created on first use.
        """
        self._config = config

        # Configure logging based on config
        configure_logging(
            log_level=config.log_level,
            log_format=config.log_format,
            log_timestamps=config.log_timestamps,
        )

        self._retry_config = RetryConfig.from_config(config)
        self._stt = stt

        if resolver is not None and acquirer is not None and splitter is not None:
            self._resolver = resolver
            self._acquirer = acquirer
            self._splitter = splitter
            return

        from podscribe.source.acquirer import AudioAcquirer
        from podscribe.source.http import HttpClient
        from podscribe.source.resolver import URLResolver
        from podscribe.source.transcode import MediaTools
        from podscribe.source.url import URLSource
        from podscribe.source.ytdlp import YtDlpSource

        tools = resolve_tool_paths(config)
        http = HttpClient.from_config(config, retry_config=self._retry_config)
        media = MediaTools(
            tools,
            bitrate=config.audio_bitrate,
            probe_timeout=config.lookup_timeout_seconds,
            transcode_timeout=config.transcode_timeout_seconds,
        )
        ytdlp = YtDlpSource.from_config(config, tools)

        self._resolver = resolver or URLResolver(http, ytdlp)
        self._acquirer = acquirer or AudioAcquirer(URLSource(http, media), ytdlp)
        self._splitter = splitter or AudioSplitter(media, max_size_mb=config.split_max_size_mb)

    def _get_stt(self) -> STTProvider:
        if self._stt is None:
            self._stt = create_stt_provider(self._config, self._retry_config)
        return self._stt

    # ------------------------------------------------------------------
    # Stage runner
    # ------------------------------------------------------------------

    async def _run_stages(
        self,
        stages: tuple[Stage, ...],
        ctx: ItemContext,
    ) -> None:
        """Execute *stages* in order, recording failures via PipelineError.

        Args:
            stages: Ordered tuple of Stage instances.
            ctx: Shared mutable context for this item.
        """
        for stage in stages:
            try:
                await stage.execute(ctx, self)
            except PipelineError:
                raise
            except Exception as exc:
                raise PipelineError(
                    f"Stage '{stage.name}' failed for {ctx.url}: {exc}",
                    stage=stage.name,
                    source_url=ctx.url,
                ) from exc

    async def _process_item(
        self,
        url: str,
        index: int,
        total: int,
        on_progress: ProgressCallback | None,
    ) -> PodcastResult:
        """Run one link through all stages; never raises for item failures."""
        operation_logger = logger.bind(url=url, item=index + 1, total=total, operation="process")
        operation_logger.info("item_started")
        result = PodcastResult(source_url=url)

        def notify(message: str) -> None:
            if on_progress is not None:
                on_progress(item_step(index, total, message))

        with item_workspace(self._config.work_dir_prefix) as work_dir:
            ctx = ItemContext(
                url=url,
                index=index,
                total=total,
                work_dir=work_dir,
                logger=operation_logger,
                notify=notify,
            )
            try:
                notify(f"Downloading podcast {index + 1}/{total}...")
                await self._run_stages(_ACQUIRE_STAGES, ctx)
                assert ctx.acquired is not None

                result.title = ctx.acquired.metadata.title or ctx.acquired.asset.path.stem
                result.date = ctx.acquired.metadata.date or None
                result.file_size_mb = ctx.acquired.file_size_mb or None

                notify(f"Transcribing podcast {index + 1}/{total}...")
                await self._run_stages(_TRANSCRIBE_STAGES, ctx)

                transcript = ctx.transcript or ""
                result.status = PodcastStatus.SUCCESS
                result.transcript = transcript
                result.word_count = len(transcript.split())
                operation_logger.info("item_completed", word_count=result.word_count)
            except Exception as exc:
                cause = exc.__cause__ if isinstance(exc, PipelineError) and exc.__cause__ else exc
                result.status = (
                    PodcastStatus.TRANSCRIPTION_FAILED if result.title else PodcastStatus.DOWNLOAD_FAILED
                )
                result.error = str(cause)
                operation_logger.error(
                    "item_failed",
                    status=str(result.status),
                    stage=getattr(exc, "stage", None),
                    error=result.error,
                    error_type=type(cause).__name__,
                )
            finally:
                if ctx.acquired is not None:
                    ctx.acquired.asset.path.unlink(missing_ok=True)

        return result

    async def _run(
        self,
        urls: Iterable[str],
        on_progress: ProgressCallback | None,
        on_result: Callable[[PodcastResult], None],
    ) -> None:
        self._config.require_api_key()

        sources = clean_urls(urls)
        total = len(sources)
        operation_logger = logger.bind(operation="batch", total=total)
        operation_logger.info("batch_started")

        def emit(event: ProgressEvent) -> None:
            if on_progress is not None:
                on_progress(event)

        emit(batch_started(total))

        succeeded = 0
        for index, url in enumerate(sources):
            emit(item_started(index, total))
            result = await self._process_item(url, index, total, on_progress)
            if result.status == PodcastStatus.SUCCESS:
                succeeded += 1
            on_result(result)
            emit(item_finished(index, total, succeeded))

        operation_logger.info(
            "batch_completed",
            success_count=succeeded,
            failure_count=total - succeeded,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run_batch(
        self,
        urls: Iterable[str],
        on_progress: ProgressCallback | None = None,
    ) -> list[PodcastResult]:
        """Transcribe every non-blank link in ``urls``, one at a time.

        Args:
            urls: Podcast episode links (YouTube, Spotify, Apple Podcasts, or
                anything yt-dlp understands).
            on_progress: Called with each ProgressEvent as the batch runs.

        Returns:
            One PodcastResult per non-blank link, in input order.

        Raises:
            ConfigurationError: If the selected provider has no API key. Raised
                before any progress event.
        """
        results: list[PodcastResult] = []
        await self._run(urls, on_progress, results.append)
        return results

    async def stream_batch(
        self, urls: Iterable[str]
    ) -> AsyncIterator[ProgressEvent | PodcastResult]:
        """Run a batch, yielding progress events and finished results as they happen.

        Raises:
            ConfigurationError: If the selected provider has no API key.
        """
        self._config.require_api_key()
        queue: asyncio.Queue[ProgressEvent | PodcastResult | None] = asyncio.Queue()

        async def _produce() -> None:
            try:
                await self._run(urls, queue.put_nowait, queue.put_nowait)
            finally:
                queue.put_nowait(None)

        task = asyncio.create_task(_produce())
        try:
            while True:
                item = await queue.get()
                if item is None:
                    break
                yield item
            await task
        finally:
            if not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
