"""ffmpeg / ffprobe wrappers."""

from __future__ import annotations

import asyncio
import subprocess
from pathlib import Path

from podscribe.core.exceptions import ProviderError
from podscribe.core.logging_config import get_logger
from podscribe.core.tools import ToolPaths

logger = get_logger(__name__)


class MediaTools:
    """Runs ffprobe and ffmpeg at the locations resolved in ``ToolPaths``.

    Every call is a blocking subprocess executed in a worker thread, bounded
    by a timeout. Failures surface as ``ProviderError``.
    """

    def __init__(
        self,
        tools: ToolPaths,
        *,
        bitrate: str = "64k",
        probe_timeout: float = 30.0,
        transcode_timeout: float = 120.0,
    ) -> None:
        self._tools = tools
        self.bitrate = bitrate
        self._probe_timeout = probe_timeout
        self._transcode_timeout = transcode_timeout
        self._logger = logger.bind(provider="ffmpeg")

    @property
    def tools(self) -> ToolPaths:
        return self._tools

    async def probe_duration(self, audio_path: Path) -> float:
        """Return the duration of ``audio_path`` in seconds."""
        ffprobe = self._tools.require_ffprobe()
        result = await self._run(
            [
                ffprobe,
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                str(audio_path),
            ],
            timeout=self._probe_timeout,
            operation="probe_duration",
        )
        try:
            return float(result.stdout.strip())
        except ValueError as e:
            raise ProviderError(
                message=f"ffprobe returned no duration for {audio_path.name}: {result.stdout!r}",
                provider="ffprobe",
                retryable=False,
            ) from e

    async def to_mp3(self, source: Path, dest: Path) -> Path:
        """Re-encode ``source`` into an MP3 at the configured bitrate."""
        ffmpeg = self._tools.require_ffmpeg()
        await self._run(
            [ffmpeg, "-y", "-i", str(source), "-b:a", self.bitrate, str(dest)],
            timeout=self._transcode_timeout,
            operation="to_mp3",
        )
        return dest

    async def extract_segment(
        self, source: Path, dest: Path, start_seconds: float, duration_seconds: float
    ) -> Path:
        """Cut ``[start, start + duration)`` out of ``source`` as a new MP3."""
        ffmpeg = self._tools.require_ffmpeg()
        await self._run(
            [
                ffmpeg,
                "-y",
                "-i",
                str(source),
                "-ss",
                str(start_seconds),
                "-t",
                str(duration_seconds),
                "-acodec",
                "libmp3lame",
                "-b:a",
                self.bitrate,
                str(dest),
            ],
            timeout=self._transcode_timeout,
            operation="extract_segment",
        )
        return dest

    async def _run(
        self, args: list[str], *, timeout: float, operation: str
    ) -> subprocess.CompletedProcess[str]:
        operation_logger = self._logger.bind(operation=operation, tool=Path(args[0]).name)
        operation_logger.debug("subprocess_started", args=args[1:])
        try:
            return await asyncio.to_thread(
                subprocess.run,
                args,
                capture_output=True,
                text=True,
                check=True,
                timeout=timeout,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            operation_logger.error("subprocess_failed", returncode=e.returncode, stderr=stderr[-500:])
            raise ProviderError(
                message=f"{Path(args[0]).name} {operation} failed: {stderr[-200:] or e}",
                provider=Path(args[0]).name,
                retryable=False,
            ) from e
        except subprocess.TimeoutExpired as e:
            operation_logger.error("subprocess_timeout", timeout_seconds=timeout)
            raise ProviderError(
                message=f"{Path(args[0]).name} {operation} timed out after {timeout:.0f}s",
                provider=Path(args[0]).name,
                retryable=True,
            ) from e
        except OSError as e:
            raise ProviderError(
                message=f"{Path(args[0]).name} could not be started: {e}",
                provider=Path(args[0]).name,
                retryable=False,
            ) from e
