"""Tests for the ffmpeg / ffprobe wrappers."""

import subprocess
from pathlib import Path

import pytest

from podscribe.core.exceptions import ProviderError
from podscribe.core.tools import ToolPaths
from podscribe.source.transcode import MediaTools


def completed(stdout: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr="")


@pytest.fixture
def media(tool_paths) -> MediaTools:
    return MediaTools(tool_paths, bitrate="64k", probe_timeout=5, transcode_timeout=10)


class TestProbeDuration:
    @pytest.mark.asyncio
    async def test_parses_seconds(self, media, mocker):
        run = mocker.patch("subprocess.run", return_value=completed("1234.56\n"))

        duration = await media.probe_duration(Path("/tmp/episode.mp3"))

        assert duration == 1234.56
        args = run.call_args.args[0]
        assert args[0] == "/usr/bin/ffprobe"
        assert "format=duration" in args
        assert args[-1] == "/tmp/episode.mp3"
        assert run.call_args.kwargs["timeout"] == 5

    @pytest.mark.asyncio
    async def test_unparseable_output(self, media, mocker):
        mocker.patch("subprocess.run", return_value=completed("N/A\n"))

        with pytest.raises(ProviderError, match="no duration"):
            await media.probe_duration(Path("/tmp/episode.mp3"))

    @pytest.mark.asyncio
    async def test_missing_ffprobe(self, mocker):
        run = mocker.patch("subprocess.run")
        media = MediaTools(ToolPaths(ffmpeg="/usr/bin/ffmpeg", ffprobe=None))

        with pytest.raises(ProviderError, match="ffprobe is not installed"):
            await media.probe_duration(Path("/tmp/episode.mp3"))
        run.assert_not_called()


class TestTranscode:
    @pytest.mark.asyncio
    async def test_to_mp3_uses_bitrate(self, media, mocker):
        run = mocker.patch("subprocess.run", return_value=completed())

        dest = await media.to_mp3(Path("/tmp/in.m4a"), Path("/tmp/out.mp3"))

        assert dest == Path("/tmp/out.mp3")
        assert run.call_args.args[0] == [
            "/usr/bin/ffmpeg", "-y", "-i", "/tmp/in.m4a", "-b:a", "64k", "/tmp/out.mp3",
        ]
        assert run.call_args.kwargs["timeout"] == 10

    @pytest.mark.asyncio
    async def test_extract_segment_arguments(self, media, mocker):
        run = mocker.patch("subprocess.run", return_value=completed())

        await media.extract_segment(Path("/tmp/in.mp3"), Path("/tmp/c1.mp3"), 600.0, 600.0)

        args = run.call_args.args[0]
        assert args[args.index("-ss") + 1] == "600.0"
        assert args[args.index("-t") + 1] == "600.0"
        assert args[args.index("-acodec") + 1] == "libmp3lame"
        assert args[-1] == "/tmp/c1.mp3"

    @pytest.mark.asyncio
    async def test_nonzero_exit_becomes_provider_error(self, media, mocker):
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(1, ["ffmpeg"], stderr="Invalid data found"),
        )

        with pytest.raises(ProviderError, match="Invalid data found") as exc_info:
            await media.to_mp3(Path("/tmp/in.m4a"), Path("/tmp/out.mp3"))

        assert exc_info.value.provider == "ffmpeg"
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_timeout_becomes_retryable_provider_error(self, media, mocker):
        mocker.patch("subprocess.run", side_effect=subprocess.TimeoutExpired(["ffmpeg"], 10))

        with pytest.raises(ProviderError, match="timed out") as exc_info:
            await media.to_mp3(Path("/tmp/in.m4a"), Path("/tmp/out.mp3"))

        assert exc_info.value.retryable is True
