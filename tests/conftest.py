"""Shared pytest fixtures for the podscribe test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from podscribe.core.config import PodscribeConfig
from podscribe.core.models import (
    AcquiredAudio,
    AudioAsset,
    Chunk,
    EpisodeMetadata,
    ResolvedSource,
)
from podscribe.core.tools import ToolPaths

# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config() -> PodscribeConfig:
    """A config with a Groq key that ignores any local .env file."""
    return PodscribeConfig(
        _env_file=None,
        groq_api_key="gsk_test_key_for_unit_tests",
        log_level="WARNING",
    )


@pytest.fixture
def tool_paths() -> ToolPaths:
    return ToolPaths(ffmpeg="/usr/bin/ffmpeg", ffprobe="/usr/bin/ffprobe")


# ============================================================================
# Fake Collaborators
# ============================================================================


class FakeSTT:
    """STT provider returning canned text per file name."""

    provider_name = "fake"

    def __init__(self, texts: dict[str, str] | None = None, default: str = "hello world") -> None:
        self.texts = texts or {}
        self.default = default
        self.calls: list[Path] = []
        self.existing_at_call: list[bool] = []

    async def transcribe(self, audio_path: Path, language: str | None = None) -> str:
        self.calls.append(audio_path)
        self.existing_at_call.append(audio_path.exists())
        return self.texts.get(audio_path.name, self.default)


class FailingSTT(FakeSTT):
    """STT provider that fails on the n-th call (1-based)."""

    def __init__(self, fail_on: int = 1, message: str = "rate limited") -> None:
        super().__init__()
        self.fail_on = fail_on
        self.message = message

    async def transcribe(self, audio_path: Path, language: str | None = None) -> str:
        self.calls.append(audio_path)
        if len(self.calls) == self.fail_on:
            raise RuntimeError(self.message)
        return self.default


class FakeResolver:
    """Passes every link through, except those mapped to an exception."""

    def __init__(self, errors: dict[str, Exception] | None = None) -> None:
        self.errors = errors or {}
        self.calls: list[str] = []

    async def resolve(
        self, url: str, notify: Callable[[str], None] | None = None
    ) -> ResolvedSource:
        self.calls.append(url)
        if notify:
            notify("Resolving link...")
        if url in self.errors:
            raise self.errors[url]
        return ResolvedSource(resolved_url=url, direct_audio=False)


class FakeAcquirer:
    """Writes a small file named after the link into the work directory."""

    def __init__(
        self,
        *,
        size_bytes: int = 2048,
        errors: dict[str, Exception] | None = None,
        titles: dict[str, str] | None = None,
    ) -> None:
        self.size_bytes = size_bytes
        self.errors = errors or {}
        self.titles = titles or {}
        self.work_dirs: list[Path] = []

    async def acquire(
        self,
        resolved: ResolvedSource,
        work_dir: Path,
        notify: Callable[[str], None] | None = None,
    ) -> AcquiredAudio:
        self.work_dirs.append(work_dir)
        if notify:
            notify("Downloading audio...")
        if resolved.resolved_url in self.errors:
            raise self.errors[resolved.resolved_url]
        path = work_dir / "episode.mp3"
        path.write_bytes(b"\0" * self.size_bytes)
        title = self.titles.get(resolved.resolved_url, "Episode")
        return AcquiredAudio(
            asset=AudioAsset(path=path, size_bytes=self.size_bytes),
            metadata=EpisodeMetadata(title=title, date="2024-01-31"),
            file_size_mb=round(self.size_bytes / (1024 * 1024), 2),
        )


class FakeSplitter:
    """Returns the asset as a single chunk."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error

    async def split(
        self, asset: AudioAsset, notify: Callable[[str], None] | None = None
    ) -> list[Chunk]:
        if self.error is not None:
            raise self.error
        return [Chunk(path=asset.path, sequence_index=0, is_original=True)]


class FakeGenerator:
    """Report generator that records prompts and returns canned text."""

    provider_name = "fake"

    def __init__(
        self, reply: str = "## Summary\nThe episodes agree.", error: Exception | None = None
    ) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_stt() -> FakeSTT:
    return FakeSTT()


@pytest.fixture
def fake_resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def fake_acquirer() -> FakeAcquirer:
    return FakeAcquirer()


@pytest.fixture
def fake_splitter() -> FakeSplitter:
    return FakeSplitter()


@pytest.fixture
def mock_http() -> MagicMock:
    """HttpClient stand-in; set ``fetch_text.side_effect`` per test."""
    http = MagicMock()
    http.fetch_text = AsyncMock()
    http.download_file = AsyncMock()
    return http


@pytest.fixture
def mock_ytdlp() -> MagicMock:
    """YtDlpSource stand-in with async methods."""
    ytdlp = MagicMock()
    ytdlp.get_metadata = AsyncMock(return_value=None)
    ytdlp.search_top_result = AsyncMock(return_value=None)
    ytdlp.download = AsyncMock()
    return ytdlp


@pytest.fixture
def messages() -> list[str]:
    """Collects notify() messages."""
    return []
