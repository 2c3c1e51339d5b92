"""Pydantic data models for podscribe."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

BYTES_PER_MB = 1024 * 1024


class PodcastStatus(StrEnum):
    """Outcome of processing one input link."""

    PENDING = "pending"
    SUCCESS = "success"
    DOWNLOAD_FAILED = "download_failed"
    TRANSCRIPTION_FAILED = "transcription_failed"


class EpisodeMetadata(BaseModel):
    """Best-effort episode metadata gathered while resolving or downloading."""

    title: str = ""
    date: str = ""
    podcast_name: str = ""


class ResolvedSource(BaseModel):
    """A link turned into either a direct audio URL or a passthrough URL."""

    model_config = ConfigDict(frozen=True)

    resolved_url: str
    direct_audio: bool = False
    metadata: EpisodeMetadata | None = None


class AudioAsset(BaseModel):
    """A local audio file owned by the item currently being processed."""

    path: Path
    size_bytes: int

    @property
    def size_mb(self) -> float:
        return self.size_bytes / BYTES_PER_MB

    @classmethod
    def from_path(cls, path: Path) -> AudioAsset:
        return cls(path=path, size_bytes=path.stat().st_size)


class AcquiredAudio(BaseModel):
    """Result of the acquisition stage."""

    asset: AudioAsset
    metadata: EpisodeMetadata
    file_size_mb: float


class Chunk(BaseModel):
    """A time-bounded slice of an audio asset, sized for the STT backend."""

    path: Path
    sequence_index: int
    # True when the chunk is the unsplit original asset rather than a split segment
    is_original: bool = False


class PodcastResult(BaseModel):
    """Per-link record returned by a batch run."""

    source_url: str
    status: PodcastStatus = PodcastStatus.PENDING
    transcript: str | None = None
    error: str | None = None
    title: str | None = None
    date: str | None = None
    file_size_mb: float | None = None
    word_count: int | None = None


class ProgressEvent(BaseModel):
    """Progress notification emitted during a batch run."""

    current: int
    total: int
    progress: float = Field(ge=0.0, le=1.0)
    message: str
