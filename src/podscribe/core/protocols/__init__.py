"""Collaborator protocols used by the pipeline and the report writer."""

from .audio_source import AudioSourceProvider
from .generation import ReportGenerator
from .resolver import SourceResolver
from .stt import STTProvider

__all__ = [
    "AudioSourceProvider",
    "ReportGenerator",
    "STTProvider",
    "SourceResolver",
]
