"""Location of the external media tools.

Tools are looked up once, at pipeline construction, and the resulting
``ToolPaths`` is passed to whatever shells out to them. The process
environment is left untouched.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from podscribe.core.exceptions import ProviderError
from podscribe.core.logging_config import get_logger

if TYPE_CHECKING:
    from podscribe.core.config import PodscribeConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class ToolPaths:
    """Resolved executable paths.

    Attributes:
        ffmpeg: Full path to ffmpeg, or None if it was not found
        ffprobe: Full path to ffprobe, or None if it was not found
    """

    ffmpeg: str | None
    ffprobe: str | None

    @property
    def ffmpeg_location(self) -> str | None:
        """Directory holding ffmpeg, in the form yt-dlp's ``ffmpeg_location`` expects."""
        if not self.ffmpeg:
            return None
        return str(Path(self.ffmpeg).parent)

    def require_ffmpeg(self) -> str:
        if not self.ffmpeg:
            raise ProviderError(
                message=(
                    "ffmpeg is not installed or not in PATH. "
                    "Install ffmpeg or set PODSCRIBE_FFMPEG_PATH."
                ),
                provider="ffmpeg",
                retryable=False,
            )
        return self.ffmpeg

    def require_ffprobe(self) -> str:
        if not self.ffprobe:
            raise ProviderError(
                message=(
                    "ffprobe is not installed or not in PATH. "
                    "Install ffmpeg or set PODSCRIBE_FFPROBE_PATH."
                ),
                provider="ffprobe",
                retryable=False,
            )
        return self.ffprobe


def build_search_path(extra_dirs: list[str], base_path: str | None = None) -> str:
    """Join existing ``extra_dirs`` in front of ``base_path`` (defaults to $PATH)."""
    base = os.environ.get("PATH", "") if base_path is None else base_path
    dirs: list[str] = []
    for entry in extra_dirs:
        expanded = str(Path(entry).expanduser())
        if Path(expanded).is_dir() and expanded not in dirs:
            dirs.append(expanded)
    dirs.extend(d for d in base.split(os.pathsep) if d and d not in dirs)
    return os.pathsep.join(dirs)


def find_tool(name: str, explicit: str | None, search_path: str) -> str | None:
    """Find one executable: explicit path first, then ``search_path``."""
    if explicit:
        candidate = Path(explicit).expanduser()
        if candidate.is_file():
            return str(candidate)
        logger.warning("explicit_tool_path_missing", tool=name, path=explicit)
    return shutil.which(name, path=search_path)


def resolve_tool_paths(config: PodscribeConfig) -> ToolPaths:
    """Resolve ffmpeg and ffprobe locations from config.

    Args:
        config: podscribe configuration

    Returns:
        ToolPaths with whatever could be found
    """
    search_path = build_search_path(config.extra_tool_dirs)
    paths = ToolPaths(
        ffmpeg=find_tool("ffmpeg", config.ffmpeg_path, search_path),
        ffprobe=find_tool("ffprobe", config.ffprobe_path, search_path),
    )
    logger.debug("tool_paths_resolved", ffmpeg=paths.ffmpeg, ffprobe=paths.ffprobe)
    return paths
