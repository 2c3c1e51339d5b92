"""yt-dlp option builders."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from podscribe.core.models import BYTES_PER_MB
from podscribe.core.tools import ToolPaths


def bitrate_kbps(bitrate: str) -> str:
    """Turn an ffmpeg bitrate such as ``"64k"`` into yt-dlp's quality value ``"64"``."""
    value = bitrate.strip().lower()
    return value[:-1] if value.endswith("k") else value


def build_base_opts(tools: ToolPaths, *, socket_timeout: float | None = None) -> dict[str, Any]:
    """Options shared by every yt-dlp call.

    Playlist expansion is always off: one input link is one episode.
    """
    opts: dict[str, Any] = {
        "quiet": True,
        "no_warnings": True,
        "noplaylist": True,
        "noprogress": True,
    }
    if tools.ffmpeg_location:
        opts["ffmpeg_location"] = tools.ffmpeg_location
    if socket_timeout:
        opts["socket_timeout"] = socket_timeout
    return opts


def build_metadata_opts(tools: ToolPaths, *, socket_timeout: float | None = None) -> dict[str, Any]:
    opts = build_base_opts(tools, socket_timeout=socket_timeout)
    opts["skip_download"] = True
    return opts


def build_search_opts(tools: ToolPaths, *, socket_timeout: float | None = None) -> dict[str, Any]:
    opts = build_base_opts(tools, socket_timeout=socket_timeout)
    opts.update(
        {
            "skip_download": True,
            "extract_flat": "in_playlist",
            # search results are a playlist; noplaylist would not apply anyway
            "noplaylist": False,
        }
    )
    return opts


def build_download_opts(
    tools: ToolPaths,
    output_dir: Path,
    *,
    bitrate: str = "64k",
    max_filesize_mb: int = 200,
    socket_timeout: float | None = None,
) -> dict[str, Any]:
    """Options for extracting one episode to a single MP3 at ``bitrate``."""
    opts = build_base_opts(tools, socket_timeout=socket_timeout)
    opts.update(
        {
            "format": "bestaudio/best",
            "outtmpl": str(output_dir / "%(title)s.%(ext)s"),
            "max_filesize": max_filesize_mb * BYTES_PER_MB,
            "postprocessors": [
                {
                    "key": "FFmpegExtractAudio",
                    "preferredcodec": "mp3",
                    "preferredquality": bitrate_kbps(bitrate),
                }
            ],
            "postprocessor_args": {"extractaudio": ["-b:a", bitrate]},
        }
    )
    return opts


def normalize_upload_date(value: str | None) -> str:
    """``"20240131"`` -> ``"2024-01-31"``; anything else -> ``""``."""
    if value and len(value) == 8 and value.isdigit():
        return f"{value[:4]}-{value[4:6]}-{value[6:]}"
    return ""
