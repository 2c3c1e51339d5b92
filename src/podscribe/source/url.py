"""Direct audio URL source (enclosures resolved from podcast feeds)."""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path

from podscribe.core.logging_config import get_logger
from podscribe.source.http import HttpClient
from podscribe.source.transcode import MediaTools

logger = get_logger(__name__)

_EXTENSION_RE = re.compile(r"\.(mp3|m4a|wav|aac)", re.IGNORECASE)
_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9 _-]")

MAX_BASENAME_LENGTH = 80
DEFAULT_BASENAME = "podcast"


def safe_basename(title: str | None) -> str:
    """Filesystem-safe base name derived from an episode title."""
    name = _UNSAFE_CHARS_RE.sub("", title or "")[:MAX_BASENAME_LENGTH].strip()
    return name or DEFAULT_BASENAME


def guess_extension(url: str) -> str:
    """Audio extension named in ``url``, ``mp3`` if none is recognizable."""
    match = _EXTENSION_RE.search(url)
    return match.group(1).lower() if match else "mp3"


class URLSource:
    """Downloads a direct audio URL and re-encodes it to the target MP3.

    The download is always re-encoded, even if it already is an MP3, so every
    asset ends up at the same bitrate.
    """

    def __init__(self, http: HttpClient, media: MediaTools) -> None:
        self._http = http
        self._media = media
        self._logger = logger.bind(provider="url_source")

    async def download(
        self,
        url: str,
        output_dir: Path,
        title: str | None = None,
        notify: Callable[[str], None] | None = None,
    ) -> Path:
        """Download ``url`` into ``output_dir`` and return the MP3 path."""
        base = safe_basename(title)
        raw_path = output_dir / f"{base}.{guess_extension(url)}"
        mp3_path = output_dir / f"{base}.mp3"

        operation_logger = self._logger.bind(url=url, raw_path=str(raw_path), operation="download")
        operation_logger.info("url_download_started")
        await self._http.download_file(url, raw_path)

        if notify:
            notify(f"Converting to {self._media.bitrate} mp3...")
        await self.convert(raw_path, mp3_path)
        operation_logger.info("url_download_completed", mp3_path=str(mp3_path))
        return mp3_path

    async def convert(self, raw_path: Path, mp3_path: Path) -> Path:
        """Re-encode ``raw_path`` to ``mp3_path`` and remove the raw file."""
        if raw_path == mp3_path:
            tmp_path = raw_path.with_name(raw_path.name + ".tmp.mp3")
            await self._media.to_mp3(raw_path, tmp_path)
            raw_path.unlink(missing_ok=True)
            tmp_path.replace(mp3_path)
        else:
            await self._media.to_mp3(raw_path, mp3_path)
            raw_path.unlink(missing_ok=True)
        return mp3_path
