"""Link classification and resolution.

Turns an input link into something the acquisition stage can download:

- YouTube links are passed through untouched.
- Apple Podcasts links are looked up in the iTunes directory, the podcast
  feed is scanned, and the matching episode enclosure becomes a direct
  audio URL.
- Spotify links are looked up via oEmbed for a title, which is then
  searched on YouTube.
- Everything else is passed through to yt-dlp.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from datetime import datetime
from email.utils import parsedate_to_datetime
from enum import StrEnum
from typing import Any
from urllib.parse import quote, urlparse

from podscribe.core.exceptions import ProviderError, ResolutionError
from podscribe.core.logging_config import get_logger
from podscribe.core.models import EpisodeMetadata, ResolvedSource
from podscribe.source.feed import (
    find_entry_by_title,
    parse_feed_entries,
    select_entry,
    slug_keywords,
)
from podscribe.source.http import HttpClient
from podscribe.source.ytdlp import YtDlpSource

logger = get_logger(__name__)

ITUNES_LOOKUP_URL = "https://itunes.apple.com/lookup"
SPOTIFY_OEMBED_URL = "https://open.spotify.com/oembed"

SPOTIFY_NOT_FOUND = (
    "Could not find this podcast on YouTube. Try pasting the YouTube URL directly."
)

_PODCAST_ID_RE = re.compile(r"id(\d+)")
_EPISODE_ID_RE = re.compile(r"[?&]i=(\d+)")
_ISO_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class LinkKind(StrEnum):
    """Platform an input link belongs to."""

    YOUTUBE = "youtube"
    APPLE_PODCASTS = "apple_podcasts"
    SPOTIFY = "spotify"
    OTHER = "other"


_DOMAINS: tuple[tuple[str, LinkKind], ...] = (
    ("youtube.com", LinkKind.YOUTUBE),
    ("youtu.be", LinkKind.YOUTUBE),
    ("podcasts.apple.com", LinkKind.APPLE_PODCASTS),
    ("spotify.com", LinkKind.SPOTIFY),
)


def classify_url(url: str) -> LinkKind:
    """Classify ``url`` by its host name."""
    host = (urlparse(url.strip()).hostname or "").lower()
    for domain, kind in _DOMAINS:
        if host == domain or host.endswith(f".{domain}"):
            return kind
    return LinkKind.OTHER


def normalize_date(value: str | None) -> str:
    """Format a directory or feed date as ``YYYY-MM-DD``.

    Accepts ``YYYY-MM-DD`` as is, RFC 2822 feed dates and ISO 8601
    timestamps. Returns ``""`` for anything unparseable.
    """
    if not value:
        return ""
    value = value.strip()
    if _ISO_DAY_RE.match(value):
        return value
    try:
        return parsedate_to_datetime(value).date().isoformat()
    except (TypeError, ValueError, IndexError):
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return ""


def passthrough(url: str) -> ResolvedSource:
    return ResolvedSource(resolved_url=url, direct_audio=False)


def _text(value: Any) -> str:
    # iTunes fields are strings when present; anything else counts as missing
    return value if isinstance(value, str) else ""


class URLResolver:
    """Resolves input links into a ``ResolvedSource``.

    Apple Podcasts lookups are best effort: any failure along the way falls
    back to passing the original link through. Spotify links are the one
    case that fails the item, since yt-dlp cannot download them directly.
    """

    def __init__(self, http: HttpClient, ytdlp: YtDlpSource) -> None:
        self._http = http
        self._ytdlp = ytdlp
        self._logger = logger.bind(provider="url_resolver")

    async def resolve(
        self, url: str, notify: Callable[[str], None] | None = None
    ) -> ResolvedSource:
        """Resolve one input link.

        Raises:
            ResolutionError: For Spotify links that cannot be matched to a
                YouTube video.
        """
        kind = classify_url(url)
        operation_logger = self._logger.bind(url=url, kind=str(kind), operation="resolve")
        operation_logger.debug("resolve_started")

        if kind is LinkKind.YOUTUBE:
            return passthrough(url)

        if kind is LinkKind.APPLE_PODCASTS:
            if notify:
                notify("Resolving Apple Podcast...")
            resolved = await self._resolve_apple_podcast(url, notify)
            if resolved is not None:
                operation_logger.info(
                    "resolved_direct_audio",
                    resolved_url=resolved.resolved_url,
                    title=resolved.metadata.title if resolved.metadata else None,
                )
                return resolved
            operation_logger.info("apple_podcast_fallback_passthrough")
            return passthrough(url)

        if kind is LinkKind.SPOTIFY:
            if notify:
                notify("Resolving Spotify link...")
            return await self._resolve_spotify(url, notify)

        return passthrough(url)

    # ------------------------------------------------------------------
    # Apple Podcasts
    # ------------------------------------------------------------------

    async def _resolve_apple_podcast(
        self, url: str, notify: Callable[[str], None] | None
    ) -> ResolvedSource | None:
        podcast_match = _PODCAST_ID_RE.search(url)
        if not podcast_match:
            return None
        podcast_id = podcast_match.group(1)
        episode_match = _EPISODE_ID_RE.search(url)
        episode_id = episode_match.group(1) if episode_match else None

        if notify:
            notify("Looking up podcast on iTunes...")
        results = await self._lookup(podcast_id, "podcast")
        feed_url = _text(results[0].get("feedUrl")) if results else ""
        if not feed_url:
            self._logger.info("itunes_lookup_no_feed", podcast_id=podcast_id)
            return None
        podcast_name = _text(results[0].get("collectionName"))

        if notify:
            notify("Fetching RSS feed...")
        try:
            feed_xml = await self._http.fetch_text(feed_url)
        except ProviderError as e:
            self._logger.warning("feed_fetch_failed", feed_url=feed_url, error=str(e))
            return None

        entries = parse_feed_entries(feed_xml)
        best = select_entry(entries, episode_id=episode_id, slug_words=slug_keywords(url))
        if best is None:
            return None

        audio_url, title, date = best.audio_url, best.title, best.pub_date

        if episode_id:
            episode = await self._lookup_episode(episode_id)
            if episode is not None:
                track_name = _text(episode.get("trackName"))
                release_date = _text(episode.get("releaseDate"))
                episode_url = _text(episode.get("episodeUrl"))
                if episode_url:
                    audio_url = episode_url
                    title = track_name or title
                    date = release_date or date
                elif track_name:
                    by_title = find_entry_by_title(entries, track_name)
                    if by_title is not None:
                        audio_url = by_title.audio_url
                        title = track_name
                        date = release_date or date

        return ResolvedSource(
            resolved_url=audio_url,
            direct_audio=True,
            metadata=EpisodeMetadata(
                title=title,
                date=normalize_date(date),
                podcast_name=podcast_name,
            ),
        )

    async def _lookup(self, item_id: str, entity: str) -> list[dict[str, Any]]:
        """Query the iTunes lookup API and return the object entries of ``results``.

        Any failure, and any payload not shaped like ``{"results": [...]}``,
        reads as no results.
        """
        lookup_url = f"{ITUNES_LOOKUP_URL}?id={item_id}&entity={entity}"
        try:
            payload = json.loads(await self._http.fetch_text(lookup_url))
        except (ProviderError, ValueError) as e:
            self._logger.warning("itunes_lookup_failed", item_id=item_id, entity=entity, error=str(e))
            return []
        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            return []
        return [result for result in results if isinstance(result, dict)]

    async def _lookup_episode(self, episode_id: str) -> dict[str, Any] | None:
        for result in await self._lookup(episode_id, "podcastEpisode"):
            if result.get("wrapperType") == "podcastEpisode":
                return result
        return None

    # ------------------------------------------------------------------
    # Spotify
    # ------------------------------------------------------------------

    async def _resolve_spotify(
        self, url: str, notify: Callable[[str], None] | None
    ) -> ResolvedSource:
        title = await self._spotify_title(url)
        if not title:
            raise ResolutionError(SPOTIFY_NOT_FOUND, url=url)

        if notify:
            notify(f"Searching YouTube: {title[:40]}...")
        try:
            found = await self._ytdlp.search_top_result(f"{title} podcast")
        except Exception as e:
            self._logger.warning("youtube_search_failed", url=url, title=title, error=str(e))
            found = None
        if not found:
            raise ResolutionError(SPOTIFY_NOT_FOUND, url=url)

        self._logger.info("spotify_matched_youtube", url=url, resolved_url=found)
        return passthrough(found)

    async def _spotify_title(self, url: str) -> str | None:
        oembed_url = f"{SPOTIFY_OEMBED_URL}?url={quote(url, safe='')}"
        try:
            payload = json.loads(await self._http.fetch_text(oembed_url))
        except (ProviderError, ValueError) as e:
            self._logger.warning("spotify_oembed_failed", url=url, error=str(e))
            return None
        if not isinstance(payload, dict):
            return None
        return payload.get("title") or None
