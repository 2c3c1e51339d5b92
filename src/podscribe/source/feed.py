"""Podcast feed scanning and episode matching."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from xml.etree import ElementTree

from podscribe.core.logging_config import get_logger

logger = get_logger(__name__)

MIN_SLUG_WORD_LENGTH = 4
SLUG_MATCH_THRESHOLD = 3


@dataclass(frozen=True)
class FeedEntry:
    """One ``<item>`` of a feed that carries an audio enclosure.

    Attributes:
        title: Text of the item's ``<title>``, empty if absent.
        audio_url: The enclosure URL.
        pub_date: Raw ``<pubDate>`` text, empty if absent.
        raw: Serialized markup of the whole item, used for id matching.
    """

    title: str
    audio_url: str
    pub_date: str
    raw: str


def parse_feed_entries(xml_payload: str) -> list[FeedEntry]:
    """Return feed items with an enclosure, in document order.

    Malformed XML yields an empty list.
    """
    try:
        root = ElementTree.fromstring(xml_payload)
    except ElementTree.ParseError as exc:
        logger.warning("feed_parse_failed", error=str(exc))
        return []

    entries: list[FeedEntry] = []
    for item in root.iter("item"):
        enclosure = item.find("enclosure")
        audio_url = enclosure.get("url") if enclosure is not None else None
        if not audio_url:
            continue
        entries.append(
            FeedEntry(
                title=_child_text(item, "title"),
                audio_url=audio_url,
                pub_date=_child_text(item, "pubDate"),
                raw=ElementTree.tostring(item, encoding="unicode"),
            )
        )
    logger.debug("feed_parsed", entries=len(entries))
    return entries


def _child_text(item: ElementTree.Element, tag: str) -> str:
    child = item.find(tag)
    if child is None:
        return ""
    return "".join(child.itertext()).strip()


def slug_keywords(url: str) -> list[str]:
    """Extract matching keywords from the slug of a podcast directory URL.

    ``https://podcasts.apple.com/us/podcast/the-big-interview/id123`` gives
    ``["interview"]``; words of three letters or fewer are dropped.
    """
    if "/podcast/" not in url:
        return []
    slug = url.split("/podcast/", 1)[1].split("/id", 1)[0]
    words = slug.replace("-", " ").lower().split()
    return [w for w in words if len(w) >= MIN_SLUG_WORD_LENGTH]


def select_entry(
    entries: Sequence[FeedEntry],
    *,
    episode_id: str | None,
    slug_words: Sequence[str],
) -> FeedEntry | None:
    """Pick the entry that best matches the requested episode.

    First match wins, in document order: an entry whose markup contains
    ``episode_id``; an entry whose title holds at least
    ``min(3, len(slug_words))`` slug words. Failing both, the first entry.
    """
    fallback: FeedEntry | None = None
    needed = min(SLUG_MATCH_THRESHOLD, len(slug_words))

    for entry in entries:
        if episode_id and episode_id in entry.raw:
            return entry

        if slug_words:
            title = entry.title.lower()
            matches = sum(1 for word in slug_words if word in title)
            if matches >= needed:
                return entry

        if fallback is None:
            fallback = entry

    return fallback


def find_entry_by_title(entries: Sequence[FeedEntry], title: str) -> FeedEntry | None:
    """First entry whose title contains ``title``, case-insensitively."""
    needle = title.lower()
    for entry in entries:
        if needle in entry.title.lower():
            return entry
    return None
