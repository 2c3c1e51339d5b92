"""Batch progress model.

Progress is a single fraction in ``[0, 1]`` for the whole batch. Item ``i``
(zero-based) of ``total`` owns the band ``[i/total, (i+1)/total)``; status
messages emitted while the item runs are placed inside that band according
to which step they describe.
"""

from __future__ import annotations

from collections.abc import Callable

from podscribe.core.models import ProgressEvent

INITIAL_PROGRESS = 0.02
DEFAULT_STAGE_OFFSET = 0.5

# Checked in order; the first substring found in the message wins.
STAGE_OFFSETS: tuple[tuple[str, float], ...] = (
    ("Resolving", 0.05),
    ("Looking up", 0.08),
    ("Fetching RSS", 0.12),
    ("metadata", 0.15),
    ("Downloading", 0.20),
    ("Converting", 0.40),
    ("Splitting", 0.45),
    ("Transcribing part", 0.60),
    ("Transcribing", 0.55),
    ("Searching YouTube", 0.10),
)

ProgressCallback = Callable[[ProgressEvent], None]


def stage_offset(message: str) -> float:
    """Position of ``message`` within its item's band."""
    for needle, offset in STAGE_OFFSETS:
        if needle in message:
            return offset
    return DEFAULT_STAGE_OFFSET


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def batch_started(total: int) -> ProgressEvent:
    plural = "" if total == 1 else "s"
    return ProgressEvent(
        current=0,
        total=total,
        progress=INITIAL_PROGRESS,
        message=f"Starting extraction of {total} podcast{plural}...",
    )


def item_started(index: int, total: int) -> ProgressEvent:
    return ProgressEvent(
        current=index,
        total=total,
        progress=_clamp(max(INITIAL_PROGRESS, index / total)),
        message=f"Processing podcast {index + 1}/{total}...",
    )


def item_step(index: int, total: int, message: str) -> ProgressEvent:
    return ProgressEvent(
        current=index,
        total=total,
        progress=_clamp((index + stage_offset(message)) / total),
        message=message,
    )


def item_finished(index: int, total: int, succeeded: int) -> ProgressEvent:
    if index + 1 == total:
        message = f"Done! {succeeded}/{total} transcribed"
    else:
        message = f"Podcast {index + 1}/{total} done"
    return ProgressEvent(
        current=index + 1,
        total=total,
        progress=_clamp((index + 1) / total),
        message=message,
    )
