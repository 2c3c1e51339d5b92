"""LLM-written reports over the transcripts of a batch.

Only successful results are summarized, and each transcript is cut to a
short preview before it goes into the prompt. The reply is Markdown with
``##`` section headers; turning it into a PDF or any other layout is left
to external tools.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterable
from datetime import date
from pathlib import Path
from typing import Any

from podscribe.core.logging_config import Timer, get_logger
from podscribe.core.models import PodcastResult, PodcastStatus
from podscribe.core.protocols import ReportGenerator

logger = get_logger(__name__)

PREVIEW_CHARS = 500
REPORT_TITLE = "Podcast Report"
REPORT_INSTRUCTIONS = (
    "Write a professional report. Include sections with clear headers using ## markdown. "
    "Be thorough and analytical. Do NOT use ** bold markers in the body text."
)

# Markers hug the text on one line, so "* item" bullets are left alone;
# underscores must sit at word edges so snake_case names survive
_EMPHASIS_PATTERNS = (
    re.compile(r"\*\*(?=\S)([^*\n]+?)(?<=\S)\*\*"),
    re.compile(r"\*(?=\S)([^*\n]+?)(?<=\S)\*"),
    re.compile(r"(?<!\w)__(?=\S)([^_\n]+?)(?<=\S)__(?!\w)"),
    re.compile(r"(?<!\w)_(?=\S)([^_\n]+?)(?<=\S)_(?!\w)"),
)


def summarize_results(results: Iterable[PodcastResult]) -> list[dict[str, Any]]:
    """Per-episode summaries of the successful results, in input order."""
    return [
        {
            "title": result.title,
            "date": result.date,
            "word_count": result.word_count,
            "transcript_preview": (result.transcript or "")[:PREVIEW_CHARS],
        }
        for result in results
        if result.status == PodcastStatus.SUCCESS
    ]


def build_report_prompt(user_prompt: str, results: Iterable[PodcastResult]) -> str:
    """The single user message sent to the LLM."""
    summary = json.dumps(summarize_results(results), indent=2, ensure_ascii=False)
    return (
        f"{user_prompt}\n\n"
        "Based on the following podcast transcription data:\n\n"
        f"{summary}\n\n"
        f"{REPORT_INSTRUCTIONS}"
    )


def clean_markdown(text: str) -> str:
    """Strip bold and italic markers, keeping the enclosed text."""
    for pattern in _EMPHASIS_PATTERNS:
        text = pattern.sub(r"\1", text)
    return text


async def generate_report(
    results: list[PodcastResult],
    user_prompt: str,
    generator: ReportGenerator,
    notify: Callable[[str], None] | None = None,
) -> str:
    """Ask ``generator`` for a report on the successful ``results``.

    Raises:
        ValueError: If no result succeeded; there is nothing to report on.
        ProviderError: If the LLM request fails after retries.
    """
    successful = sum(1 for r in results if r.status == PodcastStatus.SUCCESS)
    if not successful:
        raise ValueError("No successful transcripts to report on")

    if notify:
        notify(f"Analyzing with LLM ({generator.provider_name})...")
    prompt = build_report_prompt(user_prompt, results)
    with Timer(logger, "report_generate", provider=generator.provider_name, episodes=successful) as timer:
        text = await generator.generate(prompt)
        timer.complete(report_chars=len(text))
    return text


def render_report_markdown(
    body: str, results: list[PodcastResult], generated_on: date | None = None
) -> str:
    """Title, a one-line batch summary and the report body as one document."""
    generated_on = generated_on or date.today()
    successful = sum(1 for r in results if r.status == PodcastStatus.SUCCESS)
    total_words = sum(r.word_count or 0 for r in results)
    subtitle = (
        f"Generated on {generated_on.isoformat()} · {len(results)} podcasts · "
        f"{successful} transcribed · {total_words:,} words"
    )
    return f"# {REPORT_TITLE}\n\n_{subtitle}_\n\n{clean_markdown(body).strip()}\n"


def write_report(text: str, path: str | Path) -> Path:
    path = Path(path)
    path.write_text(text, encoding="utf-8")
    logger.info("report_written", path=str(path), chars=len(text))
    return path
