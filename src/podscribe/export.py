"""Result export."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from podscribe.core.logging_config import get_logger
from podscribe.core.models import PodcastResult

logger = get_logger(__name__)


def results_to_records(results: Iterable[PodcastResult]) -> list[dict[str, Any]]:
    """Plain JSON-compatible dicts, one per result, in order."""
    return [result.model_dump(mode="json") for result in results]


def write_results_json(results: Iterable[PodcastResult], path: str | Path) -> Path:
    """Write ``results`` to ``path`` as indented UTF-8 JSON.

    Returns:
        The path written.
    """
    path = Path(path)
    records = results_to_records(results)
    path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("results_exported", path=str(path), count=len(records))
    return path


def read_results_json(path: str | Path) -> list[PodcastResult]:
    """Load results previously written by ``write_results_json``.

    Raises:
        ValueError: If the file is not a JSON list of result records.
    """
    path = Path(path)
    records = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected a JSON list of results")
    results = [PodcastResult.model_validate(record) for record in records]
    logger.info("results_loaded", path=str(path), count=len(results))
    return results
