"""Tests for result export."""

import json

from podscribe import PodcastResult, PodcastStatus, write_results_json
from podscribe.export import results_to_records


def sample_results() -> list[PodcastResult]:
    return [
        PodcastResult(
            source_url="https://youtu.be/a",
            title="Épisode un",
            date="2024-01-31",
            file_size_mb=12.5,
            transcript="bonjour tout le monde",
            word_count=4,
            status=PodcastStatus.SUCCESS,
        ),
        PodcastResult(
            source_url="https://open.spotify.com/episode/x",
            status=PodcastStatus.DOWNLOAD_FAILED,
            error="Could not find this podcast on YouTube. Try pasting the YouTube URL directly.",
        ),
    ]


def test_records_keep_order_and_status_strings():
    records = results_to_records(sample_results())

    assert [r["source_url"] for r in records] == [
        "https://youtu.be/a",
        "https://open.spotify.com/episode/x",
    ]
    assert records[0]["status"] == "success"
    assert records[1]["status"] == "download_failed"
    assert records[1]["transcript"] is None


def test_write_results_json(tmp_path):
    path = write_results_json(sample_results(), tmp_path / "results.json")

    text = path.read_text(encoding="utf-8")
    assert "Épisode un" in text
    data = json.loads(text)
    assert len(data) == 2
    assert data[0]["word_count"] == 4


def test_write_empty_results(tmp_path):
    path = write_results_json([], str(tmp_path / "empty.json"))
    assert json.loads(path.read_text(encoding="utf-8")) == []
