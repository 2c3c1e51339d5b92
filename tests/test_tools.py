"""Tests for external tool discovery."""

import os
import stat

import pytest

from podscribe.core.exceptions import ProviderError
from podscribe.core.tools import ToolPaths, build_search_path, find_tool, resolve_tool_paths


def make_executable(directory, name):
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


class TestBuildSearchPath:
    def test_existing_extra_dirs_come_first(self, tmp_path):
        extra = tmp_path / "bin"
        extra.mkdir()

        result = build_search_path([str(extra)], base_path=os.pathsep.join(["/usr/bin", "/bin"]))

        assert result.split(os.pathsep) == [str(extra), "/usr/bin", "/bin"]

    def test_missing_extra_dirs_are_skipped(self, tmp_path):
        result = build_search_path([str(tmp_path / "nope")], base_path="/usr/bin")
        assert result == "/usr/bin"

    def test_duplicates_are_removed(self, tmp_path):
        result = build_search_path(
            [str(tmp_path), str(tmp_path)],
            base_path=os.pathsep.join([str(tmp_path), "/usr/bin"]),
        )
        assert result.split(os.pathsep) == [str(tmp_path), "/usr/bin"]


class TestFindTool:
    def test_explicit_path_wins(self, tmp_path):
        explicit = make_executable(tmp_path, "my-ffmpeg")
        assert find_tool("ffmpeg", str(explicit), search_path="") == str(explicit)

    def test_missing_explicit_path_falls_back_to_search(self, tmp_path):
        make_executable(tmp_path, "ffmpeg")
        found = find_tool("ffmpeg", str(tmp_path / "missing"), search_path=str(tmp_path))
        assert found == str(tmp_path / "ffmpeg")

    def test_not_found(self, tmp_path):
        assert find_tool("ffprobe", None, search_path=str(tmp_path)) is None


class TestResolveToolPaths:
    def test_finds_tools_in_extra_dirs(self, config, tmp_path):
        make_executable(tmp_path, "ffmpeg")
        make_executable(tmp_path, "ffprobe")
        cfg = config.model_copy(update={"extra_tool_dirs": [str(tmp_path)]})

        paths = resolve_tool_paths(cfg)

        assert paths.ffmpeg == str(tmp_path / "ffmpeg")
        assert paths.ffprobe == str(tmp_path / "ffprobe")

    def test_process_environment_is_not_modified(self, config, tmp_path):
        before = dict(os.environ)
        cfg = config.model_copy(update={"extra_tool_dirs": [str(tmp_path)]})

        resolve_tool_paths(cfg)

        assert dict(os.environ) == before


class TestToolPaths:
    def test_ffmpeg_location_is_parent_directory(self, tool_paths):
        assert tool_paths.ffmpeg_location == "/usr/bin"

    def test_ffmpeg_location_none_when_missing(self):
        assert ToolPaths(ffmpeg=None, ffprobe=None).ffmpeg_location is None

    def test_require_raises_provider_error(self):
        paths = ToolPaths(ffmpeg=None, ffprobe=None)

        with pytest.raises(ProviderError, match="ffmpeg is not installed"):
            paths.require_ffmpeg()
        with pytest.raises(ProviderError, match="ffprobe is not installed") as exc_info:
            paths.require_ffprobe()

        assert exc_info.value.retryable is False

    def test_require_returns_path(self, tool_paths):
        assert tool_paths.require_ffmpeg() == "/usr/bin/ffmpeg"
        assert tool_paths.require_ffprobe() == "/usr/bin/ffprobe"
