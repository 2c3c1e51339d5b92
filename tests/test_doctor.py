"""Tests for doctor module dependency verification."""

from __future__ import annotations

import importlib.util
import sys
from io import StringIO
from types import SimpleNamespace

import pytest

from podscribe.cli import doctor_cmd, main
from podscribe.core.doctor import (
    DependencyCheck,
    DoctorResult,
    check_dependencies,
)
from podscribe.core.tools import ToolPaths

_real_find_spec = importlib.util.find_spec


@pytest.fixture
def tools_found(mocker):
    return mocker.patch(
        "podscribe.core.doctor.resolve_tool_paths",
        return_value=ToolPaths(ffmpeg="/usr/bin/ffmpeg", ffprobe="/usr/bin/ffprobe"),
    )


@pytest.fixture
def ytdlp_installed(mocker):
    def find_spec(name, *args, **kwargs):
        if name == "yt_dlp":
            return SimpleNamespace(origin="/site-packages/yt_dlp/__init__.py")
        return _real_find_spec(name, *args, **kwargs)

    return mocker.patch("podscribe.core.doctor.importlib.util.find_spec", side_effect=find_spec)


@pytest.fixture
def ytdlp_missing(mocker):
    def find_spec(name, *args, **kwargs):
        if name == "yt_dlp":
            return None
        return _real_find_spec(name, *args, **kwargs)

    return mocker.patch("podscribe.core.doctor.importlib.util.find_spec", side_effect=find_spec)


class TestCheckDependencies:
    """Tests for check_dependencies function."""

    def test_all_dependencies_found(self, config, tools_found, ytdlp_installed) -> None:
        """Test when every tool and the yt-dlp module are available."""
        result = check_dependencies(config)

        assert isinstance(result, DoctorResult)
        assert [check.name for check in result.checks] == ["ffmpeg", "ffprobe", "yt-dlp"]
        assert all(check.available for check in result.checks)
        assert result.all_ok is True

    def test_ffmpeg_missing(self, config, mocker, ytdlp_installed) -> None:
        """Test when ffmpeg is not available."""
        mocker.patch(
            "podscribe.core.doctor.resolve_tool_paths",
            return_value=ToolPaths(ffmpeg=None, ffprobe="/usr/bin/ffprobe"),
        )

        result = check_dependencies(config)

        ffmpeg_check = next(c for c in result.checks if c.name == "ffmpeg")
        assert ffmpeg_check.available is False
        assert ffmpeg_check.path is None
        assert result.all_ok is False

    def test_yt_dlp_missing(self, config, tools_found, ytdlp_missing) -> None:
        """Test when the yt-dlp module is not importable."""
        result = check_dependencies(config)

        ytdlp_check = next(c for c in result.checks if c.name == "yt-dlp")
        assert ytdlp_check.available is False
        assert ytdlp_check.path is None
        assert result.all_ok is False

    def test_paths_reported(self, config, tools_found, ytdlp_installed) -> None:
        result = check_dependencies(config)

        paths = {check.name: check.path for check in result.checks}
        assert paths["ffmpeg"] == "/usr/bin/ffmpeg"
        assert paths["yt-dlp"] == "/site-packages/yt_dlp/__init__.py"


class TestDoctorResult:
    """Tests for DoctorResult dataclass."""

    def test_all_ok_false_when_one_missing(self) -> None:
        checks = [
            DependencyCheck(name="ffmpeg", available=True, path="/usr/bin/ffmpeg"),
            DependencyCheck(name="missing", available=False, path=None),
        ]
        assert DoctorResult(checks=checks).all_ok is False

    def test_optional_missing_is_ok(self) -> None:
        checks = [DependencyCheck(name="extra", available=False, path=None, required=False)]
        assert DoctorResult(checks=checks).all_ok is True

    def test_all_ok_true_when_empty(self) -> None:
        assert DoctorResult(checks=[]).all_ok is True


class TestDoctorCLI:
    """Tests for doctor CLI command."""

    def test_doctor_command_registered(self, monkeypatch) -> None:
        """Test that --help lists the doctor command."""
        stdout = StringIO()
        monkeypatch.setattr(sys, "stdout", stdout)
        monkeypatch.setattr(sys, "argv", ["podscribe", "--help"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert "doctor" in stdout.getvalue().lower()
        assert exc_info.value.code == 0

    @pytest.mark.asyncio
    async def test_doctor_exit_code_0_all_found(self, tools_found, ytdlp_installed) -> None:
        with pytest.raises(SystemExit) as exc_info:
            await doctor_cmd()
        assert exc_info.value.code == 0

    @pytest.mark.asyncio
    async def test_doctor_exit_code_1_missing_dep(self, mocker, ytdlp_installed) -> None:
        mocker.patch(
            "podscribe.core.doctor.resolve_tool_paths",
            return_value=ToolPaths(ffmpeg=None, ffprobe=None),
        )

        with pytest.raises(SystemExit) as exc_info:
            await doctor_cmd()
        assert exc_info.value.code == 1
