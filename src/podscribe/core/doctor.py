"""Dependency verification for podscribe.

Checks that the external tools the pipeline shells out to, and the yt-dlp
library, are available.
"""

from __future__ import annotations

import importlib.util
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from podscribe.core.tools import resolve_tool_paths

if TYPE_CHECKING:
    from podscribe.core.config import PodscribeConfig


@dataclass
class DependencyCheck:
    """Result of checking a single dependency.

    Attributes:
        name: Name of the dependency (e.g., "ffmpeg", "yt-dlp")
        available: Whether the dependency was found
        path: Executable path or module origin if found, None otherwise
        required: Whether this dependency is required for operation
    """

    name: str
    available: bool
    path: str | None
    required: bool = True


@dataclass
class DoctorResult:
    """Result of running dependency checks."""

    checks: list[DependencyCheck] = field(default_factory=list)

    @property
    def all_ok(self) -> bool:
        """Return True if all required dependencies are available."""
        return all(check.available or not check.required for check in self.checks)


def _check_module(name: str, module: str) -> DependencyCheck:
    spec = importlib.util.find_spec(module)
    origin = spec.origin if spec is not None else None
    return DependencyCheck(name=name, available=spec is not None, path=origin)


def check_dependencies(config: PodscribeConfig) -> DoctorResult:
    """Check that ffmpeg, ffprobe and yt-dlp are available.

    Args:
        config: Configuration used to locate the tools.

    Returns:
        DoctorResult containing all dependency check results
    """
    tools = resolve_tool_paths(config)
    checks = [
        DependencyCheck(name="ffmpeg", available=tools.ffmpeg is not None, path=tools.ffmpeg),
        DependencyCheck(name="ffprobe", available=tools.ffprobe is not None, path=tools.ffprobe),
        _check_module("yt-dlp", "yt_dlp"),
    ]
    return DoctorResult(checks=checks)
