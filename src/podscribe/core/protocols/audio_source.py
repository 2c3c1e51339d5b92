from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from podscribe.core.models import AcquiredAudio, ResolvedSource


@runtime_checkable
class AudioSourceProvider(Protocol):
    async def acquire(
        self,
        resolved: ResolvedSource,
        work_dir: Path,
        notify: Callable[[str], None] | None = None,
    ) -> AcquiredAudio: ...
