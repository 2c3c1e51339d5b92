from collections.abc import Callable
from typing import Protocol, runtime_checkable

from podscribe.core.models import ResolvedSource


@runtime_checkable
class SourceResolver(Protocol):
    async def resolve(
        self, url: str, notify: Callable[[str], None] | None = None
    ) -> ResolvedSource: ...
