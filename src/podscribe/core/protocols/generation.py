from typing import Protocol, runtime_checkable


@runtime_checkable
class ReportGenerator(Protocol):
    provider_name: str

    async def generate(self, prompt: str) -> str: ...
