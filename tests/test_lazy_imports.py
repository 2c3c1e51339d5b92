import builtins
import importlib
import sys

import pytest


def _block_import(monkeypatch, dep_name: str) -> None:
    for loaded in [m for m in sys.modules if m == dep_name or m.startswith(f"{dep_name}.")]:
        monkeypatch.delitem(sys.modules, loaded)

    original_import = builtins.__import__

    def guarded_import(name, globals=None, locals=None, fromlist=(), level=0):
        if name == dep_name or name.startswith(f"{dep_name}."):
            raise ImportError(f"No module named {dep_name}")
        return original_import(name, globals, locals, fromlist, level)

    monkeypatch.setattr(builtins, "__import__", guarded_import)


@pytest.mark.parametrize(
    ("module_name", "dep_name"),
    [
        ("podscribe.source.http", "aiohttp"),
        ("podscribe.source.url", "aiohttp"),
        ("podscribe.source.ytdlp", "yt_dlp"),
        ("podscribe.source.resolver", "yt_dlp"),
        ("podscribe.core.provider_factory", "openai"),
        ("podscribe.core.provider_factory", "groq"),
        ("podscribe.core.provider_factory", "anthropic"),
        ("podscribe.report", "anthropic"),
        ("podscribe.pipeline", "openai"),
    ],
)
def test_lazy_import_module_imports_without_optional_dependency(
    module_name: str, dep_name: str, monkeypatch
) -> None:
    """Importing these modules should not require the provider libraries."""
    _block_import(monkeypatch, dep_name)

    if module_name in sys.modules:
        monkeypatch.delitem(sys.modules, module_name)

    # Importing the module should not raise even if dependency is missing
    importlib.import_module(module_name)


@pytest.mark.parametrize(
    ("attr", "dep_name", "hint"),
    [
        ("OpenAITranscriber", "openai", "pip install openai"),
        ("GroqTranscriber", "groq", "pip install groq"),
    ],
)
def test_package_attribute_reports_missing_dependency(attr, dep_name, hint, monkeypatch) -> None:
    import podscribe.transcribe as transcribe

    for module in ("podscribe.transcribe.openai", "podscribe.transcribe.groq"):
        if module in sys.modules:
            monkeypatch.delitem(sys.modules, module)
    _block_import(monkeypatch, dep_name)

    with pytest.raises(ImportError, match=hint):
        getattr(transcribe, attr)


@pytest.mark.parametrize(
    ("attr", "dep_name", "hint"),
    [
        ("OpenAIGenerator", "openai", "pip install openai"),
        ("GroqGenerator", "groq", "pip install groq"),
        ("AnthropicGenerator", "anthropic", "pip install anthropic"),
    ],
)
def test_generate_attribute_reports_missing_dependency(attr, dep_name, hint, monkeypatch) -> None:
    import podscribe.generate as generate

    for module in (
        "podscribe.generate.openai",
        "podscribe.generate.groq",
        "podscribe.generate.anthropic",
    ):
        if module in sys.modules:
            monkeypatch.delitem(sys.modules, module)
    _block_import(monkeypatch, dep_name)

    with pytest.raises(ImportError, match=hint):
        getattr(generate, attr)


def test_unknown_attribute() -> None:
    import podscribe.source as source

    with pytest.raises(AttributeError):
        source.NotAThing  # noqa: B018
