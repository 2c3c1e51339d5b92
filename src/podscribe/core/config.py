"""Configuration management for podscribe using pydantic-settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from podscribe.core.exceptions import ConfigurationError

STT_MODELS: dict[str, str] = {
    "groq": "whisper-large-v3-turbo",
    "openai": "whisper-1",
}

PROVIDER_LABELS: dict[str, str] = {
    "groq": "Groq",
    "openai": "OpenAI",
}

REPORT_MODELS: dict[str, str] = {
    "anthropic": "claude-sonnet-4-5-20250929",
    "groq": "llama-3.3-70b-versatile",
    "openai": "gpt-4o-mini",
}

REPORT_PROVIDER_LABELS: dict[str, str] = {"anthropic": "Anthropic", **PROVIDER_LABELS}


class PodscribeConfig(BaseSettings):
    """podscribe configuration with environment variable support.

    All settings use the PODSCRIBE_ env prefix and may also live in a
    ``.env`` file (see ``podscribe setup``).
    """

    model_config = SettingsConfigDict(
        env_prefix="PODSCRIBE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- Transcription --
    transcription_provider: Literal["groq", "openai"] = "groq"
    groq_api_key: str = ""
    openai_api_key: str = ""
    stt_language: str | None = None

    # -- Reports --
    report_provider: Literal["anthropic", "groq", "openai"] = "groq"
    anthropic_api_key: str = ""
    report_model: str | None = None
    report_max_tokens: int = 4096

    # -- External tools --
    ffmpeg_path: str | None = None
    ffprobe_path: str | None = None
    # Searched before PATH; GUI launchers often start with a minimal PATH.
    extra_tool_dirs: list[str] = [
        "/usr/local/bin",
        "/opt/homebrew/bin",
        "/opt/homebrew/sbin",
        "~/.local/bin",
    ]

    # -- Audio processing --
    audio_bitrate: str = "64k"
    split_max_size_mb: float = 24.0
    max_download_size_mb: int = 200
    work_dir_prefix: str = "podscribe_"

    # -- Network --
    user_agent: str = "PodcastScraper/1.0"
    max_redirects: int = 10
    lookup_timeout_seconds: float = 30.0
    media_timeout_seconds: float = 600.0
    transcode_timeout_seconds: float = 120.0

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "colored"
    log_timestamps: bool = True

    # -- Retry Configuration --
    retry_max_attempts: int = 3
    retry_min_wait_seconds: float = 4.0
    retry_max_wait_seconds: float = 60.0
    retry_exponential_multiplier: float = 1.0

    def get_stt_model(self) -> str:
        """Get the Whisper model identifier for the selected provider."""
        return STT_MODELS[self.transcription_provider]

    def _key_for(self, provider: str) -> str:
        return getattr(self, f"{provider}_api_key")

    def _require_key_for(self, provider: str) -> str:
        key = self._key_for(provider)
        if not key:
            label = REPORT_PROVIDER_LABELS[provider]
            env_var = f"PODSCRIBE_{provider.upper()}_API_KEY"
            # setup only stores transcription keys
            hint = " or run 'podscribe setup'" if provider in PROVIDER_LABELS else ""
            raise ConfigurationError(f"Missing {label} API key. Set {env_var}{hint}.")
        return key

    def get_api_key(self) -> str:
        """Get the API key of the selected transcription provider (may be empty)."""
        return self._key_for(self.transcription_provider)

    def require_api_key(self) -> str:
        """Return the transcription provider's API key or raise ConfigurationError."""
        return self._require_key_for(self.transcription_provider)

    def get_report_model(self) -> str:
        """The report model: ``report_model`` if set, else the provider default."""
        return self.report_model or REPORT_MODELS[self.report_provider]

    def require_report_api_key(self) -> str:
        """Return the report provider's API key or raise ConfigurationError.

        Groq and OpenAI share their key with transcription.
        """
        return self._require_key_for(self.report_provider)
