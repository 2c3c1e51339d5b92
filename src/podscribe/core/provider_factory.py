from __future__ import annotations

from podscribe.core.config import PodscribeConfig
from podscribe.core.protocols import ReportGenerator, STTProvider
from podscribe.core.retry_config import RetryConfig


def create_stt_provider(config: PodscribeConfig, retry_config: RetryConfig) -> STTProvider:
    provider_name = config.transcription_provider.lower()

    if provider_name == "groq":
        from podscribe.transcribe.groq import GroqTranscriber

        return GroqTranscriber(
            api_key=config.groq_api_key or None,
            model=config.get_stt_model(),
            retry_config=retry_config,
        )
    from podscribe.transcribe.openai import OpenAITranscriber

    return OpenAITranscriber(
        api_key=config.openai_api_key or None,
        model=config.get_stt_model(),
        retry_config=retry_config,
    )


def create_report_generator(config: PodscribeConfig, retry_config: RetryConfig) -> ReportGenerator:
    provider_name = config.report_provider.lower()
    api_key = config.require_report_api_key()

    if provider_name == "anthropic":
        from podscribe.generate.anthropic import AnthropicGenerator

        return AnthropicGenerator(
            api_key=api_key,
            model=config.get_report_model(),
            max_tokens=config.report_max_tokens,
            retry_config=retry_config,
        )
    if provider_name == "groq":
        from podscribe.generate.groq import GroqGenerator

        return GroqGenerator(
            api_key=api_key,
            model=config.get_report_model(),
            max_tokens=config.report_max_tokens,
            retry_config=retry_config,
        )
    from podscribe.generate.openai import OpenAIGenerator

    return OpenAIGenerator(
        api_key=api_key,
        model=config.get_report_model(),
        max_tokens=config.report_max_tokens,
        retry_config=retry_config,
    )
