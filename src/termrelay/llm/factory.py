"""Construct the configured language model provider."""

from __future__ import annotations

import logging

from termrelay.config.settings import Settings
from termrelay.errors import ConfigError
from termrelay.llm.base import LanguageModel

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


def build_model(settings: Settings) -> LanguageModel:
    """Build the provider named by ``settings.llm.provider``.

    Raises:
        ConfigError: If the API key for the selected provider is not set.
    """
    llm = settings.llm

    if llm.provider == "gemini":
        from termrelay.llm.gemini import DEFAULT_GEMINI_MODEL, GeminiModel

        api_key = settings.gemini_api_key.get_secret_value()
        if not api_key:
            raise ConfigError("GEMINI_API_KEY is not set")
        return GeminiModel(
            api_key=api_key,
            model=llm.model or DEFAULT_GEMINI_MODEL,
            max_tokens=llm.max_tokens,
        )

    if llm.provider == "openai":
        from termrelay.llm.openai import DEFAULT_OPENAI_MODEL, OpenAIModel

        api_key = settings.openai_api_key.get_secret_value()
        base_url = llm.base_url
        # If OpenRouter key is set, use it
        or_key = settings.openrouter_api_key.get_secret_value()
        if or_key:
            api_key = or_key
            if not base_url:
                base_url = OPENROUTER_BASE_URL
        if not api_key:
            raise ConfigError("OPENAI_API_KEY (or OPENROUTER_API_KEY) is not set")
        return OpenAIModel(
            api_key=api_key,
            model=llm.model or DEFAULT_OPENAI_MODEL,
            base_url=base_url,
            max_tokens=llm.max_tokens,
        )

    if llm.provider == "anthropic":
        from termrelay.llm.anthropic import DEFAULT_ANTHROPIC_MODEL, AnthropicModel

        api_key = settings.anthropic_api_key.get_secret_value()
        if not api_key:
            raise ConfigError("ANTHROPIC_API_KEY is not set")
        return AnthropicModel(
            api_key=api_key,
            model=llm.model or DEFAULT_ANTHROPIC_MODEL,
            max_tokens=llm.max_tokens,
        )

    raise ConfigError(f"Unknown LLM provider: {llm.provider}")
