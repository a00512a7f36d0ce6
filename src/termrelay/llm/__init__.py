"""Language model providers for termrelay.

Provides a provider-agnostic interface for sending a session transcript
to a generative language model and receiving its free-text reply.

Public API:
    LanguageModel -- Abstract base class
    GeminiModel -- Google Gemini implementation (default)
    OpenAIModel -- OpenAI / OpenRouter implementation
    AnthropicModel -- Claude API implementation
    build_model -- Pick and construct a provider from settings
"""

from termrelay.llm.base import LanguageModel
from termrelay.llm.factory import build_model

__all__ = ["LanguageModel", "build_model", "GeminiModel", "OpenAIModel", "AnthropicModel"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "GeminiModel":
        from termrelay.llm.gemini import GeminiModel
        return GeminiModel
    if name == "OpenAIModel":
        from termrelay.llm.openai import OpenAIModel
        return OpenAIModel
    if name == "AnthropicModel":
        from termrelay.llm.anthropic import AnthropicModel
        return AnthropicModel
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
