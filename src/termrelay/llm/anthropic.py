"""Anthropic Claude provider implementation.

Uses the Anthropic Python SDK's messages API. The transcript preamble
is sent as ordinary turns rather than a system prompt so that every
provider sees the same context.
"""

from __future__ import annotations

import logging

from termrelay.domain.models import Transcript
from termrelay.errors import UpstreamError
from termrelay.llm.base import LanguageModel

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"


class AnthropicModel(LanguageModel):
    """Language model provider using Anthropic's Claude API."""

    provider_name = "anthropic"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        max_tokens: int = 1024,
    ) -> None:
        super().__init__(model=model)
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._client = None  # Will be anthropic.AsyncAnthropic

    def _ensure_client(self) -> None:
        """Lazily initialize the Anthropic async client."""
        if self._client is not None:
            return
        from anthropic import AsyncAnthropic
        self._client = AsyncAnthropic(api_key=self._api_key)
        logger.info("Initialized Anthropic client (model=%s)", self._model)

    async def generate(self, transcript: Transcript) -> str:
        """Generate a reply via the messages API."""
        self._ensure_client()
        messages = [{"role": turn.role.value, "content": turn.text} for turn in transcript]
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=messages,
            )
            text = "".join(
                block.text for block in response.content if getattr(block, "type", "") == "text"
            )
        except Exception as e:
            logger.debug("Anthropic API call failed: %s", e)
            raise UpstreamError(
                str(e),
                provider=self.provider_name,
            ) from e
        return self._require_text(text)

    async def health_check(self) -> bool:
        """Check if the API is reachable."""
        try:
            self._ensure_client()
            await self._client.models.list()
            return True
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return False
