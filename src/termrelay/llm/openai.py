"""OpenAI-compatible provider implementation.

Works with OpenAI, OpenRouter, and any OpenAI-compatible API
by setting a custom base_url.
"""

from __future__ import annotations

import logging

from termrelay.domain.models import Transcript
from termrelay.errors import UpstreamError
from termrelay.llm.base import LanguageModel

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAIModel(LanguageModel):
    """Language model provider using OpenAI's chat completions API.

    Also works with OpenRouter and other OpenAI-compatible endpoints.
    """

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str | None = None,
        max_tokens: int = 1024,
    ) -> None:
        super().__init__(model=model)
        self._api_key = api_key
        self._base_url = base_url
        self._max_tokens = max_tokens
        self._client = None

    def _ensure_client(self) -> None:
        """Lazily initialize the OpenAI async client."""
        if self._client is not None:
            return
        from openai import AsyncOpenAI
        kwargs = {"api_key": self._api_key}
        if self._base_url:
            kwargs["base_url"] = self._base_url
        self._client = AsyncOpenAI(**kwargs)
        logger.info("Initialized OpenAI client (model=%s, base_url=%s)", self._model, self._base_url)

    async def generate(self, transcript: Transcript) -> str:
        """Generate a reply via chat completions."""
        self._ensure_client()
        messages = [{"role": turn.role.value, "content": turn.text} for turn in transcript]
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=messages,
            )
            text = response.choices[0].message.content
        except Exception as e:
            logger.debug("OpenAI API call failed: %s", e)
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
