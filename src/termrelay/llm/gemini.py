"""Google Gemini provider implementation.

Uses the google-genai SDK's async client. Gemini names the assistant
role ``model``, so transcript roles are mapped on the way out.
"""

from __future__ import annotations

import logging

from termrelay.domain.models import Role, Transcript
from termrelay.errors import UpstreamError
from termrelay.llm.base import LanguageModel

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"

_ROLE_MAP = {Role.USER: "user", Role.ASSISTANT: "model"}


class GeminiModel(LanguageModel):
    """Language model provider using the Gemini generateContent API."""

    provider_name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        max_tokens: int = 1024,
    ) -> None:
        super().__init__(model=model)
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._client = None

    def _ensure_client(self) -> None:
        """Lazily initialize the google-genai client."""
        if self._client is not None:
            return
        from google import genai
        self._client = genai.Client(api_key=self._api_key)
        logger.info("Initialized Gemini client (model=%s)", self._model)

    @staticmethod
    def _to_contents(transcript: Transcript) -> list[dict]:
        return [
            {"role": _ROLE_MAP[turn.role], "parts": [{"text": turn.text}]}
            for turn in transcript
        ]

    async def generate(self, transcript: Transcript) -> str:
        """Generate a reply to the last turn of the transcript."""
        self._ensure_client()
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=self._to_contents(transcript),
                config={"max_output_tokens": self._max_tokens},
            )
            text = response.text
        except Exception as e:
            logger.debug("Gemini API call failed: %s", e)
            raise UpstreamError(
                str(e),
                provider=self.provider_name,
            ) from e
        return self._require_text(text)

    async def health_check(self) -> bool:
        """Check if the model is reachable."""
        try:
            self._ensure_client()
            await self._client.aio.models.get(model=self._model)
            return True
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return False
