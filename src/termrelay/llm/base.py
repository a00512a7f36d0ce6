"""Abstract base class for language model providers.

All provider implementations must conform to this interface, enabling
the relay to swap between providers without changing the rest of the
request path.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from termrelay.domain.models import Transcript
from termrelay.errors import UpstreamError

logger = logging.getLogger(__name__)


class LanguageModel(ABC):
    """Abstract interface for generative language model providers.

    A provider receives the full ordered transcript of a session and
    returns the model's free-text reply to its last turn.

    Example usage::

        model = GeminiModel(api_key="...", model="gemini-2.0-flash")
        reply = await model.generate(transcript)
    """

    #: Short provider name used in logs and error metadata
    provider_name: str = "unknown"

    def __init__(self, model: str) -> None:
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    @abstractmethod
    async def generate(self, transcript: Transcript) -> str:
        """Send the transcript and return the model's reply text."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is reachable and authenticated."""
        ...

    def _require_text(self, text: str | None) -> str:
        """Reject empty replies so callers always get usable text."""
        if not text:
            raise UpstreamError(
                "Model returned an empty reply",
                provider=self.provider_name,
            )
        logger.debug("%s reply: %s", self.provider_name, text[:200])
        return text
