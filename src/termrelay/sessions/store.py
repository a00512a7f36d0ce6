"""In-memory session store.

Maps an opaque client-supplied session id to that session's transcript.
Transcripts are created lazily on first contact and seeded with the
fixed two-turn preamble that tells the model to behave like a terminal.

The store is not locked. It is only safe when every caller runs on the
same asyncio event loop, which is how the endpoint serves requests.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from typing import Callable

from termrelay.config.settings import DEFAULT_PREAMBLE_ACK, DEFAULT_PREAMBLE_PROMPT
from termrelay.domain.models import Role, Transcript, Turn

logger = logging.getLogger(__name__)


def build_preamble(
    prompt: str = DEFAULT_PREAMBLE_PROMPT,
    ack: str = DEFAULT_PREAMBLE_ACK,
) -> tuple[Turn, Turn]:
    """Build the two turns every transcript starts with."""
    return (
        Turn(role=Role.USER, text=prompt),
        Turn(role=Role.ASSISTANT, text=ack),
    )


class SessionStore:
    """Process-wide mapping from session id to transcript.

    Eviction is opt-in. With ``max_sessions`` set, the least recently
    used session is dropped when a new one would exceed the limit. With
    ``ttl_seconds`` set, a session idle for longer is discarded the next
    time the store is touched. With neither, sessions live until the
    process exits.
    """

    def __init__(
        self,
        preamble: tuple[Turn, Turn] | None = None,
        max_sessions: int | None = None,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_sessions is not None and max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._preamble = preamble if preamble is not None else build_preamble()
        self._max_sessions = max_sessions
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._transcripts: OrderedDict[str, Transcript] = OrderedDict()
        self._last_used: dict[str, float] = {}

    @property
    def preamble(self) -> tuple[Turn, Turn]:
        return self._preamble

    def __len__(self) -> int:
        return len(self._transcripts)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._transcripts

    def get_or_create(self, session_id: str) -> Transcript:
        """Return the transcript for ``session_id``, creating it if new."""
        self._expire_idle()
        transcript = self._transcripts.get(session_id)
        if transcript is None:
            transcript = list(self._preamble)
            self._transcripts[session_id] = transcript
            logger.info("Created session %s (%d active)", session_id, len(self._transcripts))
            self._evict_overflow()
        self._touch(session_id)
        return transcript

    def get(self, session_id: str) -> Transcript | None:
        """Return the transcript for ``session_id`` without creating one."""
        self._expire_idle()
        transcript = self._transcripts.get(session_id)
        if transcript is not None:
            self._touch(session_id)
        return transcript

    def drop(self, session_id: str) -> bool:
        """Forget a session. Returns whether it existed."""
        self._last_used.pop(session_id, None)
        return self._transcripts.pop(session_id, None) is not None

    def _touch(self, session_id: str) -> None:
        self._transcripts.move_to_end(session_id)
        self._last_used[session_id] = self._clock()

    def _expire_idle(self) -> None:
        if self._ttl_seconds is None:
            return
        cutoff = self._clock() - self._ttl_seconds
        # Least recently used first, so stop at the first live session
        for session_id in list(self._transcripts):
            if self._last_used.get(session_id, cutoff) > cutoff:
                break
            self.drop(session_id)
            logger.info("Expired idle session %s", session_id)

    def _evict_overflow(self) -> None:
        if self._max_sessions is None:
            return
        while len(self._transcripts) > self._max_sessions:
            session_id = next(iter(self._transcripts))
            self.drop(session_id)
            logger.info("Evicted least recently used session %s", session_id)
