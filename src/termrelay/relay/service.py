"""The command relay.

Forwards a user's command to the language model with the session's
full transcript as context, records the exchange, and either returns
the model's text or runs the shell command the model asked for.
"""

from __future__ import annotations

import logging

from termrelay.config.settings import DEFAULT_SENTINEL
from termrelay.domain.models import (
    ModelReply,
    RelayResult,
    ResultType,
    Role,
    ShellOutcome,
    Turn,
)
from termrelay.errors import InvalidInput, ShellError, UpstreamError
from termrelay.llm.base import LanguageModel
from termrelay.relay.executor import ShellExecutor
from termrelay.relay.parser import parse_reply
from termrelay.sessions.store import SessionStore

logger = logging.getLogger(__name__)


class CommandRelay:
    """Relays commands between a client session and a language model.

    Each successful call appends exactly two turns to the session's
    transcript: the user's command and the model's reply. If the model
    call fails the user turn is left in place without a reply.

    Example usage::

        relay = CommandRelay(store=SessionStore(), model=model, executor=ShellExecutor())
        result = await relay.handle("session-1", "list files")
    """

    def __init__(
        self,
        store: SessionStore,
        model: LanguageModel,
        executor: ShellExecutor,
        sentinel: str = DEFAULT_SENTINEL,
    ) -> None:
        self._store = store
        self._model = model
        self._executor = executor
        self._sentinel = sentinel

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def model(self) -> LanguageModel:
        return self._model

    async def handle(self, session_id: str, command_text: str) -> RelayResult:
        """Process one command for one session.

        Raises:
            InvalidInput: If ``command_text`` is empty or whitespace.
            UpstreamError: If the model call fails.
        """
        if not command_text or not command_text.strip():
            raise InvalidInput("Command is required")

        transcript = self._store.get_or_create(session_id)
        transcript.append(Turn(role=Role.USER, text=command_text))

        try:
            reply_text = await self._model.generate(list(transcript))
        except UpstreamError:
            raise
        except Exception as e:
            raise UpstreamError(str(e), provider=self._model.provider_name) from e

        transcript.append(Turn(role=Role.ASSISTANT, text=reply_text))

        reply = parse_reply(reply_text, self._sentinel)
        if not reply.is_shell:
            return RelayResult(output=reply.text, type=ResultType.GEMINI)
        return await self._run_shell(reply)

    async def _run_shell(self, reply: ModelReply) -> RelayResult:
        command = reply.command or ""
        try:
            outcome = await self._executor.run(command)
        except ShellError as e:
            logger.error("exec error: %s", e)
            return RelayResult(output=str(e), type=ResultType.ERROR)
        return self._to_result(outcome)

    @staticmethod
    def _to_result(outcome: ShellOutcome) -> RelayResult:
        if not outcome.ok:
            message = outcome.stderr or f"Command failed: {outcome.command} (exit code {outcome.exit_code})"
            logger.error("exec error: exit code %d for '%s'", outcome.exit_code, outcome.command)
            return RelayResult(output=message, type=ResultType.ERROR)
        if outcome.stderr:
            return RelayResult(output=outcome.stderr, type=ResultType.ERROR)
        return RelayResult(output=outcome.stdout, type=ResultType.SUCCESS)
