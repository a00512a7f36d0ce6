"""Tests for the CommandRelay request path."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from termrelay.domain.models import ResultType, Role, ShellOutcome
from termrelay.errors import InvalidInput, ShellError, UpstreamError
from termrelay.relay.executor import ShellExecutor
from termrelay.relay.service import CommandRelay
from termrelay.sessions.store import SessionStore


class TestInputValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", ["", "   ", "\n\t"])
    async def test_blank_command_rejected_without_mutation(
        self, relay: CommandRelay, store: SessionStore, mock_model: AsyncMock, command: str
    ) -> None:
        store.get_or_create("s1")
        with pytest.raises(InvalidInput):
            await relay.handle("s1", command)
        assert len(store.get_or_create("s1")) == 2
        mock_model.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_blank_command_does_not_create_session(
        self, relay: CommandRelay, store: SessionStore
    ) -> None:
        with pytest.raises(InvalidInput):
            await relay.handle("never-seen", "")
        assert "never-seen" not in store


class TestTextReplies:
    @pytest.mark.asyncio
    async def test_plain_reply_returned_verbatim(
        self, relay: CommandRelay, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.return_value = "The capital of France is Paris."
        result = await relay.handle("s1", "capital of france")
        assert result.type == ResultType.GEMINI
        assert result.output == "The capital of France is Paris."

    @pytest.mark.asyncio
    async def test_appends_user_and_assistant_turns(
        self, relay: CommandRelay, store: SessionStore, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.return_value = "Command not found: frobnicate"
        await relay.handle("s1", "frobnicate")
        transcript = store.get_or_create("s1")
        assert len(transcript) == 4
        assert transcript[2].role == Role.USER
        assert transcript[2].text == "frobnicate"
        assert transcript[3].role == Role.ASSISTANT
        assert transcript[3].text == "Command not found: frobnicate"

    @pytest.mark.asyncio
    async def test_model_sees_full_transcript(
        self, relay: CommandRelay, store: SessionStore, mock_model: AsyncMock
    ) -> None:
        await relay.handle("s1", "first")
        await relay.handle("s1", "second")
        sent = mock_model.generate.call_args_list[1].args[0]
        assert [t.text for t in sent[2:]] == ["first", "CLI output.", "second"]
        assert tuple(sent[:2]) == store.preamble

    @pytest.mark.asyncio
    async def test_transcript_grows_by_two_per_call(
        self, relay: CommandRelay, store: SessionStore, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.side_effect = [f"reply {i}" for i in range(5)]
        for i in range(5):
            await relay.handle("s1", f"cmd {i}")
        transcript = store.get_or_create("s1")
        assert len(transcript) == 2 + 2 * 5
        body = transcript[2:]
        assert [t.role for t in body] == [Role.USER, Role.ASSISTANT] * 5
        assert [t.text for t in body[0::2]] == [f"cmd {i}" for i in range(5)]
        assert [t.text for t in body[1::2]] == [f"reply {i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_sessions_are_independent(
        self, relay: CommandRelay, store: SessionStore
    ) -> None:
        await relay.handle("a", "one")
        await relay.handle("b", "two")
        await relay.handle("a", "three")
        assert len(store.get_or_create("a")) == 6
        assert len(store.get_or_create("b")) == 4


class TestShellReplies:
    @pytest.mark.asyncio
    async def test_echo_success(self, relay: CommandRelay, mock_model: AsyncMock) -> None:
        mock_model.generate.return_value = "EXECUTE_SHELL: echo hi"
        result = await relay.handle("s1", "say hi")
        assert result.type == ResultType.SUCCESS
        assert result.output == "hi\n"

    @pytest.mark.asyncio
    async def test_shell_reply_recorded_in_transcript(
        self, relay: CommandRelay, store: SessionStore, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.return_value = "EXECUTE_SHELL: echo hi"
        await relay.handle("s1", "say hi")
        assert store.get_or_create("s1")[-1].text == "EXECUTE_SHELL: echo hi"

    @pytest.mark.asyncio
    async def test_failing_command_returns_stderr(
        self, relay: CommandRelay, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.return_value = "EXECUTE_SHELL: echo broken >&2; exit 1"
        result = await relay.handle("s1", "break")
        assert result.type == ResultType.ERROR
        assert result.output == "broken\n"

    @pytest.mark.asyncio
    async def test_failing_command_without_stderr_returns_message(
        self, relay: CommandRelay, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.return_value = "EXECUTE_SHELL: exit 4"
        result = await relay.handle("s1", "fail quietly")
        assert result.type == ResultType.ERROR
        assert "exit code 4" in result.output

    @pytest.mark.asyncio
    async def test_stderr_on_success_is_an_error(
        self, relay: CommandRelay, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.return_value = "EXECUTE_SHELL: echo out; echo warn >&2"
        result = await relay.handle("s1", "warn")
        assert result.type == ResultType.ERROR
        assert result.output == "warn\n"

    @pytest.mark.asyncio
    async def test_empty_command_is_an_error(
        self, relay: CommandRelay, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.return_value = "EXECUTE_SHELL:   "
        result = await relay.handle("s1", "nothing")
        assert result.type == ResultType.ERROR
        assert result.output == "Empty shell command"

    @pytest.mark.asyncio
    async def test_disabled_shell_is_an_error(
        self, store: SessionStore, mock_model: AsyncMock
    ) -> None:
        relay = CommandRelay(store=store, model=mock_model, executor=ShellExecutor(enabled=False))
        mock_model.generate.return_value = "EXECUTE_SHELL: echo hi"
        result = await relay.handle("s1", "say hi")
        assert result.type == ResultType.ERROR
        assert result.output == "Shell execution is disabled"
        assert len(store.get_or_create("s1")) == 4

    @pytest.mark.asyncio
    async def test_executor_outcome_mapping(
        self, store: SessionStore, mock_model: AsyncMock
    ) -> None:
        executor = AsyncMock(spec=ShellExecutor)
        executor.run.return_value = ShellOutcome(
            command="make", cwd="/tmp", exit_code=0, stdout="built\n", stderr=""
        )
        relay = CommandRelay(store=store, model=mock_model, executor=executor)
        mock_model.generate.return_value = "EXECUTE_SHELL: make"
        result = await relay.handle("s1", "build it")
        executor.run.assert_awaited_once_with("make")
        assert result.output == "built\n"

    @pytest.mark.asyncio
    async def test_spawn_failure_is_an_error(
        self, store: SessionStore, mock_model: AsyncMock
    ) -> None:
        executor = AsyncMock(spec=ShellExecutor)
        executor.run.side_effect = ShellError("Failed to start command: boom", command="x")
        relay = CommandRelay(store=store, model=mock_model, executor=executor)
        mock_model.generate.return_value = "EXECUTE_SHELL: x"
        result = await relay.handle("s1", "run x")
        assert result.type == ResultType.ERROR
        assert result.output == "Failed to start command: boom"

    @pytest.mark.asyncio
    async def test_custom_sentinel(
        self, store: SessionStore, mock_model: AsyncMock, executor: ShellExecutor
    ) -> None:
        relay = CommandRelay(store=store, model=mock_model, executor=executor, sentinel="$$")
        mock_model.generate.return_value = "$$ echo custom"
        result = await relay.handle("s1", "go")
        assert result.type == ResultType.SUCCESS
        assert result.output == "custom\n"


class TestUpstreamFailures:
    @pytest.mark.asyncio
    async def test_upstream_error_propagates(
        self, relay: CommandRelay, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.side_effect = UpstreamError("quota exceeded", provider="gemini")
        with pytest.raises(UpstreamError, match="quota exceeded"):
            await relay.handle("s1", "ls")

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(
        self, relay: CommandRelay, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.side_effect = RuntimeError("socket closed")
        with pytest.raises(UpstreamError, match="socket closed") as exc_info:
            await relay.handle("s1", "ls")
        assert exc_info.value.provider == "gemini"

    @pytest.mark.asyncio
    async def test_failure_leaves_unanswered_user_turn(
        self, relay: CommandRelay, store: SessionStore, mock_model: AsyncMock
    ) -> None:
        mock_model.generate.side_effect = UpstreamError("down")
        with pytest.raises(UpstreamError):
            await relay.handle("s1", "ls")
        transcript = store.get_or_create("s1")
        assert len(transcript) == 3
        assert transcript[-1].role == Role.USER
        assert transcript[-1].text == "ls"
