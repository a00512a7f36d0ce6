"""Core domain models for the termrelay system.

These models represent the data flowing through a relay call: the
role-tagged turns that make up a session transcript, the structured
interpretation of a model reply, the outcome of a shell command, and
the tagged result returned to the client.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Role(str, enum.Enum):
    """Who produced a turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ResultType(str, enum.Enum):
    """Tag on a relay result, as seen by the front end."""

    SUCCESS = "success"  # Shell command ran cleanly, output is stdout
    ERROR = "error"  # Shell command failed or was refused
    GEMINI = "gemini"  # Plain model text, not a command result


class ReplyKind(str, enum.Enum):
    """What a model reply asks the relay to do."""

    TEXT = "text"
    SHELL = "shell"


# ---------------------------------------------------------------------------
# Conversation Models
# ---------------------------------------------------------------------------


class Turn(BaseModel):
    """One role-tagged utterance in a transcript."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Who said it")
    text: str = Field(description="What was said")


# Ordered turns for one session, oldest first
Transcript = list[Turn]


# ---------------------------------------------------------------------------
# Relay Models
# ---------------------------------------------------------------------------


class ModelReply(BaseModel):
    """Structured interpretation of a raw model reply.

    A reply is either plain text to show the user, or a shell command
    the relay should run on the host.
    """

    model_config = ConfigDict(frozen=True)

    kind: ReplyKind = Field(description="Whether the reply is text or a shell command")
    text: str = Field(description="The raw reply text as returned by the model")
    command: str | None = Field(
        default=None, description="Shell command to run, set only for shell replies"
    )

    @property
    def is_shell(self) -> bool:
        return self.kind == ReplyKind.SHELL


class ShellOutcome(BaseModel):
    """Captured result of running one shell command."""

    model_config = ConfigDict(frozen=True)

    command: str = Field(description="The command line that was run")
    cwd: str = Field(description="Working directory the command ran in")
    exit_code: int = Field(description="Process exit status")
    stdout: str = Field(default="", description="Captured standard output")
    stderr: str = Field(default="", description="Captured standard error")

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class RelayResult(BaseModel):
    """What the relay returns for one command."""

    model_config = ConfigDict(frozen=True)

    output: str = Field(description="Text to display in the terminal")
    type: ResultType = Field(description="How the front end should render the output")
