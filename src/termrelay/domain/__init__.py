"""Domain models for termrelay."""

from termrelay.domain.models import (
    ModelReply,
    RelayResult,
    ReplyKind,
    ResultType,
    Role,
    ShellOutcome,
    Transcript,
    Turn,
)

__all__ = [
    "ModelReply",
    "RelayResult",
    "ReplyKind",
    "ResultType",
    "Role",
    "ShellOutcome",
    "Transcript",
    "Turn",
]
