"""Turn raw model replies into tagged ModelReply values.

The model is told to prefix a reply with the shell sentinel when it
wants a command run on the host. Everything after the sentinel, trimmed,
is the command line. Any other reply is plain text and is passed through
unchanged.
"""

from __future__ import annotations

from termrelay.config.settings import DEFAULT_SENTINEL
from termrelay.domain.models import ModelReply, ReplyKind


def parse_reply(raw_reply: str, sentinel: str = DEFAULT_SENTINEL) -> ModelReply:
    """Classify a model reply as plain text or a shell command."""
    if raw_reply.startswith(sentinel):
        command = raw_reply[len(sentinel):].strip()
        return ModelReply(kind=ReplyKind.SHELL, text=raw_reply, command=command)
    return ModelReply(kind=ReplyKind.TEXT, text=raw_reply)
