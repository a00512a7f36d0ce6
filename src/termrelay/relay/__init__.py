"""Command relay module for termrelay.

Connects a session's transcript to the language model and, when the
model's reply carries the shell sentinel, to the host shell.
"""

from termrelay.relay.executor import ShellExecutor
from termrelay.relay.parser import parse_reply
from termrelay.relay.service import CommandRelay

__all__ = ["CommandRelay", "ShellExecutor", "parse_reply"]
