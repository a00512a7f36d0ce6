"""Exception hierarchy shared across termrelay components."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all termrelay errors."""


class InvalidInput(RelayError):
    """Raised when a request is missing a command or session id."""


class UpstreamError(RelayError):
    """Raised when the language model call fails or returns nothing usable."""

    def __init__(self, message: str, provider: str = "") -> None:
        super().__init__(message)
        self.provider = provider


class ShellError(RelayError):
    """Raised when a shell command is refused, fails to spawn, or fails."""

    def __init__(
        self, message: str, command: str = "", exit_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code


class ConfigError(RelayError):
    """Raised when required configuration (e.g. an API key) is missing."""
