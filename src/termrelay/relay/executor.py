"""Shell command executor for the relay.

Runs one command line per call through the host shell as an asyncio
subprocess, capturing stdout, stderr and the exit status. Commands run
in a fixed working directory. No timeout is applied and a client
disconnect does not stop a running command.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shlex

from termrelay.domain.models import ShellOutcome
from termrelay.errors import ShellError

logger = logging.getLogger(__name__)


class ShellExecutor:
    """Runs model-requested shell commands on the host.

    Execution can be switched off entirely, or narrowed to an allow-list
    of program names (the first word of the command line). Allow-listed
    commands are split into an argv and run without a shell, so pipes,
    redirects and chained commands are passed to the program as plain
    arguments. An empty allow-list permits any command through the shell.
    """

    def __init__(
        self,
        working_directory: str | None = None,
        allowed_commands: list[str] | None = None,
        enabled: bool = True,
        shell_executable: str | None = None,
    ) -> None:
        self._working_directory = working_directory
        self._allowed_commands = frozenset(allowed_commands or ())
        self._enabled = enabled
        self._shell_executable = shell_executable

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def working_directory(self) -> str:
        return self._working_directory or os.getcwd()

    def check(self, command: str) -> list[str] | None:
        """Raise ShellError if ``command`` may not be run.

        With an allow-list configured, returns the parsed argv that must be
        run without a shell; otherwise returns None.
        """
        if not self._enabled:
            raise ShellError("Shell execution is disabled", command=command)
        if not command.strip():
            raise ShellError("Empty shell command", command=command)
        if not self._allowed_commands:
            return None
        try:
            words = shlex.split(command)
        except ValueError as e:
            raise ShellError(f"Cannot parse command: {e}", command=command) from e
        program = os.path.basename(words[0]) if words else ""
        if program not in self._allowed_commands:
            raise ShellError(f"Command not allowed: {program}", command=command)
        return words

    async def run(self, command: str) -> ShellOutcome:
        """Run ``command`` to completion and capture its output.

        Raises:
            ShellError: If the command is refused or the process cannot start.
        """
        argv = self.check(command)
        cwd = self.working_directory
        logger.info("Attempting to execute: '%s' with CWD: '%s'", command, cwd)
        try:
            if argv is not None:
                # Allow-listed commands run without a shell so operators stay literal
                process = await asyncio.create_subprocess_exec(
                    *argv,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=cwd,
                )
            else:
                process = await asyncio.create_subprocess_shell(
                    command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=cwd,
                    executable=self._shell_executable,
                )
            stdout, stderr = await process.communicate()
        except OSError as e:
            raise ShellError(f"Failed to start command: {e}", command=command) from e

        outcome = ShellOutcome(
            command=command,
            cwd=cwd,
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        if outcome.stderr:
            logger.warning("exec stderr: %s", outcome.stderr.rstrip())
        logger.debug("exec exit=%d stdout: %s", outcome.exit_code, outcome.stdout[:200])
        return outcome
