"""Subprocess execution for toolchain, build and run commands."""

import asyncio
import os
import shlex
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from godev.core.logger.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Result of a captured command.

    Attributes:
        command: The command line that was executed.
        return_code: Exit code, -1 when the process could not start or timed out.
        stdout: Captured standard output.
        stderr: Captured standard error.
        duration_seconds: Wall-clock time taken.
    """

    command: str
    return_code: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        """Whether the command exited with status 0."""
        return self.return_code == 0

    def first_line(self) -> str:
        """First non-empty output line, preferring stdout."""
        for text in (self.stdout, self.stderr):
            for line in text.splitlines():
                if line.strip():
                    return line.strip()
        return ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "command": self.command,
            "return_code": self.return_code,
            "duration_seconds": self.duration_seconds,
        }


def format_command(cmd: list[str] | str) -> str:
    """Render an argv list as a copy-pasteable shell line."""
    if isinstance(cmd, str):
        return cmd
    return shlex.join(cmd)


class CommandRunner:
    """Runs external commands.

    Captured commands (compilers, installers, probes) collect their output and
    are bounded by a timeout. Streamed commands (installers shown to the user,
    program runs) inherit the caller's standard streams.
    """

    def __init__(self, timeout: int = 600, env: dict[str, str] | None = None):
        """Initialize the runner.

        Args:
            timeout: Maximum time for each captured command in seconds.
            env: Environment for child processes. Defaults to os.environ.
        """
        self.timeout = timeout
        self.env = env

    def _environment(self) -> dict[str, str]:
        return dict(self.env) if self.env is not None else os.environ.copy()

    async def run(
        self,
        cmd: list[str],
        cwd: Path | None = None,
    ) -> CommandResult:
        """Run a command and capture its output.

        Args:
            cmd: Command and arguments.
            cwd: Working directory.

        Returns:
            CommandResult. Start failures and timeouts are reported with
            return code -1 rather than raised.
        """
        command = format_command(cmd)
        logger.debug(f"Running: {command}")
        start_time = time.time()

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=self._environment(),
            )
        except OSError as e:
            return CommandResult(
                command=command,
                return_code=-1,
                stderr=str(e),
                duration_seconds=time.time() - start_time,
            )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return CommandResult(
                command=command,
                return_code=-1,
                stderr=f"Command timed out after {self.timeout} seconds",
                duration_seconds=time.time() - start_time,
            )

        return CommandResult(
            command=command,
            return_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            duration_seconds=time.time() - start_time,
        )

    async def stream(
        self,
        cmd: list[str] | str,
        cwd: Path | None = None,
        shell: bool = False,
    ) -> int:
        """Run a command attached to the caller's terminal.

        Args:
            cmd: Argument list, or a command line when shell is True.
            cwd: Working directory.
            shell: Run the command line through the system shell.

        Returns:
            The process exit code.

        Raises:
            OSError: If the process cannot be started.
        """
        logger.debug(f"Streaming: {format_command(cmd)}")

        if shell:
            process = await asyncio.create_subprocess_shell(
                format_command(cmd),
                cwd=cwd,
                env=self._environment(),
            )
        else:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=cwd,
                env=self._environment(),
            )

        return await process.wait()
