"""Running or opening build results.

Dispatch is purely on the result's runtime kind. Run failures are reported
and turned into a non-zero status; they never affect the build result.
"""

import os
import shlex
import sys
from pathlib import Path

from godev.compiler.models import BuildResult, RuntimeKind
from godev.compiler.process import CommandRunner, format_command
from godev.compiler.toolchain import ConfirmCallback
from godev.core.exceptions.errors import RunError
from godev.core.logger.logger import get_logger

logger = get_logger(__name__)

RUN_PROMPTS = {
    RuntimeKind.NATIVE: ("Run the compiled program?", True),
    RuntimeKind.INTERPRETER: ("Run the program with {interpreter}?", True),
    RuntimeKind.DEV_SERVER: ("Start development server?", True),
    RuntimeKind.BROWSER: ("Open in web browser?", True),
    RuntimeKind.CONTAINER: ("Build and run with Docker?", False),
}


def browser_open_command(path: str, platform: str = sys.platform) -> list[str]:
    """Host command that opens a file with its default application."""
    if platform.startswith("win"):
        return ["cmd", "/c", "start", "", path]
    if platform == "darwin":
        return ["open", path]
    return ["xdg-open", path]


def run_prompt(result: BuildResult) -> tuple[str, bool]:
    """Confirmation question and default answer for a build result."""
    message, default = RUN_PROMPTS[result.runtime_kind]
    return message.format(interpreter=result.interpreter or "the interpreter"), default


class Runner:
    """Executes or opens a successful build result."""

    def __init__(
        self,
        runner: CommandRunner,
        platform: str = sys.platform,
        cwd: Path | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            runner: Command runner used to spawn processes.
            platform: Host platform identifier, for the open command.
            cwd: Directory manual-run hints are made relative to.
        """
        self.runner = runner
        self.platform = platform
        self.cwd = cwd or Path.cwd()

    async def offer(
        self,
        result: BuildResult,
        confirm: ConfirmCallback,
    ) -> int | None:
        """Ask before running a build result.

        Args:
            result: Successful build result.
            confirm: Async yes/no callback; receives the question and default.

        Returns:
            Exit status of the run, or None when the user declined.
        """
        if not result.success:
            return None

        message, default = run_prompt(result)
        if not await confirm(message, default):
            return None
        return await self.run(result)

    async def run(self, result: BuildResult) -> int:
        """Run a build result according to its runtime kind.

        Args:
            result: Successful build result.

        Returns:
            Exit status; 0 on success.
        """
        if not result.success or result.runtime_kind is None:
            logger.error("Nothing to run: the build did not succeed")
            return 1

        handlers = {
            RuntimeKind.NATIVE: self._run_native,
            RuntimeKind.INTERPRETER: self._run_interpreter,
            RuntimeKind.DEV_SERVER: self._run_dev_server,
            RuntimeKind.BROWSER: self._open_browser,
            RuntimeKind.CONTAINER: self._run_container,
        }

        try:
            return await handlers[result.runtime_kind](result)
        except RunError as e:
            logger.error(f"Failed to run: {e.message}")
            if e.command:
                logger.info(f"Try running manually: {e.command}")
            return 1

    def _manual_command(self, artifact: Path) -> str:
        try:
            return f"./{os.path.relpath(artifact, self.cwd)}"
        except ValueError:
            return str(artifact)

    async def _run_native(self, result: BuildResult) -> int:
        artifact = Path(result.artifact)
        manual = self._manual_command(artifact)

        if not artifact.is_file():
            raise RunError(f"Executable not found: {artifact}", command=manual)
        if not os.access(artifact, os.X_OK):
            raise RunError(f"File is not executable: {artifact}", command=manual)

        logger.info(f"$ {manual}")
        try:
            code = await self.runner.stream([str(artifact)], cwd=result.working_dir)
        except OSError as e:
            raise RunError(str(e), command=manual) from e

        logger.info(f"Program exited with code: {code}")
        return code

    async def _run_interpreter(self, result: BuildResult) -> int:
        argv = shlex.split(result.artifact)
        logger.info(f"$ {format_command(argv)}")
        try:
            code = await self.runner.stream(argv, cwd=result.working_dir)
        except OSError as e:
            raise RunError(str(e), command=result.artifact) from e

        logger.info(f"Program exited with code: {code}")
        return code

    async def _run_dev_server(self, result: BuildResult) -> int:
        logger.info(f"$ {result.artifact}")
        try:
            code = await self.runner.stream(result.artifact, cwd=result.working_dir, shell=True)
        except OSError as e:
            raise RunError(str(e), command=result.artifact) from e

        logger.info(f"Development server exited with code: {code}")
        return code

    async def _open_browser(self, result: BuildResult) -> int:
        command = browser_open_command(result.artifact, self.platform)
        logger.info("Opening in browser...")
        try:
            code = await self.runner.stream(command)
        except OSError as e:
            raise RunError(
                f"Could not open browser automatically: {e}",
                command=result.artifact,
            ) from e

        if code != 0:
            raise RunError(
                f"Could not open browser automatically (exit code {code})",
                command=result.artifact,
            )
        return 0

    async def _run_container(self, result: BuildResult) -> int:
        first_failure = 0

        for step in result.steps:
            logger.info(f"$ {format_command(step)}")
            try:
                code = await self.runner.stream(step, cwd=result.working_dir)
            except OSError as e:
                logger.error(f"Docker command could not start: {e}")
                code = 1

            if code != 0:
                logger.error(f"Docker command failed with code: {code}")
                first_failure = first_failure or code

        return first_failure
