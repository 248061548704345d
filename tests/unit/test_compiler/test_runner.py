"""Tests for running build results."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from godev.compiler.models import BuildResult, RuntimeKind
from godev.compiler.runner import Runner, browser_open_command, run_prompt


@pytest.fixture
def runner(mock_runner: MagicMock, tmp_path: Path) -> Runner:
    """Create a Runner on a Linux host."""
    return Runner(mock_runner, platform="linux", cwd=tmp_path)


class TestBrowserOpenCommand:
    """Tests for the platform open command."""

    @pytest.mark.parametrize(
        "platform,expected",
        [
            ("linux", ["xdg-open", "/p/index.html"]),
            ("darwin", ["open", "/p/index.html"]),
            ("win32", ["cmd", "/c", "start", "", "/p/index.html"]),
        ],
    )
    def test_platforms(self, platform: str, expected: list[str]) -> None:
        """Test the command for each platform."""
        assert browser_open_command("/p/index.html", platform) == expected


class TestRun:
    """Tests for Runner.run dispatch."""

    @pytest.mark.asyncio
    async def test_native(self, runner: Runner, mock_runner: MagicMock, tmp_path: Path) -> None:
        """Test running a native executable."""
        binary = tmp_path / "build" / "app"
        binary.parent.mkdir()
        binary.write_text("#!/bin/sh\n")
        binary.chmod(0o755)
        mock_runner.stream.return_value = 3

        code = await runner.run(BuildResult.succeeded(binary, RuntimeKind.NATIVE, working_dir=tmp_path))

        assert code == 3
        mock_runner.stream.assert_awaited_once_with([str(binary)], cwd=tmp_path)

    @pytest.mark.asyncio
    async def test_native_missing_binary(self, runner: Runner, mock_runner: MagicMock, tmp_path: Path) -> None:
        """Test a vanished executable is reported, not spawned."""
        code = await runner.run(BuildResult.succeeded(tmp_path / "gone", RuntimeKind.NATIVE))

        assert code == 1
        mock_runner.stream.assert_not_called()

    @pytest.mark.asyncio
    async def test_native_not_executable(self, runner: Runner, mock_runner: MagicMock, tmp_path: Path) -> None:
        """Test a file without execute permission is not spawned."""
        binary = tmp_path / "app"
        binary.write_text("data")
        binary.chmod(0o644)

        code = await runner.run(BuildResult.succeeded(binary, RuntimeKind.NATIVE))

        assert code == 1
        mock_runner.stream.assert_not_called()

    @pytest.mark.asyncio
    async def test_interpreter(self, runner: Runner, mock_runner: MagicMock, tmp_path: Path) -> None:
        """Test interpreter commands are split into argv."""
        result = BuildResult.succeeded(
            "node '/srv/my app/server.js'",
            RuntimeKind.INTERPRETER,
            interpreter="node",
            working_dir=tmp_path,
        )

        assert await runner.run(result) == 0
        mock_runner.stream.assert_awaited_once_with(["node", "/srv/my app/server.js"], cwd=tmp_path)

    @pytest.mark.asyncio
    async def test_interpreter_missing(self, runner: Runner, mock_runner: MagicMock) -> None:
        """Test a missing interpreter becomes a non-zero status."""
        mock_runner.stream.side_effect = FileNotFoundError("python3")

        code = await runner.run(BuildResult.succeeded("python3 main.py", RuntimeKind.INTERPRETER))

        assert code == 1

    @pytest.mark.asyncio
    async def test_dev_server_uses_shell(self, runner: Runner, mock_runner: MagicMock, tmp_path: Path) -> None:
        """Test dev server commands run through the shell."""
        result = BuildResult.succeeded("npm run dev", RuntimeKind.DEV_SERVER, working_dir=tmp_path)

        await runner.run(result)

        mock_runner.stream.assert_awaited_once_with("npm run dev", cwd=tmp_path, shell=True)

    @pytest.mark.asyncio
    async def test_browser(self, runner: Runner, mock_runner: MagicMock) -> None:
        """Test opening a page with the platform opener."""
        code = await runner.run(BuildResult.succeeded("/p/index.html", RuntimeKind.BROWSER))

        assert code == 0
        mock_runner.stream.assert_awaited_once_with(["xdg-open", "/p/index.html"])

    @pytest.mark.asyncio
    async def test_browser_failure(self, runner: Runner, mock_runner: MagicMock) -> None:
        """Test a failing opener is reported."""
        mock_runner.stream.return_value = 4

        code = await runner.run(BuildResult.succeeded("/p/index.html", RuntimeKind.BROWSER))

        assert code == 1

    @pytest.mark.asyncio
    async def test_container_runs_every_step(self, runner: Runner, mock_runner: MagicMock) -> None:
        """Test each step runs and the first failure code is returned."""
        mock_runner.stream.side_effect = [125, 0]
        result = BuildResult.succeeded(
            "docker build -t myapp . && docker run -p 3000:3000 myapp",
            RuntimeKind.CONTAINER,
        )

        code = await runner.run(result)

        assert code == 125
        assert mock_runner.stream.await_count == 2
        assert mock_runner.stream.await_args_list[1].args[0] == ["docker", "run", "-p", "3000:3000", "myapp"]

    @pytest.mark.asyncio
    async def test_failed_build_is_not_run(self, runner: Runner, mock_runner: MagicMock) -> None:
        """Test running a failed result."""
        assert await runner.run(BuildResult.failed("boom")) == 1
        mock_runner.stream.assert_not_called()


class TestOffer:
    """Tests for Runner.offer."""

    @pytest.mark.asyncio
    async def test_declined(self, runner: Runner, mock_runner: MagicMock) -> None:
        """Test nothing runs when the user declines."""
        confirm = AsyncMock(return_value=False)

        status = await runner.offer(BuildResult.succeeded("npm run dev", RuntimeKind.DEV_SERVER), confirm)

        assert status is None
        confirm.assert_awaited_once_with("Start development server?", True)
        mock_runner.stream.assert_not_called()

    @pytest.mark.asyncio
    async def test_accepted(self, runner: Runner, mock_runner: MagicMock) -> None:
        """Test the result runs when the user accepts."""
        status = await runner.offer(
            BuildResult.succeeded("/p/index.html", RuntimeKind.BROWSER),
            AsyncMock(return_value=True),
        )

        assert status == 0

    @pytest.mark.asyncio
    async def test_failed_build_is_not_offered(self, runner: Runner) -> None:
        """Test failed builds are never offered."""
        confirm = AsyncMock(return_value=True)

        assert await runner.offer(BuildResult.failed("boom"), confirm) is None
        confirm.assert_not_called()

    def test_container_defaults_to_no(self) -> None:
        """Test the container prompt defaults to no."""
        message, default = run_prompt(BuildResult.succeeded("docker build .", RuntimeKind.CONTAINER))

        assert message == "Build and run with Docker?"
        assert default is False

    def test_interpreter_prompt_names_interpreter(self) -> None:
        """Test the interpreter prompt text."""
        message, _ = run_prompt(
            BuildResult.succeeded("python3 main.py", RuntimeKind.INTERPRETER, interpreter="python3")
        )

        assert message == "Run the program with python3?"
