"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from godev.compiler.process import CommandResult, CommandRunner


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user config file at an empty location.

    Returns:
        Path of the (nonexistent) user config file.
    """
    config_path = tmp_path_factory.mktemp("home") / ".godev" / "config.yaml"
    monkeypatch.setattr("godev.core.config.settings.USER_CONFIG_PATH", config_path)
    return config_path


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Create an empty project directory.

    Returns:
        Path to the project directory.
    """
    root = tmp_path / "demo"
    root.mkdir()
    return root


@pytest.fixture
def make_tree(project_root: Path) -> Callable[[dict[str, str]], Path]:
    """Factory writing files into the project directory.

    Keys are paths relative to the project root; a key ending in "/"
    creates an empty directory.

    Returns:
        Function that populates the tree and returns the project root.
    """

    def _make(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            target = project_root / relative
            if relative.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return project_root

    return _make


@pytest.fixture
def mock_runner() -> MagicMock:
    """Create a CommandRunner double whose commands all succeed.

    Tests replace run.side_effect to simulate compilers writing outputs.

    Returns:
        MagicMock with AsyncMock run and stream methods.
    """
    runner = MagicMock(spec=CommandRunner)
    runner.run = AsyncMock(return_value=CommandResult(command="", return_code=0))
    runner.stream = AsyncMock(return_value=0)
    return runner
