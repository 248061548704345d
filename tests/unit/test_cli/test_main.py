"""Tests for CLI main module."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from click.testing import CliRunner

from godev.cli.main import main, run_build
from godev.compiler.models import ProjectType
from godev.core.config.settings import Settings

MakeTree = Callable[[dict[str, str]], Path]


class TestMainCommand:
    """Test main CLI command."""

    def test_version_flag(self) -> None:
        """Test version flag."""
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "GoDev version 1.0.0" in result.output

    @patch("godev.cli.main.run_build")
    def test_version_flag_stops_before_subcommand(self, mock_build: MagicMock) -> None:
        """Test --version with a subcommand prints the version and exits."""
        runner = CliRunner()
        result = runner.invoke(main, ["-v", "build"])

        assert result.exit_code == 0
        assert result.exception is None
        assert "GoDev version 1.0.0" in result.output
        mock_build.assert_not_called()

    @patch("godev.cli.main.run_info")
    @patch("godev.cli.main.setup_logging")
    def test_debug_flag(self, mock_setup: MagicMock, mock_info: MagicMock) -> None:
        """Test --debug is passed to logging setup."""
        runner = CliRunner()
        result = runner.invoke(main, ["--debug", "info"])

        assert result.exit_code == 0
        assert mock_setup.call_args.kwargs == {"debug": True}

    @patch("godev.cli.main.run_interactive_mode")
    def test_interactive_flag(self, mock_interactive: MagicMock) -> None:
        """Test interactive flag."""
        runner = CliRunner()
        runner.invoke(main, ["--interactive"])
        mock_interactive.assert_called_once()

    @patch("godev.cli.main.run_interactive_mode")
    def test_default_interactive(self, mock_interactive: MagicMock) -> None:
        """Test default behavior (interactive mode)."""
        runner = CliRunner()
        runner.invoke(main, [])
        mock_interactive.assert_called_once()

    @patch("godev.cli.main.run_interactive_mode")
    def test_config_file(self, mock_interactive: MagicMock, tmp_path: Path) -> None:
        """Test --config loads settings from YAML."""
        config = tmp_path / "config.yaml"
        config.write_text("compiler:\n  container_tag: web\n")

        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(config)])

        assert result.exit_code == 0
        settings = mock_interactive.call_args.args[0]
        assert settings.compiler.container_tag == "web"

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        """Test a malformed config file exits with an error."""
        config = tmp_path / "config.yaml"
        config.write_text("compiler: [broken\n")

        runner = CliRunner()
        result = runner.invoke(main, ["--config", str(config), "info"])

        assert result.exit_code == 1
        assert "Configuration Error" in result.output


class TestBuildCommand:
    """Test build subcommand."""

    @patch("godev.cli.main.run_build", return_value=0)
    def test_build_options(self, mock_build: MagicMock, project_root: Path) -> None:
        """Test options are passed to the pipeline."""
        runner = CliRunner()
        result = runner.invoke(main, ["build", "-p", str(project_root), "--lang", "go", "--no-run", "-y"])

        assert result.exit_code == 0
        args, kwargs = mock_build.call_args
        assert args[1] == project_root
        assert args[2] == ProjectType.GO
        assert kwargs == {"offer_run": False, "assume_yes": True}

    @patch("godev.cli.main.run_build", return_value=0)
    def test_build_defaults(self, mock_build: MagicMock) -> None:
        """Test default options."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["build"])

        assert result.exit_code == 0
        args, kwargs = mock_build.call_args
        assert args[2] is None
        assert kwargs == {"offer_run": True, "assume_yes": False}

    @patch("godev.cli.main.run_build", return_value=1)
    def test_build_failure_exit_code(self, mock_build: MagicMock, project_root: Path) -> None:
        """Test a failed pipeline exits non-zero."""
        runner = CliRunner()
        result = runner.invoke(main, ["build", "-p", str(project_root)])

        assert result.exit_code == 1

    def test_unknown_language(self, project_root: Path) -> None:
        """Test --lang only accepts known project types."""
        runner = CliRunner()
        result = runner.invoke(main, ["build", "-p", str(project_root), "--lang", "cobol"])

        assert result.exit_code == 2

    def test_missing_path(self, tmp_path: Path) -> None:
        """Test the project path must exist."""
        runner = CliRunner()
        result = runner.invoke(main, ["build", "-p", str(tmp_path / "missing")])

        assert result.exit_code == 2


class TestRunBuild:
    """Test run_build."""

    @patch("godev.cli.main.HostEnvironment.detect")
    def test_undetectable_project(self, mock_detect: MagicMock, project_root: Path) -> None:
        """Test detection failure returns 1 with a hint."""
        mock_detect.return_value = MagicMock(platform="linux", package_manager=None)

        with patch("godev.cli.main.show_error") as mock_error:
            exit_code = run_build(Settings(), project_root)

        assert exit_code == 1
        title, message = mock_error.call_args.args
        assert title == "Detection Failed"
        assert "--lang" in message

    @patch("godev.cli.main.show_build_result")
    @patch("godev.cli.main.HostEnvironment.detect")
    def test_web_project_without_run(
        self, mock_detect: MagicMock, mock_show: MagicMock, make_tree: MakeTree
    ) -> None:
        """Test a successful build shows its result."""
        mock_detect.return_value = MagicMock(platform="linux", package_manager=None)
        root = make_tree({"index.html": "<html></html>"})

        exit_code = run_build(Settings(), root, offer_run=False)

        assert exit_code == 0
        project_type, result = mock_show.call_args.args
        assert project_type == ProjectType.WEB
        assert result.artifact == str(root.resolve() / "index.html")


class TestCleanCommand:
    """Test clean subcommand."""

    def test_clean_twice(self, make_tree: MakeTree) -> None:
        """Test cleaning removes outputs and is idempotent."""
        root = make_tree({"build/app": "", "dist/bundle.js": ""})

        runner = CliRunner()
        first = runner.invoke(main, ["clean", "-p", str(root)])
        second = runner.invoke(main, ["clean", "-p", str(root)])

        assert first.exit_code == 0
        assert "Clean Complete" in first.output
        assert not (root / "build").exists()
        assert second.exit_code == 0
        assert "Nothing to clean" in second.output


class TestInfoCommands:
    """Test info and check-deps subcommands."""

    @patch("godev.cli.main.collect_system_info", new_callable=AsyncMock)
    def test_info(self, mock_info: AsyncMock) -> None:
        """Test system information display."""
        mock_info.return_value = {"OS": "Debian GNU/Linux 12", "Go": "go version go1.22.1"}

        runner = CliRunner()
        result = runner.invoke(main, ["info"])

        assert result.exit_code == 0
        assert "go1.22.1" in result.output

    @patch("godev.cli.main.check_dependencies", new_callable=AsyncMock)
    def test_check_deps(self, mock_check: AsyncMock) -> None:
        """Test dependency report display."""
        mock_check.return_value = {ProjectType.C: ("gcc", True), ProjectType.GO: ("golang", False)}

        runner = CliRunner()
        result = runner.invoke(main, ["check-deps"])

        assert result.exit_code == 0
        assert "golang" in result.output
        assert "missing" in result.output


class TestInteractiveMode:
    """Test the interactive menu loop."""

    @patch("godev.cli.main.show_banner")
    @patch("godev.cli.main.select_main_menu_action")
    @patch("godev.cli.main.run_info")
    @patch("godev.cli.main.prompt_continue")
    def test_menu_loop(
        self,
        mock_continue: MagicMock,
        mock_info: MagicMock,
        mock_menu: MagicMock,
        mock_banner: MagicMock,
    ) -> None:
        """Test an action followed by exit."""
        mock_menu.side_effect = ["info", "exit"]
        mock_continue.return_value = True

        runner = CliRunner()
        result = runner.invoke(main, [])

        assert result.exit_code == 0
        mock_info.assert_called_once()
        assert mock_menu.call_count == 2

    @patch("godev.cli.main.show_banner")
    @patch("godev.cli.main.select_main_menu_action")
    @patch("godev.cli.main.run_build", return_value=0)
    @patch("godev.cli.main.select_project_type", return_value=ProjectType.C)
    @patch("godev.cli.main.prompt_project_path")
    @patch("godev.cli.main.prompt_continue", return_value=False)
    def test_menu_build(
        self,
        mock_continue: MagicMock,
        mock_path: MagicMock,
        mock_type: MagicMock,
        mock_build: MagicMock,
        mock_menu: MagicMock,
        mock_banner: MagicMock,
        project_root: Path,
    ) -> None:
        """Test the build menu entry."""
        mock_menu.return_value = "build"
        mock_path.return_value = project_root

        runner = CliRunner()
        result = runner.invoke(main, [])

        assert result.exit_code == 0
        assert mock_build.call_args.args[1:] == (project_root, ProjectType.C)

    @patch("godev.cli.main.show_banner")
    @patch("godev.cli.main.select_main_menu_action", side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt(self, mock_menu: MagicMock, mock_banner: MagicMock) -> None:
        """Test Ctrl-C leaves the menu cleanly."""
        runner = CliRunner()
        result = runner.invoke(main, [])

        assert result.exit_code == 0
        assert "Interrupted" in result.output
