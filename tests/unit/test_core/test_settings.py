"""Tests for application settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from godev.core.config.settings import (
    DEFAULT_SERVER_INDICATORS,
    CompilerSettings,
    LoggingSettings,
    Settings,
)
from godev.core.exceptions.errors import ConfigurationError


class TestCompilerSettings:
    """Tests for CompilerSettings."""

    def test_defaults(self) -> None:
        """Test default values."""
        settings = CompilerSettings()

        assert settings.build_dir == "build"
        assert settings.command_timeout == 600
        assert settings.c_flags == ["-Wall", "-Wextra"]
        assert settings.cxx_standard == "c++17"
        assert settings.server_indicators == DEFAULT_SERVER_INDICATORS
        assert settings.container_tag == "myapp"
        assert settings.package_manager is None

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test GODEV_COMPILER_ environment variables."""
        monkeypatch.setenv("GODEV_COMPILER_BUILD_DIR", "out")
        monkeypatch.setenv("GODEV_COMPILER_PACKAGE_MANAGER", "PACMAN")

        settings = CompilerSettings()

        assert settings.build_dir == "out"
        assert settings.package_manager == "pacman"

    @pytest.mark.parametrize("value", ["", ".", "..", "a/b", "/"])
    def test_invalid_build_dir(self, value: str) -> None:
        """Test the build directory must be a single relative name."""
        with pytest.raises(ValidationError):
            CompilerSettings(build_dir=value)

    def test_build_dir_trailing_slash(self) -> None:
        """Test trailing slashes are tolerated."""
        assert CompilerSettings(build_dir="bin/").build_dir == "bin"

    def test_unknown_package_manager(self) -> None:
        """Test package manager validation."""
        with pytest.raises(ValidationError, match="Unsupported package manager"):
            CompilerSettings(package_manager="chocolatey")

    def test_timeout_bounds(self) -> None:
        """Test timeout range validation."""
        with pytest.raises(ValidationError):
            CompilerSettings(command_timeout=1)


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_level_is_normalized(self) -> None:
        """Test lower-case levels are accepted."""
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_invalid_level(self) -> None:
        """Test invalid levels are rejected."""
        with pytest.raises(ValidationError):
            LoggingSettings(level="loud")

    def test_file_conversion(self) -> None:
        """Test log file path conversion."""
        assert LoggingSettings(file="logs/godev.log").file == Path("logs/godev.log")
        assert LoggingSettings(file="").file is None


class TestSettingsLoading:
    """Tests for Settings.from_yaml and Settings.load."""

    def test_from_yaml(self, tmp_path: Path) -> None:
        """Test loading sections from YAML."""
        config = tmp_path / "config.yaml"
        config.write_text(
            "compiler:\n"
            "  build_dir: out\n"
            "  cxx_standard: c++20\n"
            "  server_indicators: [express]\n"
            "logging:\n"
            "  level: warning\n"
        )

        settings = Settings.from_yaml(config)

        assert settings.compiler.build_dir == "out"
        assert settings.compiler.cxx_standard == "c++20"
        assert settings.compiler.server_indicators == ["express"]
        assert settings.logging.level == "WARNING"

    def test_missing_sections_use_defaults(self, tmp_path: Path) -> None:
        """Test a partial file."""
        config = tmp_path / "config.yaml"
        config.write_text("logging:\n  use_rich: false\n")

        settings = Settings.from_yaml(config)

        assert settings.compiler.build_dir == "build"
        assert settings.logging.use_rich is False

    def test_invalid_value_in_yaml(self, tmp_path: Path) -> None:
        """Test validation errors surface from YAML values."""
        config = tmp_path / "config.yaml"
        config.write_text("compiler:\n  build_dir: ../escape\n")

        with pytest.raises(ValidationError):
            Settings.from_yaml(config)

    def test_load_prefers_explicit_path(self, tmp_path: Path, isolated_user_config: Path) -> None:
        """Test an explicit file wins over the user config."""
        isolated_user_config.parent.mkdir(parents=True)
        isolated_user_config.write_text("compiler:\n  container_tag: from-home\n")
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("compiler:\n  container_tag: explicit\n")

        assert Settings.load(explicit).compiler.container_tag == "explicit"
        assert Settings.load().compiler.container_tag == "from-home"

    def test_load_defaults_without_files(self) -> None:
        """Test defaults when no user config exists."""
        assert Settings.load().compiler.container_tag == "myapp"

    def test_load_missing_explicit_file(self, tmp_path: Path) -> None:
        """Test a missing explicit file is a configuration error."""
        with pytest.raises(ConfigurationError):
            Settings.load(tmp_path / "nope.yaml")
