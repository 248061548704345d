"""Application settings using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from godev.core.config.loader import ConfigLoader

DEFAULT_SERVER_INDICATORS = [
    "express",
    "http.createServer",
    "app.listen",
    "server.listen",
    "koa",
    "fastify",
    "hapi",
    "sails",
    "meteor",
    "listen(3000)",
    "listen(port)",
    "createServer",
]

USER_CONFIG_PATH = Path.home() / ".godev" / "config.yaml"

SUPPORTED_PACKAGE_MANAGERS = {"apt", "dnf", "yum", "zypper", "pacman", "apk", "brew"}


class CompilerSettings(BaseSettings):
    """Build and run configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="GODEV_COMPILER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    build_dir: str = Field(
        default="build",
        description="Canonical build output directory, relative to the project root",
    )
    command_timeout: int = Field(
        default=600,
        ge=10,
        le=7200,
        description="Timeout in seconds for compile and install commands",
    )
    c_flags: list[str] = Field(
        default_factory=lambda: ["-Wall", "-Wextra"],
        description="Flags passed to the C compiler on direct compilation",
    )
    cxx_flags: list[str] = Field(
        default_factory=lambda: ["-Wall", "-Wextra"],
        description="Flags passed to the C++ compiler on direct compilation",
    )
    cxx_standard: str = Field(
        default="c++17",
        description="C++ language standard for direct compilation",
    )
    server_indicators: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SERVER_INDICATORS),
        description="Substrings marking a Node.js file as a server entry point",
    )
    container_tag: str = Field(
        default="myapp",
        description="Image tag used for container builds",
    )
    container_ports: str = Field(
        default="3000:3000",
        description="Port mapping used when running a container",
    )
    package_manager: str | None = Field(
        default=None,
        description="Host package manager override (apt, dnf, pacman, ...)",
    )

    @field_validator("build_dir")
    @classmethod
    def validate_build_dir(cls, v: str) -> str:
        """Build dir must be a single relative directory name."""
        v = v.strip().strip("/")
        if not v or "/" in v or v in {".", ".."}:
            raise ValueError(f"Invalid build directory name: {v!r}")
        return v

    @field_validator("package_manager", mode="before")
    @classmethod
    def validate_package_manager(cls, v: str | None) -> str | None:
        """Validate package manager override."""
        if v is None or v == "":
            return None
        v_lower = v.lower()
        if v_lower not in SUPPORTED_PACKAGE_MANAGERS:
            raise ValueError(
                f"Unsupported package manager: {v}. "
                f"Must be one of {sorted(SUPPORTED_PACKAGE_MANAGERS)}"
            )
        return v_lower


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="GODEV_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default="%(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="GODEV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    compiler: CompilerSettings = Field(default_factory=CompilerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.
        """
        loader = ConfigLoader(path)
        loader.load()

        return cls(
            compiler=CompilerSettings(**loader.compiler_options()),
            logging=LoggingSettings(**loader.section("logging")),
        )

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings.

        Priority: explicit path > ~/.godev/config.yaml > environment and defaults.

        Args:
            path: Optional explicit YAML configuration file.

        Returns:
            Settings instance.
        """
        if path is not None:
            return cls.from_yaml(path)

        if USER_CONFIG_PATH.exists():
            return cls.from_yaml(USER_CONFIG_PATH)

        return cls()
