"""Custom exception definitions for GoDev."""

from pathlib import Path
from typing import Any


class GodevError(Exception):
    """Base exception for all GoDev errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class DetectionError(GodevError):
    """Raised when no detection rule recognises a project."""

    def __init__(
        self,
        message: str = "Could not detect project type",
        project_path: Path | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize detection error.

        Args:
            message: Error message.
            project_path: Project directory that was inspected.
            details: Additional error details.
        """
        details = details or {}
        if project_path:
            details["project_path"] = str(project_path)
        super().__init__(message, details)


class ToolchainMissingError(GodevError):
    """Raised when a required compiler or runtime is absent and not installed."""

    def __init__(
        self,
        message: str,
        package: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize toolchain error.

        Args:
            message: Error message.
            package: Host package name that is missing.
            details: Additional error details.
        """
        details = details or {}
        if package:
            details["package"] = package
        super().__init__(message, details)
        self.package = package


class BuildError(GodevError):
    """Raised when a build or dependency command fails."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        return_code: int | None = None,
        stderr: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize build error.

        Args:
            message: Error message.
            command: Command line that failed.
            return_code: Exit code of the command.
            stderr: Captured standard error (truncated).
            details: Additional error details.
        """
        details = details or {}
        if command:
            details["command"] = command
        if return_code is not None:
            details["return_code"] = return_code
        super().__init__(message, details)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr or ""


class ArtifactNotFoundError(BuildError):
    """Raised when a build succeeded but produced no locatable executable."""

    def __init__(
        self,
        message: str,
        searched: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize artifact error.

        Args:
            message: Error message.
            searched: Locations that were searched.
            details: Additional error details.
        """
        details = details or {}
        if searched:
            details["searched"] = searched
        super().__init__(message, details=details)


class RunError(GodevError):
    """Raised when a built artifact cannot be executed or opened."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize run error.

        Args:
            message: Error message.
            command: Command the user can run manually.
            details: Additional error details.
        """
        details = details or {}
        if command:
            details["command"] = command
        super().__init__(message, details)
        self.command = command


class ConfigurationError(GodevError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)
