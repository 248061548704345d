"""Exception definitions module."""

from godev.core.exceptions.errors import (
    ArtifactNotFoundError,
    BuildError,
    ConfigurationError,
    DetectionError,
    GodevError,
    RunError,
    ToolchainMissingError,
)

__all__ = [
    "GodevError",
    "DetectionError",
    "ToolchainMissingError",
    "BuildError",
    "ArtifactNotFoundError",
    "RunError",
    "ConfigurationError",
]
