"""Project detection and build orchestration.

This module provides:
- File discovery that skips dependency and build output directories
- Project type detection (C, C++, Go, Rust, Node.js, Python, web, React, Docker)
- Host toolchain checks with optional installation
- Building and locating artifacts
- Running or opening build results
"""

from godev.compiler.classifier import ProjectClassifier, detect_project_type
from godev.compiler.models import (
    PROJECT_TYPES,
    BuildResult,
    ProjectType,
    RuntimeKind,
    ScanResult,
    ToolchainRequirement,
)
from godev.compiler.orchestrator import BuildOrchestrator
from godev.compiler.pipeline import CompileOutcome, SmartCompiler
from godev.compiler.process import CommandResult, CommandRunner
from godev.compiler.runner import Runner
from godev.compiler.scanner import FileScanner, survey_project
from godev.compiler.toolchain import HostEnvironment, ToolchainGuard

__all__ = [
    "ProjectType",
    "RuntimeKind",
    "ToolchainRequirement",
    "PROJECT_TYPES",
    "ScanResult",
    "BuildResult",
    "FileScanner",
    "survey_project",
    "ProjectClassifier",
    "detect_project_type",
    "HostEnvironment",
    "ToolchainGuard",
    "BuildOrchestrator",
    "Runner",
    "CommandRunner",
    "CommandResult",
    "SmartCompiler",
    "CompileOutcome",
]
