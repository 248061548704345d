"""Data models for project detection, building and running."""

import shlex
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterator


class ProjectType(str, Enum):
    """Supported project ecosystems."""

    C = "c"
    CPP = "cpp"
    GO = "go"
    RUST = "rust"
    NODEJS = "nodejs"
    PYTHON = "python"
    WEB = "web"
    REACT = "react"
    DOCKER = "docker"


class RuntimeKind(str, Enum):
    """How a successful build result is executed."""

    NATIVE = "native"
    INTERPRETER = "interpreter"
    DEV_SERVER = "dev_server"
    BROWSER = "browser"
    CONTAINER = "container"


@dataclass(frozen=True)
class ToolchainRequirement:
    """Host package providing a project type's compiler or runtime.

    Attributes:
        package: Package name as known to Debian-style package managers.
        probe: Command whose output reports the installed version.
    """

    package: str
    probe: tuple[str, ...]


@dataclass(frozen=True)
class ProjectTypeDescriptor:
    """Static description of a project type."""

    project_type: ProjectType
    display_name: str
    toolchain: ToolchainRequirement | None
    extensions: tuple[str, ...]
    runtime: bool = False
    output_suffix: str = ""


C_EXTENSIONS = (".c",)
CPP_EXTENSIONS = (".cpp", ".cc", ".cxx")
NODE_EXTENSIONS = (".js", ".mjs", ".cjs")
JSX_EXTENSIONS = (".jsx", ".tsx")
HTML_EXTENSIONS = (".html",)

PROJECT_TYPES: dict[ProjectType, ProjectTypeDescriptor] = {
    ProjectType.C: ProjectTypeDescriptor(
        project_type=ProjectType.C,
        display_name="C",
        toolchain=ToolchainRequirement("gcc", ("gcc", "--version")),
        extensions=C_EXTENSIONS,
    ),
    ProjectType.CPP: ProjectTypeDescriptor(
        project_type=ProjectType.CPP,
        display_name="C++",
        toolchain=ToolchainRequirement("g++", ("g++", "--version")),
        extensions=CPP_EXTENSIONS,
    ),
    ProjectType.GO: ProjectTypeDescriptor(
        project_type=ProjectType.GO,
        display_name="Go",
        toolchain=ToolchainRequirement("golang", ("go", "version")),
        extensions=(".go",),
    ),
    ProjectType.RUST: ProjectTypeDescriptor(
        project_type=ProjectType.RUST,
        display_name="Rust",
        toolchain=ToolchainRequirement("cargo", ("cargo", "--version")),
        extensions=(".rs",),
        output_suffix="-rust",
    ),
    ProjectType.NODEJS: ProjectTypeDescriptor(
        project_type=ProjectType.NODEJS,
        display_name="Node.js",
        toolchain=ToolchainRequirement("nodejs", ("node", "--version")),
        extensions=NODE_EXTENSIONS,
        runtime=True,
    ),
    ProjectType.PYTHON: ProjectTypeDescriptor(
        project_type=ProjectType.PYTHON,
        display_name="Python",
        toolchain=ToolchainRequirement("python3", ("python3", "--version")),
        extensions=(".py",),
        runtime=True,
    ),
    ProjectType.WEB: ProjectTypeDescriptor(
        project_type=ProjectType.WEB,
        display_name="Static web",
        toolchain=None,
        extensions=HTML_EXTENSIONS,
        runtime=True,
    ),
    ProjectType.REACT: ProjectTypeDescriptor(
        project_type=ProjectType.REACT,
        display_name="React",
        toolchain=ToolchainRequirement("nodejs", ("node", "--version")),
        extensions=JSX_EXTENSIONS,
        runtime=True,
    ),
    ProjectType.DOCKER: ProjectTypeDescriptor(
        project_type=ProjectType.DOCKER,
        display_name="Docker",
        toolchain=ToolchainRequirement("docker.io", ("docker", "--version")),
        extensions=(),
        runtime=True,
    ),
}


def get_descriptor(project_type: ProjectType) -> ProjectTypeDescriptor:
    """Return the static descriptor for a project type."""
    return PROJECT_TYPES[project_type]


@dataclass(frozen=True)
class ScanResult:
    """Files found by a directory walk.

    Attributes:
        root: Directory the walk started from.
        extensions: Extensions that were searched for.
        files: Absolute file paths, in walk order.
    """

    root: Path
    extensions: tuple[str, ...]
    files: tuple[Path, ...] = ()

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.files)

    def __bool__(self) -> bool:
        return bool(self.files)

    def first(self) -> Path | None:
        """Return the first file found, if any."""
        return self.files[0] if self.files else None


# How a native artifact was produced
BUILD_PATH_BUILD_SYSTEM = "build-system"
BUILD_PATH_FALLBACK = "fallback"
BUILD_PATH_DIRECT = "direct"


@dataclass(frozen=True)
class BuildResult:
    """Normalized outcome of a build.

    Attributes:
        success: Whether the build succeeded.
        artifact: Binary path, entry command, HTML file or compound command,
            depending on runtime_kind.
        runtime_kind: How the Runner executes the artifact.
        error_message: Human-readable reason for a failure.
        interpreter: Interpreter name for interpreter results.
        entry_point: Entry file for interpreter results.
        working_dir: Directory commands run from.
        build_path: How a native artifact was produced.
    """

    success: bool
    artifact: str | None = None
    runtime_kind: RuntimeKind | None = None
    error_message: str | None = None
    interpreter: str | None = None
    entry_point: Path | None = None
    working_dir: Path | None = None
    build_path: str | None = None

    def __post_init__(self) -> None:
        if self.success:
            if not self.artifact:
                raise ValueError("A successful build result requires an artifact")
            if self.runtime_kind is None:
                raise ValueError("A successful build result requires a runtime kind")
            if self.error_message:
                raise ValueError("A successful build result cannot carry an error")
        else:
            if not self.error_message:
                raise ValueError("A failed build result requires an error message")
            if self.artifact:
                raise ValueError("A failed build result cannot carry an artifact")

    @classmethod
    def succeeded(
        cls,
        artifact: str | Path,
        runtime_kind: RuntimeKind,
        **kwargs: Any,
    ) -> "BuildResult":
        """Create a successful result."""
        return cls(success=True, artifact=str(artifact), runtime_kind=runtime_kind, **kwargs)

    @classmethod
    def failed(cls, error_message: str) -> "BuildResult":
        """Create a failed result."""
        return cls(success=False, error_message=error_message or "Unknown build error")

    @property
    def steps(self) -> list[list[str]]:
        """Split a compound container command into argv lists."""
        if not self.artifact:
            return []
        return [shlex.split(part) for part in self.artifact.split("&&") if part.strip()]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "success": self.success,
            "artifact": self.artifact,
            "runtime_kind": self.runtime_kind.value if self.runtime_kind else None,
            "error_message": self.error_message,
            "interpreter": self.interpreter,
            "entry_point": str(self.entry_point) if self.entry_point else None,
            "working_dir": str(self.working_dir) if self.working_dir else None,
            "build_path": self.build_path,
        }
