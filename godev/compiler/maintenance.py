"""Clean, system info and dependency check operations."""

import platform
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from godev.compiler.classifier import MAKEFILE_NAMES
from godev.compiler.models import PROJECT_TYPES, ProjectType
from godev.compiler.process import CommandRunner
from godev.compiler.scanner import FileScanner
from godev.compiler.toolchain import ToolchainGuard
from godev.core.logger.logger import get_logger

logger = get_logger(__name__)

# Per-ecosystem build and cache directories removed by clean
CLEAN_DIRS = ("target", "dist", "node_modules", "__pycache__", ".pytest_cache")

NOT_INSTALLED = "Not installed"

# (label, version command) shown by info
SYSTEM_TOOLS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("GCC", ("gcc", "--version")),
    ("G++", ("g++", "--version")),
    ("Go", ("go", "version")),
    ("Node.js", ("node", "--version")),
    ("Python", ("python3", "--version")),
    ("Rust", ("cargo", "--version")),
    ("Docker", ("docker", "--version")),
)

CHECKED_TYPES = (
    ProjectType.C,
    ProjectType.CPP,
    ProjectType.GO,
    ProjectType.RUST,
    ProjectType.NODEJS,
    ProjectType.PYTHON,
)


@dataclass
class CleanReport:
    """What a clean run removed."""

    root: Path
    removed: list[Path] = field(default_factory=list)
    make_clean: bool = False

    @property
    def nothing_to_clean(self) -> bool:
        """True when no output directory existed; make clean is not counted."""
        return not self.removed


async def clean_project(
    root: Path,
    build_dir_name: str,
    runner: CommandRunner,
    scanner: FileScanner | None = None,
) -> CleanReport:
    """Remove build outputs and caches from a project.

    Missing directories are not an error, so cleaning twice is safe. The
    Makefile clean target is attempted when a Makefile exists; its failure is
    ignored.

    Args:
        root: Project root.
        build_dir_name: Canonical build directory name.
        runner: Command runner for make clean.
        scanner: File scanner used to find a Makefile.

    Returns:
        CleanReport listing what was removed.
    """
    scanner = scanner or FileScanner()
    root = Path(root).resolve()
    report = CleanReport(root=root)

    for name in (build_dir_name, *CLEAN_DIRS):
        target = root / name
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target, ignore_errors=True)
            report.removed.append(target)
            logger.info(f"Cleaned: {name}")

    makefile = scanner.find_first_of(root, MAKEFILE_NAMES)
    if makefile:
        result = await runner.run(["make", "clean"], cwd=makefile.parent)
        if result.success:
            report.make_clean = True
            logger.info("Make clean completed")
        else:
            logger.debug(f"make clean failed with exit code {result.return_code}, ignoring")

    if report.nothing_to_clean:
        logger.info(f"Nothing to clean in {root}")

    return report


def os_description() -> str:
    """Human-readable host operating system description."""
    try:
        release = platform.freedesktop_os_release()
    except OSError:
        release = {}

    if release.get("PRETTY_NAME"):
        return release["PRETTY_NAME"]
    return platform.platform() or "Unknown"


async def collect_system_info(runner: CommandRunner) -> dict[str, str]:
    """Query the host OS and the installed toolchain versions.

    Args:
        runner: Command runner for version probes.

    Returns:
        Mapping of label to version string (or "Not installed").
    """
    info = {"OS": os_description()}

    for label, command in SYSTEM_TOOLS:
        result = await runner.run(list(command))
        info[label] = result.first_line() if result.success and result.first_line() else NOT_INSTALLED

    return info


async def check_dependencies(guard: ToolchainGuard) -> dict[ProjectType, tuple[str, bool]]:
    """Report whether each compiled or runtime toolchain package is installed.

    Args:
        guard: Toolchain guard used to query packages.

    Returns:
        Mapping of project type to (package name, installed flag).
    """
    report: dict[ProjectType, tuple[str, bool]] = {}

    for project_type in CHECKED_TYPES:
        requirement = PROJECT_TYPES[project_type].toolchain
        if requirement is None:
            continue
        installed = await guard.is_installed(requirement.package, requirement.probe)
        report[project_type] = (requirement.package, installed)

    return report
