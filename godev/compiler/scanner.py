"""Recursive file discovery for project detection and building.

Both walkers skip hidden directories and the usual dependency and build
output directories. Directories that cannot be read are treated as empty.
"""

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from godev.compiler.models import ScanResult
from godev.core.logger.logger import get_logger

logger = get_logger(__name__)

EXCLUDED_DIRS = frozenset({"node_modules", "build", "target", "dist", "obj"})

# Directories shown by the project survey
SURVEY_DIRS = (
    "src",
    "lib",
    "include",
    "source",
    "headers",
    "css",
    "js",
    "components",
    "Private",
    "Public",
)

SOURCE_EXTENSIONS = (
    ".c",
    ".cpp",
    ".cc",
    ".cxx",
    ".h",
    ".hpp",
    ".go",
    ".rs",
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".py",
    ".html",
    ".css",
)


def _list_dir(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        logger.debug(f"Skipping unreadable directory {directory}: {e}")
        return []


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False


def _is_file(entry: os.DirEntry) -> bool:
    try:
        return entry.is_file()
    except OSError:
        return False


class FileScanner:
    """Walks project trees looking for files by extension or by name."""

    def __init__(self, excluded_dirs: Iterable[str] = EXCLUDED_DIRS) -> None:
        """Initialize the scanner.

        Args:
            excluded_dirs: Directory names never descended into, in addition
                to hidden directories.
        """
        self.excluded_dirs = frozenset(excluded_dirs)

    def _skip(self, name: str) -> bool:
        return name.startswith(".") or name in self.excluded_dirs

    def find_files_recursive(self, root: Path, extensions: Iterable[str]) -> ScanResult:
        """Collect every file under root whose extension is in extensions.

        Matching is case-insensitive. An empty string matches files that have
        no extension at all.

        Args:
            root: Directory to walk.
            extensions: Extensions including the leading dot.

        Returns:
            ScanResult with the matching files in walk order.
        """
        wanted = tuple(ext.lower() for ext in extensions)
        found: list[Path] = []
        pending = [Path(root)]

        while pending:
            current = pending.pop()
            subdirs: list[Path] = []
            for entry in _list_dir(current):
                if _is_dir(entry):
                    if not self._skip(entry.name):
                        subdirs.append(Path(entry.path))
                elif _is_file(entry):
                    if Path(entry.name).suffix.lower() in wanted:
                        found.append(Path(entry.path))
            # Reversed so the work-list pops subdirectories in name order
            pending.extend(reversed(subdirs))

        return ScanResult(root=Path(root), extensions=wanted, files=tuple(found))

    def find_file_recursive(self, root: Path, name: str) -> Path | None:
        """Find a file by exact base name.

        The directory's own entries are checked before any subdirectory,
        then each subdirectory is searched in turn.

        Args:
            root: Directory to search.
            name: Exact file name.

        Returns:
            Path to the first match, or None.
        """
        entries = _list_dir(Path(root))

        for entry in entries:
            if entry.name == name and _is_file(entry):
                return Path(entry.path)

        for entry in entries:
            if _is_dir(entry) and not self._skip(entry.name):
                found = self.find_file_recursive(Path(entry.path), name)
                if found:
                    return found

        return None

    def find_first_of(self, root: Path, names: Iterable[str]) -> Path | None:
        """Return the first file found for each name, tried in order."""
        for name in names:
            found = self.find_file_recursive(root, name)
            if found:
                return found
        return None


@dataclass
class ProjectSurvey:
    """Summary of a project tree for display."""

    root: Path
    root_entries: list[str] = field(default_factory=list)
    source_dirs: dict[str, int] = field(default_factory=dict)
    total_source_files: int = 0
    preview: list[str] = field(default_factory=list)


def survey_project(root: Path, scanner: FileScanner | None = None, preview_size: int = 5) -> ProjectSurvey:
    """Summarize the layout of a project before detection.

    Args:
        root: Project root.
        scanner: Scanner to use.
        preview_size: Number of source files listed in the preview.

    Returns:
        ProjectSurvey for display.
    """
    scanner = scanner or FileScanner()
    survey = ProjectSurvey(root=root)
    survey.root_entries = [entry.name for entry in _list_dir(root)]

    for dir_name in SURVEY_DIRS:
        dir_path = root / dir_name
        if not dir_path.is_dir():
            continue
        count = sum(
            1
            for entry in _list_dir(dir_path)
            if Path(entry.name).suffix.lower() in SOURCE_EXTENSIONS
        )
        if count:
            survey.source_dirs[dir_name] = count

    sources = scanner.find_files_recursive(root, SOURCE_EXTENSIONS)
    survey.total_source_files = len(sources)
    survey.preview = [str(path.relative_to(root)) for path in sources.files[:preview_size]]

    logger.debug(
        f"Surveyed {root}: {survey.total_source_files} source files, "
        f"source dirs {survey.source_dirs}"
    )
    return survey
