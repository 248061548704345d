"""Project type detection.

Detection runs an ordered table of rules, strongest signal first:

1. config-file: an ecosystem manifest anywhere in the tree
2. markup: HTML files, split into React or static web
3. native-build-system: Makefile plus source families, or CMake/autotools
4. file-count: the extension family with the most files
5. directory-convention: C/C++ sources under src/lib/include/source

The first rule that resolves to a type wins. A rule whose gate holds but
which cannot decide falls through to the next one.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from godev.compiler.models import (
    C_EXTENSIONS,
    CPP_EXTENSIONS,
    HTML_EXTENSIONS,
    JSX_EXTENSIONS,
    NODE_EXTENSIONS,
    ProjectType,
    ScanResult,
)
from godev.compiler.scanner import FileScanner
from godev.core.logger.logger import get_logger

logger = get_logger(__name__)

# Marker file -> type, in priority order
CONFIG_MARKERS: tuple[tuple[str, ProjectType], ...] = (
    ("Cargo.toml", ProjectType.RUST),
    ("go.mod", ProjectType.GO),
    ("package.json", ProjectType.NODEJS),
    ("requirements.txt", ProjectType.PYTHON),
    ("setup.py", ProjectType.PYTHON),
    ("pyproject.toml", ProjectType.PYTHON),
    ("vite.config.js", ProjectType.REACT),
    ("vite.config.ts", ProjectType.REACT),
    ("Dockerfile", ProjectType.DOCKER),
    ("docker-compose.yml", ProjectType.DOCKER),
)

MAKEFILE_NAMES = ("Makefile", "makefile", "GNUmakefile")

ALTERNATE_BUILD_MARKERS: tuple[tuple[str, ProjectType], ...] = (
    ("CMakeLists.txt", ProjectType.CPP),
    ("configure", ProjectType.C),
    ("autogen.sh", ProjectType.C),
)

# Families counted by the file-count rule; ties go to the earlier entry
FILE_COUNT_FAMILIES: tuple[tuple[ProjectType, tuple[str, ...]], ...] = (
    (ProjectType.C, C_EXTENSIONS),
    (ProjectType.CPP, CPP_EXTENSIONS),
    (ProjectType.GO, (".go",)),
    (ProjectType.RUST, (".rs",)),
    (ProjectType.NODEJS, NODE_EXTENSIONS),
    (ProjectType.PYTHON, (".py",)),
    (ProjectType.REACT, JSX_EXTENSIONS),
    (ProjectType.WEB, HTML_EXTENSIONS),
)

CONVENTIONAL_SOURCE_DIRS = ("src", "lib", "include", "source")

CPP_HINTS = ("g++", ".cpp")


@dataclass
class DetectionContext:
    """Per-call detection state: the root and memoized scans."""

    root: Path
    scanner: FileScanner
    _scans: dict[tuple[Path, tuple[str, ...]], ScanResult] = field(default_factory=dict)
    _lookups: dict[tuple[Path, str], Path | None] = field(default_factory=dict)

    def files(self, extensions: tuple[str, ...], under: Path | None = None) -> ScanResult:
        """Files with the given extensions under root (or a subdirectory)."""
        base = under or self.root
        key = (base, extensions)
        if key not in self._scans:
            self._scans[key] = self.scanner.find_files_recursive(base, extensions)
        return self._scans[key]

    def find(self, name: str) -> Path | None:
        """Locate a file by name anywhere under root."""
        key = (self.root, name)
        if key not in self._lookups:
            self._lookups[key] = self.scanner.find_file_recursive(self.root, name)
        return self._lookups[key]

    def find_makefile(self) -> Path | None:
        """Locate a Makefile under any of its conventional names."""
        for name in MAKEFILE_NAMES:
            found = self.find(name)
            if found:
                return found
        return None


@dataclass(frozen=True)
class DetectionRule:
    """One row of the detection table.

    Attributes:
        name: Rule name reported in status output.
        predicate: Cheap gate; the resolver only runs when it holds.
        resolver: Returns a type, or None to fall through.
    """

    name: str
    predicate: Callable[[DetectionContext], bool]
    resolver: Callable[[DetectionContext], ProjectType | None]


# =============================================================================
# Rules
# =============================================================================


def _has_config_marker(ctx: DetectionContext) -> bool:
    return any(ctx.find(marker) for marker, _ in CONFIG_MARKERS)


def _resolve_config_marker(ctx: DetectionContext) -> ProjectType | None:
    for marker, project_type in CONFIG_MARKERS:
        if ctx.find(marker):
            logger.debug(f"Found config marker {marker}")
            return project_type
    return None


def _has_html(ctx: DetectionContext) -> bool:
    return bool(ctx.files(HTML_EXTENSIONS))


def _resolve_markup(ctx: DetectionContext) -> ProjectType | None:
    if ctx.files(JSX_EXTENSIONS):
        return ProjectType.REACT

    has_node_modules = (ctx.root / "node_modules").exists()
    has_manifest = (ctx.root / "package.json").exists()
    if not has_node_modules and not has_manifest:
        return ProjectType.WEB

    return None


def _has_native_build_descriptor(ctx: DetectionContext) -> bool:
    if ctx.find_makefile():
        return True
    return any(ctx.find(marker) for marker, _ in ALTERNATE_BUILD_MARKERS)


def _resolve_native_build(ctx: DetectionContext) -> ProjectType | None:
    makefile = ctx.find_makefile()
    if makefile:
        has_c = bool(ctx.files(C_EXTENSIONS))
        has_cpp = bool(ctx.files(CPP_EXTENSIONS))

        if has_cpp and not has_c:
            return ProjectType.CPP
        if has_c and not has_cpp:
            return ProjectType.C
        if has_c and has_cpp:
            # Mixed trees build as C++ whether or not the Makefile says so
            if makefile_prefers_cpp(makefile):
                logger.debug(f"{makefile.name} invokes the C++ toolchain")
            else:
                logger.debug(f"No compiler hint in {makefile.name}, assuming C++ for mixed sources")
            return ProjectType.CPP

    for marker, project_type in ALTERNATE_BUILD_MARKERS:
        if ctx.find(marker):
            logger.debug(f"Found build system marker {marker}")
            return project_type

    return None


def makefile_prefers_cpp(makefile: Path) -> bool:
    """Check whether a Makefile invokes the C++ toolchain."""
    try:
        content = makefile.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
    return any(hint in content for hint in CPP_HINTS)


def _always(ctx: DetectionContext) -> bool:
    return True


def _resolve_file_count(ctx: DetectionContext) -> ProjectType | None:
    best: ProjectType | None = None
    best_count = 0

    for project_type, extensions in FILE_COUNT_FAMILIES:
        count = len(ctx.files(extensions))
        if count > best_count:
            best, best_count = project_type, count

    if best is not None:
        logger.debug(f"Detected by file count: {best_count} {best.value} files")
    return best


def _has_conventional_dir(ctx: DetectionContext) -> bool:
    return any((ctx.root / name).is_dir() for name in CONVENTIONAL_SOURCE_DIRS)


def _resolve_directory_convention(ctx: DetectionContext) -> ProjectType | None:
    for name in CONVENTIONAL_SOURCE_DIRS:
        directory = ctx.root / name
        if not directory.is_dir():
            continue
        if ctx.files(CPP_EXTENSIONS, under=directory):
            return ProjectType.CPP
        if ctx.files(C_EXTENSIONS, under=directory):
            return ProjectType.C
    return None


DEFAULT_RULES: tuple[DetectionRule, ...] = (
    DetectionRule("config-file", _has_config_marker, _resolve_config_marker),
    DetectionRule("markup", _has_html, _resolve_markup),
    DetectionRule("native-build-system", _has_native_build_descriptor, _resolve_native_build),
    DetectionRule("file-count", _always, _resolve_file_count),
    DetectionRule("directory-convention", _has_conventional_dir, _resolve_directory_convention),
)


class ProjectClassifier:
    """Infers a project's ecosystem from its file tree."""

    def __init__(
        self,
        scanner: FileScanner | None = None,
        rules: tuple[DetectionRule, ...] = DEFAULT_RULES,
    ) -> None:
        """Initialize the classifier.

        Args:
            scanner: File scanner used for all lookups.
            rules: Ordered detection table.
        """
        self.scanner = scanner or FileScanner()
        self.rules = rules

    def explain(self, root: Path) -> tuple[ProjectType | None, str | None]:
        """Detect the project type and report which rule decided it.

        Args:
            root: Project root directory.

        Returns:
            Tuple of (project type, rule name), both None when nothing matched.
        """
        ctx = DetectionContext(root=Path(root), scanner=self.scanner)

        for rule in self.rules:
            if not rule.predicate(ctx):
                continue
            project_type = rule.resolver(ctx)
            if project_type is not None:
                return project_type, rule.name
            logger.debug(f"Rule {rule.name} matched but could not decide, continuing")

        return None, None

    def detect(self, root: Path) -> ProjectType | None:
        """Detect the project type of a directory.

        Args:
            root: Project root directory.

        Returns:
            Detected ProjectType, or None when no rule matched.
        """
        project_type, _ = self.explain(root)
        return project_type


def detect_project_type(root: Path) -> ProjectType | None:
    """Convenience function to detect a project type.

    Args:
        root: Project root directory.

    Returns:
        Detected ProjectType, or None.
    """
    return ProjectClassifier().detect(root)
