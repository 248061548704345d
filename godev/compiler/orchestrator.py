"""Build orchestration for detected projects.

The orchestrator turns a project type and root directory into a
BuildResult. Compiled projects produce an executable in the canonical build
directory; runtime projects produce an entry command, a page to open, a dev
server command or a container command sequence.
"""

import json
import re
import shlex
import shutil
import tomllib
from collections.abc import Awaitable, Callable
from pathlib import Path

from godev.compiler.classifier import MAKEFILE_NAMES
from godev.compiler.models import (
    BUILD_PATH_BUILD_SYSTEM,
    BUILD_PATH_DIRECT,
    BUILD_PATH_FALLBACK,
    HTML_EXTENSIONS,
    NODE_EXTENSIONS,
    BuildResult,
    ProjectType,
    RuntimeKind,
    get_descriptor,
)
from godev.compiler.process import CommandRunner
from godev.compiler.scanner import FileScanner
from godev.core.config.settings import CompilerSettings
from godev.core.exceptions.errors import ArtifactNotFoundError, BuildError, GodevError
from godev.core.logger.logger import get_logger

logger = get_logger(__name__)

# Searched in order, relative to the Makefile, after a successful make
MAKE_OUTPUT_DIRS = (".", "build", "bin", "out", "dist")

# Suffixes a native executable may carry
BINARY_SUFFIXES = ("", ".out", ".bin", ".exe")

INCLUDE_DIR_NAMES = ("include", "inc", "headers", "src")

NODE_PRIORITY_FILES = (
    "app.js",
    "server.js",
    "index.js",
    "main.js",
    "src/app.js",
    "src/server.js",
    "src/index.js",
    "src/main.js",
    "lib/app.js",
    "lib/server.js",
    "lib/index.js",
    "lib/main.js",
)

# Client-side asset directories never hold the server entry point
CLIENT_ASSET_DIRS = frozenset({"public", "static", "assets", "css", "js", "node_modules"})

MAIN_FILE_NAMES = ("main", "index", "app", "server")

NODE_SCRIPT_PATTERN = re.compile(r"node\s+([^\s&|;]+)")

MAX_ERROR_OUTPUT = 1000

NATIVE_COMPILERS = {
    ProjectType.C: "gcc",
    ProjectType.CPP: "g++",
}


def is_executable_file(path: Path) -> bool:
    """Check for a regular file with any execute bit set."""
    try:
        return path.is_file() and bool(path.stat().st_mode & 0o111)
    except OSError:
        return False


def output_name(project_type: ProjectType, root: Path) -> str:
    """Name of the artifact placed in the build directory."""
    base = root.name or "app"
    return f"{base}{get_descriptor(project_type).output_suffix}"


def _describe_failure(error: GodevError) -> str:
    message = error.message
    stderr = getattr(error, "stderr", "")
    if stderr and stderr.strip():
        message = f"{message}\n{stderr.strip()[:MAX_ERROR_OUTPUT]}"
    return message


class BuildOrchestrator:
    """Builds a project according to its detected type."""

    def __init__(
        self,
        runner: CommandRunner,
        scanner: FileScanner | None = None,
        settings: CompilerSettings | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            runner: Command runner for compilers and installers.
            scanner: File scanner for locating sources and manifests.
            settings: Compiler settings (flags, indicators, container options).
        """
        self.runner = runner
        self.scanner = scanner or FileScanner()
        self.settings = settings or CompilerSettings()
        self._handlers: dict[ProjectType, Callable[[Path, Path], Awaitable[BuildResult]]] = {
            ProjectType.C: self._build_c,
            ProjectType.CPP: self._build_cpp,
            ProjectType.GO: self._build_go,
            ProjectType.RUST: self._build_rust,
            ProjectType.NODEJS: self._prepare_node,
            ProjectType.PYTHON: self._prepare_python,
            ProjectType.WEB: self._prepare_web,
            ProjectType.REACT: self._prepare_react,
            ProjectType.DOCKER: self._prepare_docker,
        }

    async def build(self, project_type: ProjectType, root: Path, build_dir: Path) -> BuildResult:
        """Build a project.

        Never raises: every failure is returned as a failed BuildResult.

        Args:
            project_type: Detected project type.
            root: Project root directory.
            build_dir: Canonical build output directory.

        Returns:
            BuildResult describing the artifact or the failure.
        """
        root = Path(root)
        build_dir = Path(build_dir)
        output = build_dir / output_name(project_type, root)

        try:
            build_dir.mkdir(parents=True, exist_ok=True)
            result = await self._handlers[project_type](root, output)
        except GodevError as e:
            logger.error(f"Build failed: {e.message}")
            return BuildResult.failed(_describe_failure(e))
        except OSError as e:
            logger.error(f"Build failed: {e}")
            return BuildResult.failed(str(e))

        logger.info(f"Build succeeded: {result.artifact}")
        return result

    # =========================================================================
    # Shared helpers
    # =========================================================================

    async def _run_checked(self, cmd: list[str], cwd: Path, description: str) -> None:
        logger.info(f"{description}: {shlex.join(cmd)}")
        result = await self.runner.run(cmd, cwd=cwd)
        if not result.success:
            raise BuildError(
                f"{description} failed with exit code {result.return_code}",
                command=result.command,
                return_code=result.return_code,
                stderr=result.stderr or result.stdout,
            )
        logger.debug(f"{description} finished in {result.duration_seconds:.1f}s")

    async def _install_dependencies(self, cmd: list[str], cwd: Path, label: str) -> None:
        await self._run_checked(cmd, cwd, f"Installing {label}")

    def find_main_file(self, root: Path, extensions: tuple[str, ...]) -> Path:
        """Pick the most likely entry file among sources.

        Files whose name contains main, index, app or server are preferred,
        in that order; otherwise the first file found.

        Raises:
            BuildError: If no file with the extensions exists.
        """
        files = self.scanner.find_files_recursive(root, extensions)
        if not files:
            raise BuildError(f"No {'/'.join(extensions)} files found")

        for name in MAIN_FILE_NAMES:
            for path in files:
                if name in path.name.lower():
                    return path

        return files.first()

    # =========================================================================
    # Native (C / C++)
    # =========================================================================

    async def _build_c(self, root: Path, output: Path) -> BuildResult:
        return await self._build_native(ProjectType.C, root, output)

    async def _build_cpp(self, root: Path, output: Path) -> BuildResult:
        return await self._build_native(ProjectType.CPP, root, output)

    async def _build_native(self, project_type: ProjectType, root: Path, output: Path) -> BuildResult:
        display = get_descriptor(project_type).display_name
        build_path = BUILD_PATH_DIRECT

        makefile = self.scanner.find_first_of(root, MAKEFILE_NAMES)
        if makefile:
            logger.info(f"Using {makefile.name} for {display} project")
            make_dir = makefile.parent
            result = await self.runner.run(["make"], cwd=make_dir)

            if result.success:
                executable = self.find_built_executable(make_dir, exclude=output)
                if executable:
                    self._place_artifact(executable, output)
                    logger.info(f"Built executable: {executable.name}")
                    return BuildResult.succeeded(
                        output,
                        RuntimeKind.NATIVE,
                        working_dir=root,
                        build_path=BUILD_PATH_BUILD_SYSTEM,
                    )
                logger.warning(
                    "make succeeded but no executable was found, "
                    "falling back to direct compilation"
                )
            else:
                logger.warning(
                    f"make failed with exit code {result.return_code}, "
                    "falling back to direct compilation"
                )
            build_path = BUILD_PATH_FALLBACK

        await self._compile_direct(project_type, root, output)

        if build_path == BUILD_PATH_FALLBACK:
            logger.info("Direct compilation succeeded after build system fallback")

        return BuildResult.succeeded(
            output,
            RuntimeKind.NATIVE,
            working_dir=root,
            build_path=build_path,
        )

    def find_built_executable(self, make_dir: Path, exclude: Path | None = None) -> Path | None:
        """Find the executable a build system produced.

        Looks in the Makefile directory and its build/bin/out/dist
        subdirectories, in that order. The canonical output path is passed as
        exclude so an artifact left by an earlier run is never taken for
        fresh make output.

        Args:
            make_dir: Directory holding the Makefile.
            exclude: Path never returned as a candidate.

        Returns:
            The first executable found, or None.
        """
        excluded = exclude.resolve() if exclude is not None else None
        for dir_name in MAKE_OUTPUT_DIRS:
            search_dir = make_dir / dir_name
            if not search_dir.is_dir():
                continue
            try:
                candidates = sorted(search_dir.iterdir())
            except OSError:
                continue
            for candidate in candidates:
                if excluded is not None and candidate.resolve() == excluded:
                    continue
                if candidate.suffix.lower() in BINARY_SUFFIXES and is_executable_file(candidate):
                    return candidate
        return None

    def include_directories(self, root: Path, sources: list[Path]) -> list[Path]:
        """Header search directories for direct compilation."""
        directories: list[Path] = [root]
        for source in sources:
            if source.parent not in directories:
                directories.append(source.parent)
        for name in INCLUDE_DIR_NAMES:
            candidate = root / name
            if candidate.is_dir() and candidate not in directories:
                directories.append(candidate)
        return directories

    async def _compile_direct(self, project_type: ProjectType, root: Path, output: Path) -> None:
        descriptor = get_descriptor(project_type)
        sources = list(self.scanner.find_files_recursive(root, descriptor.extensions))
        if not sources:
            raise BuildError(f"No {descriptor.display_name} source files found in project directory")

        logger.info(f"Found {len(sources)} {descriptor.display_name} source files")

        compiler = NATIVE_COMPILERS[project_type]
        includes = [f"-I{directory}" for directory in self.include_directories(root, sources)]
        if project_type == ProjectType.CPP:
            flags = [*self.settings.cxx_flags, f"-std={self.settings.cxx_standard}"]
        else:
            flags = list(self.settings.c_flags)

        output.parent.mkdir(parents=True, exist_ok=True)
        cmd = [compiler, *(str(source) for source in sources), *includes, "-o", str(output), *flags]
        await self._run_checked(cmd, root, "Compiling")

        if not output.is_file():
            raise ArtifactNotFoundError(
                f"{compiler} reported success but produced no output",
                searched=[str(output)],
            )
        output.chmod(0o755)

    def _place_artifact(self, executable: Path, output: Path) -> None:
        output.parent.mkdir(parents=True, exist_ok=True)
        if executable.resolve() != output.resolve():
            shutil.copy2(executable, output)
        output.chmod(0o755)

    # =========================================================================
    # Go / Rust
    # =========================================================================

    async def _build_go(self, root: Path, output: Path) -> BuildResult:
        await self._run_checked(["go", "build", "-o", str(output)], root, "Building Go project")

        if not output.is_file():
            raise ArtifactNotFoundError(
                "go build reported success but produced no binary",
                searched=[str(output)],
            )
        output.chmod(0o755)

        return BuildResult.succeeded(output, RuntimeKind.NATIVE, working_dir=root, build_path=BUILD_PATH_DIRECT)

    async def _build_rust(self, root: Path, output: Path) -> BuildResult:
        manifest = self.scanner.find_file_recursive(root, "Cargo.toml")
        cargo_root = manifest.parent if manifest else root

        await self._run_checked(["cargo", "build", "--release"], cargo_root, "Building Rust project")

        executable = self.find_rust_binary(cargo_root, manifest, root)
        self._place_artifact(executable, output)
        logger.info(f"Built executable: {executable.name}")

        return BuildResult.succeeded(output, RuntimeKind.NATIVE, working_dir=root, build_path=BUILD_PATH_DIRECT)

    def find_rust_binary(self, cargo_root: Path, manifest: Path | None, root: Path) -> Path:
        """Locate the release binary cargo produced.

        The package name from Cargo.toml is tried first, then the directory
        names; failing that, any executable directly in target/release.

        Raises:
            ArtifactNotFoundError: If no binary exists.
        """
        release_dir = cargo_root / "target" / "release"

        names: list[str] = []
        package_name = _cargo_package_name(manifest) if manifest else None
        for name in (package_name, cargo_root.name, root.name):
            if name and name not in names:
                names.append(name)

        for name in names:
            for suffix in ("", ".exe"):
                candidate = release_dir / f"{name}{suffix}"
                if is_executable_file(candidate):
                    return candidate

        if release_dir.is_dir():
            for candidate in sorted(release_dir.iterdir()):
                if candidate.suffix.lower() in ("", ".exe") and is_executable_file(candidate):
                    return candidate

        raise ArtifactNotFoundError(
            "Could not find Rust build output",
            searched=[str(release_dir / name) for name in names] + [str(release_dir)],
        )

    # =========================================================================
    # Node.js
    # =========================================================================

    async def _prepare_node(self, root: Path, output: Path) -> BuildResult:
        manifest = self.scanner.find_file_recursive(root, "package.json")
        if manifest:
            await self._install_dependencies(["npm", "install"], manifest.parent, "npm dependencies")

        entry = self.find_node_entry(root, manifest)
        return BuildResult.succeeded(
            shlex.join(["node", str(entry)]),
            RuntimeKind.INTERPRETER,
            interpreter="node",
            entry_point=entry,
            working_dir=manifest.parent if manifest else root,
        )

    def find_node_entry(self, root: Path, manifest: Path | None = None) -> Path:
        """Determine a Node.js project's entry file.

        Order: manifest main, start/dev script target, conventional file
        names, server-looking scripts outside asset directories, first root
        script, first script anywhere.

        Raises:
            BuildError: If the project has no script files.
        """
        if manifest:
            entry = self._entry_from_manifest(manifest)
            if entry:
                return entry

        for relative in NODE_PRIORITY_FILES:
            candidate = root / relative
            if candidate.is_file():
                logger.info(f"Found main file: {relative}")
                return candidate

        scripts = self.scanner.find_files_recursive(root, NODE_EXTENSIONS)
        if not scripts:
            raise BuildError("No JavaScript files found in project directory")

        server_files = [path for path in scripts if not self._in_client_dir(root, path)]
        if server_files:
            for path in server_files:
                if self._looks_like_server(path):
                    logger.info(f"Detected server file: {path.relative_to(root)}")
                    return path
            logger.info(f"Using first server file: {server_files[0].relative_to(root)}")
            return server_files[0]

        root_scripts = [path for path in scripts if path.parent == root]
        if root_scripts:
            logger.warning("Could not identify main server file, using first root script")
            return root_scripts[0]

        logger.warning("Using first script found")
        return scripts.first()

    def _entry_from_manifest(self, manifest: Path) -> Path | None:
        try:
            package = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {manifest.name} ({e}), falling back to file search")
            return None

        if not isinstance(package, dict):
            return None

        base = manifest.parent
        main = package.get("main")
        if isinstance(main, str) and main and (base / main).is_file():
            logger.info(f"Using main from package.json: {main}")
            return base / main

        scripts = package.get("scripts")
        if isinstance(scripts, dict):
            script = scripts.get("start") or scripts.get("dev")
            if isinstance(script, str):
                match = NODE_SCRIPT_PATTERN.search(script)
                if match:
                    target = match.group(1).strip("'\"")
                    if (base / target).is_file():
                        logger.info(f"Using main from start script: {target}")
                        return base / target

        return None

    @staticmethod
    def _in_client_dir(root: Path, path: Path) -> bool:
        parts = path.relative_to(root).parts[:-1]
        return any(part.lower() in CLIENT_ASSET_DIRS for part in parts)

    def _looks_like_server(self, path: Path) -> bool:
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return False
        if "require(" not in content and "import" not in content:
            return False
        return any(indicator in content for indicator in self.settings.server_indicators)

    # =========================================================================
    # Python / web / React / Docker
    # =========================================================================

    async def _prepare_python(self, root: Path, output: Path) -> BuildResult:
        requirements = self.scanner.find_file_recursive(root, "requirements.txt")
        if requirements:
            await self._install_dependencies(
                ["pip3", "install", "-r", "requirements.txt"],
                requirements.parent,
                "Python dependencies",
            )

        entry = self.find_main_file(root, (".py",))
        logger.info(f"Python entry point: {entry.relative_to(root)}")
        return BuildResult.succeeded(
            shlex.join(["python3", str(entry)]),
            RuntimeKind.INTERPRETER,
            interpreter="python3",
            entry_point=entry,
            working_dir=root,
        )

    async def _prepare_web(self, root: Path, output: Path) -> BuildResult:
        pages = self.scanner.find_files_recursive(root, HTML_EXTENSIONS)
        if not pages:
            raise BuildError("No HTML files found in web project")

        main_page = next(
            (page for page in pages if "index" in page.name.lower() or "main" in page.name.lower()),
            pages.first(),
        )
        logger.info(f"Main page: {main_page.relative_to(root)}")
        return BuildResult.succeeded(main_page, RuntimeKind.BROWSER, working_dir=main_page.parent)

    async def _prepare_react(self, root: Path, output: Path) -> BuildResult:
        manifest = self.scanner.find_file_recursive(root, "package.json")
        if manifest:
            await self._install_dependencies(["npm", "install"], manifest.parent, "React dependencies")

        logger.info("React project prepared, run with: npm run dev")
        return BuildResult.succeeded(
            "npm run dev",
            RuntimeKind.DEV_SERVER,
            working_dir=manifest.parent if manifest else root,
        )

    async def _prepare_docker(self, root: Path, output: Path) -> BuildResult:
        dockerfile = self.scanner.find_file_recursive(root, "Dockerfile")
        if not dockerfile:
            raise BuildError("No Dockerfile found")

        tag = self.settings.container_tag
        build_cmd = shlex.join(["docker", "build", "-t", tag, "."])
        run_cmd = shlex.join(["docker", "run", "-p", self.settings.container_ports, tag])
        logger.info(f"Docker project: {build_cmd} then {run_cmd}")

        return BuildResult.succeeded(
            f"{build_cmd} && {run_cmd}",
            RuntimeKind.CONTAINER,
            working_dir=dockerfile.parent,
        )


def _cargo_package_name(manifest: Path) -> str | None:
    try:
        with open(manifest, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug(f"Could not parse {manifest}: {e}")
        return None
    package = data.get("package")
    if isinstance(package, dict) and isinstance(package.get("name"), str):
        return package["name"]
    return None
