"""Detect, check, build and optionally run a single project."""

from dataclasses import dataclass
from pathlib import Path

from godev.compiler.classifier import ProjectClassifier
from godev.compiler.models import BuildResult, ProjectType, get_descriptor
from godev.compiler.orchestrator import BuildOrchestrator
from godev.compiler.process import CommandRunner
from godev.compiler.runner import Runner
from godev.compiler.scanner import FileScanner, ProjectSurvey, survey_project
from godev.compiler.toolchain import ConfirmCallback, HostEnvironment, ToolchainGuard
from godev.core.config.settings import CompilerSettings
from godev.core.exceptions.errors import DetectionError
from godev.core.logger.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CompileOutcome:
    """Everything a compile invocation produced.

    Attributes:
        project_type: Detected or forced project type.
        rule: Detection rule that decided the type (None when forced).
        build: The build result.
        run_status: Exit status of the run, None when not run.
    """

    project_type: ProjectType
    rule: str | None
    build: BuildResult
    run_status: int | None = None

    @property
    def exit_code(self) -> int:
        """Process exit code for the invocation."""
        return 0 if self.build.success else 1


class SmartCompiler:
    """Runs FileScanner -> ProjectClassifier -> ToolchainGuard ->
    BuildOrchestrator -> Runner for one project."""

    def __init__(
        self,
        settings: CompilerSettings,
        host: HostEnvironment,
        confirm: ConfirmCallback,
        runner: CommandRunner | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            settings: Compiler settings.
            host: Host environment for toolchain checks.
            confirm: Async yes/no callback used for installs and runs.
            runner: Command runner; built from settings if omitted.
        """
        self.settings = settings
        self.confirm = confirm
        self.runner = runner or CommandRunner(timeout=settings.command_timeout)
        self.scanner = FileScanner()
        self.classifier = ProjectClassifier(self.scanner)
        self.guard = ToolchainGuard(host, self.runner, confirm)
        self.orchestrator = BuildOrchestrator(self.runner, self.scanner, settings)
        self.program_runner = Runner(self.runner, platform=host.platform)

    def survey(self, root: Path) -> ProjectSurvey:
        """Summarize the project layout."""
        return survey_project(root, self.scanner)

    def detect(self, root: Path) -> tuple[ProjectType, str]:
        """Detect the project type.

        Raises:
            DetectionError: If no rule matched.
        """
        project_type, rule = self.classifier.explain(root)
        if project_type is None or rule is None:
            raise DetectionError(project_path=root)

        logger.info(
            f"Detected: {get_descriptor(project_type).display_name} project (by {rule})"
        )
        return project_type, rule

    async def compile_project(
        self,
        root: Path,
        project_type: ProjectType | None = None,
        offer_run: bool = True,
    ) -> CompileOutcome:
        """Build a project and offer to run it.

        Args:
            root: Project root directory.
            project_type: Force a project type instead of detecting it.
            offer_run: Ask to run the result after a successful build.

        Returns:
            CompileOutcome for the invocation.

        Raises:
            DetectionError: If the type cannot be detected.
            ToolchainMissingError: If the toolchain is missing and not installed.
        """
        root = Path(root).resolve()
        logger.info(f"Project path: {root}")

        rule: str | None = None
        if project_type is None:
            project_type, rule = self.detect(root)
        else:
            logger.info(f"Using requested project type: {project_type.value}")

        await self.guard.ensure(project_type)

        build_dir = root / self.settings.build_dir
        result = await self.orchestrator.build(project_type, root, build_dir)
        outcome = CompileOutcome(project_type=project_type, rule=rule, build=result)

        if result.success and offer_run:
            outcome.run_status = await self.program_runner.offer(result, self.confirm)

        return outcome
