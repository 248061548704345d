"""Main CLI entry point for GoDev."""

import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from godev.cli.display import (
    console,
    show_banner,
    show_build_result,
    show_dependency_report,
    show_error,
    show_goodbye,
    show_info,
    show_success,
    show_survey,
    show_system_info,
)
from godev.cli.prompts import (
    always_yes,
    confirm_async,
    prompt_continue,
    prompt_project_path,
    select_main_menu_action,
    select_project_type,
)
from godev.compiler.maintenance import check_dependencies, clean_project, collect_system_info
from godev.compiler.models import ProjectType
from godev.compiler.pipeline import CompileOutcome, SmartCompiler
from godev.compiler.process import CommandRunner
from godev.compiler.toolchain import HostEnvironment, ToolchainGuard
from godev.core.config.settings import Settings
from godev.core.exceptions.errors import ConfigurationError, DetectionError, ToolchainMissingError
from godev.core.logger.logger import setup_logging

LANG_HINT = "Try specifying the language manually with: godev-compile build --lang c"


def load_settings(config_path: Path | None, debug: bool = False) -> Settings:
    """Load settings and configure logging, exiting on bad configuration."""
    try:
        settings = Settings.load(config_path)
    except (ConfigurationError, ValidationError) as e:
        show_error("Configuration Error", str(e))
        sys.exit(1)

    setup_logging(settings.logging, debug=debug)
    return settings


async def _compile_and_run(
    compiler: SmartCompiler,
    root: Path,
    project_type: ProjectType | None,
    offer_run: bool,
) -> CompileOutcome:
    outcome = await compiler.compile_project(root, project_type, offer_run=False)
    show_build_result(outcome.project_type, outcome.build)

    if offer_run and outcome.build.success:
        outcome.run_status = await compiler.program_runner.offer(outcome.build, compiler.confirm)

    return outcome


def run_build(
    settings: Settings,
    root: Path,
    project_type: ProjectType | None = None,
    offer_run: bool = True,
    assume_yes: bool = False,
) -> int:
    """Run the build pipeline for one project.

    Args:
        settings: Application settings.
        root: Project root directory.
        project_type: Forced project type, or None to detect.
        offer_run: Offer to run the result after a successful build.
        assume_yes: Answer every confirmation with yes.

    Returns:
        Process exit code.
    """
    root = Path(root).resolve()
    confirm = always_yes if assume_yes else confirm_async
    host = HostEnvironment.detect(settings.compiler.package_manager)
    compiler = SmartCompiler(settings.compiler, host, confirm)

    show_survey(compiler.survey(root))

    try:
        outcome = asyncio.run(_compile_and_run(compiler, root, project_type, offer_run))
    except DetectionError as e:
        show_error("Detection Failed", f"{e.message} in {root}\n{LANG_HINT}")
        return 1
    except ToolchainMissingError as e:
        show_error("Toolchain Missing", e.message)
        return 1

    if outcome.run_status:
        console.print(f"[yellow]Program finished with exit code {outcome.run_status}[/]")

    return outcome.exit_code


def run_clean(settings: Settings, root: Path) -> None:
    """Remove build outputs from a project and report what was removed."""
    runner = CommandRunner(timeout=settings.compiler.command_timeout)
    report = asyncio.run(clean_project(Path(root), settings.compiler.build_dir, runner))

    if report.nothing_to_clean:
        message = f"Nothing to clean in {report.root}"
        if report.make_clean:
            message += "\nRan make clean"
        show_info("Clean", message)
        return

    lines = [f"Removed {path.name}/" for path in report.removed]
    if report.make_clean:
        lines.append("Ran make clean")
    show_success("Clean Complete", "\n".join(lines))


def run_info(settings: Settings) -> None:
    """Show the host OS and toolchain versions."""
    runner = CommandRunner(timeout=settings.compiler.command_timeout)
    show_system_info(asyncio.run(collect_system_info(runner)))


def run_check_deps(settings: Settings) -> None:
    """Show which toolchain packages are installed."""
    runner = CommandRunner(timeout=settings.compiler.command_timeout)
    host = HostEnvironment.detect(settings.compiler.package_manager)
    guard = ToolchainGuard(host, runner, confirm_async)
    show_dependency_report(asyncio.run(check_dependencies(guard)))


def run_interactive_mode(settings: Settings) -> None:
    """Run the full interactive CLI mode with main menu."""
    show_banner()

    while True:
        try:
            action = select_main_menu_action()

            if action is None or action == "exit":
                show_goodbye()
                break

            elif action == "build":
                console.print()
                console.rule("[bold cyan]Build Project[/]")
                console.print()

                root = prompt_project_path()
                if root is None:
                    continue
                project_type = select_project_type()
                run_build(settings, root, project_type)

            elif action == "clean":
                console.print()
                console.rule("[bold cyan]Clean Build Outputs[/]")
                console.print()

                root = prompt_project_path()
                if root is None:
                    continue
                run_clean(settings, root)

            elif action == "info":
                run_info(settings)

            elif action == "check-deps":
                run_check_deps(settings)

            if not prompt_continue():
                show_goodbye()
                break

        except KeyboardInterrupt:
            console.print()
            show_info("Interrupted", "Operation cancelled by user.")
            break


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.option("--interactive", "-i", is_flag=True, help="Run in interactive mode")
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option("--debug", is_flag=True, help="Show debug logging")
@click.pass_context
def main(
    ctx: click.Context, config_path: Path | None, interactive: bool, version: bool, debug: bool
) -> None:
    """GoDev - Smart multi-language compiler.

    Detects the project type in a directory, builds it and offers to run it.
    Run without arguments to start interactive mode.
    """
    if version:
        from godev import __version__

        click.echo(f"GoDev version {__version__}")
        ctx.exit()

    ctx.obj = load_settings(config_path, debug=debug)

    if interactive or ctx.invoked_subcommand is None:
        run_interactive_mode(ctx.obj)


@main.command()
@click.option(
    "--path",
    "-p",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project directory",
)
@click.option(
    "--lang",
    type=click.Choice([t.value for t in ProjectType]),
    help="Skip detection and build as this project type",
)
@click.option("--run/--no-run", default=True, help="Offer to run the result after building")
@click.option("--yes", "-y", is_flag=True, help="Answer yes to every confirmation")
@click.pass_obj
def build(settings: Settings, path: Path, lang: str | None, run: bool, yes: bool) -> None:
    """Detect, build and optionally run a project.

    Example:
        godev-compile build --path ./myproject
    """
    project_type = ProjectType(lang) if lang else None
    exit_code = run_build(settings, path, project_type, offer_run=run, assume_yes=yes)
    if exit_code != 0:
        sys.exit(exit_code)


@main.command()
@click.option(
    "--path",
    "-p",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project directory",
)
@click.pass_obj
def clean(settings: Settings, path: Path) -> None:
    """Remove build outputs and dependency caches."""
    run_clean(settings, path)


@main.command()
@click.pass_obj
def info(settings: Settings) -> None:
    """Show host OS and compiler versions."""
    run_info(settings)


@main.command("check-deps")
@click.pass_obj
def check_deps(settings: Settings) -> None:
    """Check which compiler packages are installed."""
    run_check_deps(settings)


if __name__ == "__main__":
    main()
