"""Display components for CLI using Rich."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from godev.compiler.models import PROJECT_TYPES, BuildResult, ProjectType
from godev.compiler.scanner import ProjectSurvey

console = Console()

BANNER = r"""
[bold blue]
   ______      ____
  / ____/___  / __ \___ _   __
 / / __/ __ \/ / / / _ \ | / /
/ /_/ / /_/ / /_/ /  __/ |/ /
\____/\____/_____/\___/|___/
[/bold blue]
[dim]Smart multi-language compiler[/dim]
"""


def show_banner() -> None:
    """Display the GoDev banner."""
    console.print()
    console.print(Panel(BANNER, border_style="blue", padding=(0, 2)))
    console.print()


def show_success(title: str, message: str) -> None:
    """Display a success message."""
    console.print()
    console.print(
        Panel(
            f"[bold green]{escape(message)}[/]",
            title=f"[bold]{title}[/]",
            border_style="green",
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def show_info(title: str, message: str) -> None:
    """Display an info message."""
    console.print()
    console.print(
        Panel(
            escape(message),
            title=f"[bold]{title}[/]",
            border_style="blue",
        )
    )


def show_survey(survey: ProjectSurvey) -> None:
    """Display the project structure summary shown before detection.

    Args:
        survey: Project survey to display.
    """
    table = Table(title="[bold]Project Structure[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Root", escape(", ".join(survey.root_entries) or "(empty)"))
    if survey.source_dirs:
        dirs = ", ".join(f"{name}/ ({count} files)" for name, count in survey.source_dirs.items())
        table.add_row("Source dirs", escape(dirs))
    table.add_row("Source files", str(survey.total_source_files))

    for path in survey.preview:
        table.add_row("", f"[dim]└─ {escape(path)}[/]")
    remaining = survey.total_source_files - len(survey.preview)
    if remaining > 0:
        table.add_row("", f"[dim]└─ ... and {remaining} more[/]")

    console.print(Panel(table, border_style="yellow"))


def show_build_result(project_type: ProjectType, result: BuildResult) -> None:
    """Display the build result in a formatted table.

    Args:
        project_type: Project type that was built.
        result: Build result.
    """
    console.print()

    table = Table(title="[bold]Build Result[/]", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Project", PROJECT_TYPES[project_type].display_name)
    if result.success:
        table.add_row("Status", "[bold green]SUCCESS[/]")
        table.add_row("Output", escape(result.artifact or ""))
        table.add_row("Runtime", result.runtime_kind.value if result.runtime_kind else "N/A")
        if result.build_path:
            table.add_row("Built by", result.build_path)
    else:
        table.add_row("Status", "[bold red]FAILED[/]")
        table.add_row("Error", escape(result.error_message or "Unknown error"))

    console.print(Panel(table, border_style="green" if result.success else "red"))


def show_system_info(info: dict[str, str]) -> None:
    """Display host OS and toolchain versions."""
    table = Table(title="[bold]System Compiler Information[/]", show_header=False, box=None)
    table.add_column("Tool", style="cyan")
    table.add_column("Version", style="white")

    for label, version in info.items():
        style = "dim" if version == "Not installed" else "white"
        table.add_row(label, f"[{style}]{escape(version)}[/]")

    console.print()
    console.print(Panel(table, border_style="blue"))


def show_dependency_report(report: dict[ProjectType, tuple[str, bool]]) -> None:
    """Display toolchain package status per language."""
    table = Table(title="[bold]Compiler Dependencies[/]")
    table.add_column("Language", style="cyan")
    table.add_column("Package", style="white")
    table.add_column("Status")

    for project_type, (package, installed) in report.items():
        status = "[green]✓ installed[/]" if installed else "[red]✗ missing[/]"
        table.add_row(project_type.value, package, status)

    console.print()
    console.print(table)


def show_goodbye() -> None:
    """Display goodbye message."""
    console.print()
    console.print(Panel("[bold]Thank you for using GoDev![/bold]", border_style="blue"))
    console.print()
