"""Interactive prompts for CLI using questionary."""

from pathlib import Path

import questionary
from questionary import Style

from godev.compiler.models import PROJECT_TYPES, ProjectType

# Custom style for questionary prompts
CUSTOM_STYLE = Style(
    [
        ("qmark", "fg:cyan bold"),
        ("question", "bold"),
        ("answer", "fg:green bold"),
        ("pointer", "fg:cyan bold"),
        ("highlighted", "fg:cyan bold"),
        ("selected", "fg:green"),
        ("separator", "fg:gray"),
        ("instruction", "fg:gray"),
        ("text", ""),
    ]
)


def select_main_menu_action() -> str | None:
    """Ask user to select an action from the main menu.

    Returns:
        One of 'build', 'clean', 'info', 'check-deps', 'exit', or None.
    """
    return questionary.select(
        "What would you like to do?",
        choices=[
            questionary.Choice("Build project", value="build"),
            questionary.Choice("Clean build outputs", value="clean"),
            questionary.Choice("Show compiler information", value="info"),
            questionary.Choice("Check compiler dependencies", value="check-deps"),
            questionary.Choice("Exit", value="exit"),
        ],
        style=CUSTOM_STYLE,
    ).ask()


def prompt_project_path(default: str = ".") -> Path | None:
    """Ask user for the project directory.

    Returns:
        Path to an existing directory, or None if cancelled.
    """
    path_str = questionary.path(
        "Project directory:",
        default=default,
        only_directories=True,
        validate=lambda x: Path(x).expanduser().is_dir() or "Directory does not exist",
        style=CUSTOM_STYLE,
    ).ask()

    if not path_str:
        return None

    return Path(path_str).expanduser()


def select_project_type() -> ProjectType | None:
    """Ask user to pick a project type when detection is skipped.

    Returns:
        Selected ProjectType, or None for automatic detection.
    """
    choices = [questionary.Choice("Detect automatically", value="auto")]
    choices.extend(
        questionary.Choice(descriptor.display_name, value=project_type.value)
        for project_type, descriptor in PROJECT_TYPES.items()
    )

    answer = questionary.select(
        "Project type:",
        choices=choices,
        style=CUSTOM_STYLE,
    ).ask()

    if answer is None or answer == "auto":
        return None
    return ProjectType(answer)


async def confirm_async(message: str, default: bool = True) -> bool:
    """Ask a yes/no question from inside the event loop.

    Args:
        message: Question text.
        default: Default answer.

    Returns:
        True if confirmed; False if declined or cancelled.
    """
    answer = await questionary.confirm(
        message,
        default=default,
        style=CUSTOM_STYLE,
    ).ask_async()
    return bool(answer)


async def always_yes(message: str, default: bool = True) -> bool:
    """Confirmation callback used with --yes."""
    return True


def prompt_continue() -> bool:
    """Ask if user wants to return to the main menu.

    Returns:
        True to continue, False to exit.
    """
    return bool(
        questionary.confirm(
            "Return to the main menu?",
            default=True,
            style=CUSTOM_STYLE,
        ).ask()
    )
