"""Host toolchain checks and installation.

The guard answers one question before a build starts: is the compiler or
runtime package for this project type installed? If not, it asks the user
and installs it with the host package manager.
"""

import shutil
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from godev.compiler.models import ProjectType, get_descriptor
from godev.compiler.process import CommandRunner
from godev.core.exceptions.errors import ToolchainMissingError
from godev.core.logger.logger import get_logger

logger = get_logger(__name__)

ConfirmCallback = Callable[[str, bool], Awaitable[bool]]


@dataclass(frozen=True)
class PackageManager:
    """A host package manager family.

    Attributes:
        name: Family name.
        binary: Executable whose presence identifies the family.
        query: Command prefix that exits 0 when a package is installed.
        install: Command prefix that installs packages.
        needs_sudo: Whether install must run with elevated privileges.
        package_names: Translations from Debian package names.
    """

    name: str
    binary: str
    query: tuple[str, ...]
    install: tuple[str, ...]
    needs_sudo: bool = True
    package_names: dict[str, str] = field(default_factory=dict)

    def package_name(self, package: str) -> str:
        """Translate a Debian package name to this family's name."""
        return self.package_names.get(package, package)

    def query_command(self, package: str) -> list[str]:
        """Command that checks whether a package is installed."""
        return [*self.query, self.package_name(package)]

    def install_command(self, package: str) -> list[str]:
        """Command that installs a package."""
        prefix = ["sudo"] if self.needs_sudo else []
        return [*prefix, *self.install, self.package_name(package)]


_RPM_NAMES = {"g++": "gcc-c++", "docker.io": "docker", "nodejs": "nodejs"}

# Checked in this order during host detection
PACKAGE_MANAGERS: tuple[PackageManager, ...] = (
    PackageManager("apt", "apt-get", ("dpkg", "-s"), ("apt-get", "install", "-y")),
    PackageManager("dnf", "dnf", ("rpm", "-q"), ("dnf", "install", "-y"), package_names=_RPM_NAMES),
    PackageManager("yum", "yum", ("rpm", "-q"), ("yum", "install", "-y"), package_names=_RPM_NAMES),
    PackageManager(
        "zypper",
        "zypper",
        ("rpm", "-q"),
        ("zypper", "--non-interactive", "install"),
        package_names={"g++": "gcc-c++", "golang": "go", "docker.io": "docker", "nodejs": "nodejs20"},
    ),
    PackageManager(
        "pacman",
        "pacman",
        ("pacman", "-Q"),
        ("pacman", "-S", "--noconfirm"),
        package_names={
            "g++": "gcc",
            "golang": "go",
            "cargo": "rust",
            "python3": "python",
            "docker.io": "docker",
        },
    ),
    PackageManager(
        "apk",
        "apk",
        ("apk", "info", "-e"),
        ("apk", "add"),
        package_names={"golang": "go", "docker.io": "docker"},
    ),
    PackageManager(
        "brew",
        "brew",
        ("brew", "list", "--versions"),
        ("brew", "install"),
        needs_sudo=False,
        package_names={
            "g++": "gcc",
            "golang": "go",
            "cargo": "rust",
            "nodejs": "node",
            "python3": "python",
            "docker.io": "docker",
        },
    ),
)


def get_package_manager(name: str) -> PackageManager:
    """Look up a package manager family by name."""
    for manager in PACKAGE_MANAGERS:
        if manager.name == name:
            return manager
    raise KeyError(f"Unknown package manager: {name}")


@dataclass(frozen=True)
class HostEnvironment:
    """Host facts the toolchain guard depends on.

    Attributes:
        platform: sys.platform style identifier.
        package_manager: Detected package manager family, if any.
        which: PATH lookup used for binaries.
    """

    platform: str
    package_manager: PackageManager | None = None
    which: Callable[[str], str | None] = shutil.which

    @classmethod
    def detect(cls, override: str | None = None) -> "HostEnvironment":
        """Inspect the running host.

        Args:
            override: Package manager family name that skips detection.

        Returns:
            HostEnvironment for the current process.
        """
        if override:
            return cls(platform=sys.platform, package_manager=get_package_manager(override))

        for manager in PACKAGE_MANAGERS:
            if shutil.which(manager.binary):
                logger.debug(f"Detected package manager: {manager.name}")
                return cls(platform=sys.platform, package_manager=manager)

        return cls(platform=sys.platform)

    def has_binary(self, name: str) -> bool:
        """Check if a binary is available in PATH."""
        return self.which(name) is not None


class ToolchainGuard:
    """Ensures a project type's toolchain is installed before building."""

    def __init__(
        self,
        host: HostEnvironment,
        runner: CommandRunner,
        confirm: ConfirmCallback,
    ) -> None:
        """Initialize the guard.

        Args:
            host: Host environment (package manager, PATH lookup).
            runner: Command runner for queries and installs.
            confirm: Async callback asking the user a yes/no question.
        """
        self.host = host
        self.runner = runner
        self.confirm = confirm

    async def is_installed(self, package: str, probe: tuple[str, ...] | None = None) -> bool:
        """Check whether a package is installed on the host.

        Args:
            package: Debian-style package name.
            probe: Version probe used when no package manager is known.

        Returns:
            True if the package (or its probe binary) is present.
        """
        manager = self.host.package_manager
        if manager is None:
            return bool(probe) and self.host.has_binary(probe[0])

        result = await self.runner.run(manager.query_command(package))
        return result.success

    async def ensure(self, project_type: ProjectType) -> None:
        """Make sure the toolchain for a project type is present.

        Runtime, web and container types ship or manage their own runtime
        and are not checked.

        Args:
            project_type: Detected project type.

        Raises:
            ToolchainMissingError: If the package is missing and was not
                installed.
        """
        descriptor = get_descriptor(project_type)
        requirement = descriptor.toolchain
        if descriptor.runtime or requirement is None:
            logger.debug(f"Skipping toolchain check for {project_type.value}")
            return

        package = requirement.package
        if await self.is_installed(package, requirement.probe):
            logger.info(f"Toolchain ready: {package} is installed")
            return

        manager = self.host.package_manager
        if manager is None:
            raise ToolchainMissingError(
                f"Required package {package} is not installed and no supported "
                f"package manager was found",
                package=package,
            )

        logger.warning(f"Required package {package} is not installed")
        if not await self.confirm(f"Install {manager.package_name(package)}? (requires sudo)", True):
            raise ToolchainMissingError(
                f"Required package {package} is not installed",
                package=package,
            )

        await self._install(manager, package)

    async def _install(self, manager: PackageManager, package: str) -> None:
        command = manager.install_command(package)
        logger.info(f"Installing {package} with {manager.name}: {' '.join(command)}")

        try:
            return_code = await self.runner.stream(command)
        except OSError as e:
            raise ToolchainMissingError(
                f"Failed to install {package}: {e}",
                package=package,
            ) from e

        if return_code != 0:
            raise ToolchainMissingError(
                f"Failed to install {package} (exit code {return_code})",
                package=package,
            )

        logger.info(f"{package} installed successfully")
