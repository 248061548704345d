"""Reading GoDev YAML configuration files.

A config file has two sections, ``compiler`` and ``logging``. Compiler
options can be written flat (``c_flags``) or grouped per toolchain::

    compiler:
      build_dir: out
      cpp:
        flags: [-O2]
        standard: c++20
      container:
        tag: web
        ports: "8080:80"

Grouped keys are flattened to the setting names before validation.
"""

from pathlib import Path
from typing import Any

import yaml

from godev.core.exceptions.errors import ConfigurationError

SECTIONS = ("compiler", "logging")

# Grouped key -> flat compiler setting
COMPILER_GROUPED_KEYS = {
    "compiler.c.flags": "c_flags",
    "compiler.cpp.flags": "cxx_flags",
    "compiler.cpp.standard": "cxx_standard",
    "compiler.node.server_indicators": "server_indicators",
    "compiler.container.tag": "container_tag",
    "compiler.container.ports": "container_ports",
}


class ConfigLoader:
    """Parses a GoDev config file into per-section keyword arguments."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] = {}

    def load(self) -> dict[str, Any]:
        """Read and parse the file.

        An empty file is an empty configuration.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML,
                is not a mapping, or has a section other than compiler and
                logging.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Configuration file not found: {self.path}",
                details={"path": str(self.path)},
            ) from e

        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {self.path}",
                details={"error": str(e)},
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {self.path}")

        unknown = sorted(str(key) for key in data if key not in SECTIONS)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration section(s) in {self.path}: {', '.join(unknown)}",
                config_key=unknown[0],
            )

        self._data = data
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``compiler.cpp.standard``."""
        value: Any = self._data
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def section(self, name: str) -> dict[str, Any]:
        """Keyword arguments for one settings section.

        A section that is present but not a mapping is an error, since it
        would otherwise silently fall back to defaults.
        """
        raw = self._data.get(name)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Section '{name}' must be a mapping, got {type(raw).__name__}",
                config_key=name,
            )
        return raw

    def compiler_options(self) -> dict[str, Any]:
        """Compiler section with grouped keys flattened.

        A flat key wins over its grouped form when both are given.
        """
        options = {key: value for key, value in self.section("compiler").items() if not isinstance(value, dict)}
        for dotted, setting in COMPILER_GROUPED_KEYS.items():
            value = self.get(dotted)
            if value is not None:
                options.setdefault(setting, value)
        return options
