"""Configuration system for RouteProof.
Supports TOML configuration files with project-level and user-level settings.
Configuration values are passed explicitly to every verification call; there
is no process-wide toggle.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from routeproof.core.exceptions import ConfigError

CONFIG_FILES = [
    "routeproof.toml",
    ".routeproof.toml",
    "pyproject.toml",
]


@dataclass
class SolverConfig:
    """Configuration for discharging proof obligations.
    Attributes:
        timeout_ms: Per-query solver timeout; ``None`` waits indefinitely.
        max_workers: Worker threads used to solve per-node queries. With
            a single worker every query is solved on the calling thread.
        print_formulas: Log every query before it is solved.
        check_merge_laws: Fuzz the merge function for commutativity,
            associativity and idempotence before the modular checks.
        merge_law_examples: Number of generated examples for that fuzzing.
    """

    timeout_ms: int | None = None
    max_workers: int = 4
    print_formulas: bool = False
    check_merge_laws: bool = False
    merge_law_examples: int = 100

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "timeout_ms": self.timeout_ms,
            "max_workers": self.max_workers,
            "print_formulas": self.print_formulas,
            "check_merge_laws": self.check_merge_laws,
            "merge_law_examples": self.merge_law_examples,
        }


@dataclass
class OutputConfig:
    """Configuration for output and reporting."""

    format: str = "text"
    color: bool = True
    verbose: bool = False
    show_symbolics: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "format": self.format,
            "color": self.color,
            "verbose": self.verbose,
            "show_symbolics": self.show_symbolics,
        }


@dataclass
class RouteProofConfig:
    """Main configuration for RouteProof."""

    solver: SolverConfig = field(default_factory=SolverConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    config_file: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "solver": self.solver.to_dict(),
            "output": self.output.to_dict(),
        }

    def to_toml(self) -> str:
        """Generate TOML configuration string."""
        lines = ["[tool.routeproof]"]
        for section, values in self.to_dict().items():
            lines.append("")
            lines.append(f"[tool.routeproof.{section}]")
            for key, value in values.items():
                if value is None:
                    continue
                if isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                elif isinstance(value, str):
                    lines.append(f'{key} = "{value}"')
                else:
                    lines.append(f"{key} = {value}")
        return "\n".join(lines)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by walking up directory tree."""
    if start_dir is None:
        start_dir = Path.cwd()
    current = start_dir.resolve()
    while current != current.parent:
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists():
                return config_path
        current = current.parent
    home = Path.home()
    for config_name in [".routeproof.toml", "routeproof.toml"]:
        config_path = home / config_name
        if config_path.exists():
            return config_path
    return None


def load_config(
    config_path: Path | None = None,
    start_dir: Path | None = None,
) -> RouteProofConfig:
    """Load configuration from file or use defaults.
    Args:
        config_path: Explicit path to config file
        start_dir: Directory to start searching for config
    Returns:
        Loaded configuration
    Raises:
        ConfigError: If the file is not valid TOML or holds a value of
            the wrong type.
    """
    config = RouteProofConfig()
    if config_path is None:
        config_path = find_config_file(start_dir)
    if config_path is None or not config_path.exists():
        return config
    config.config_file = config_path
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"failed to parse config file {config_path}: {e}") from e
    if config_path.name == "pyproject.toml":
        route_data = data.get("tool", {}).get("routeproof", {})
    else:
        route_data = data.get("tool", {}).get("routeproof", data)
    _apply_config(config, route_data)
    return config


def _apply_section(target: Any, data: dict[str, Any], section: str) -> None:
    for key, value in data.items():
        if not hasattr(target, key):
            raise ConfigError(f"unknown setting {section}.{key}")
        current = getattr(target, key)
        if current is not None and not isinstance(value, type(current)):
            raise ConfigError(
                f"setting {section}.{key} expects {type(current).__name__}, "
                f"got {type(value).__name__}"
            )
        setattr(target, key, value)


def _apply_config(config: RouteProofConfig, data: dict[str, Any]) -> None:
    """Apply configuration data to config object."""
    if "solver" in data:
        _apply_section(config.solver, data["solver"], "solver")
    if "output" in data:
        _apply_section(config.output, data["output"], "output")


def generate_default_config() -> str:
    """Generate default configuration file content."""
    return RouteProofConfig().to_toml()


__all__ = [
    "RouteProofConfig",
    "SolverConfig",
    "OutputConfig",
    "load_config",
    "find_config_file",
    "generate_default_config",
]
