"""
Configuration file loading.

Load and parse config.yaml files, and expose the analysis options.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

import yaml

from autodeps.config.resolver import resolve_config
from autodeps.exceptions import ConfigurationError

_VALID_TIE_BREAKS = ("insertion", "lexical")
_VALID_DEEP_CHAINS = ("warn", "error", "ignore")


class Config:
    """Autodeps configuration container with dict-like access."""

    def __init__(self, data: dict[str, Any]):
        self.data = data
        # Convenience properties for common config sections
        self.analysis = data.get("analysis", {}) if isinstance(data, dict) else {}
        self.logging = data.get("logging", {}) if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.data
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def __getitem__(self, key: str) -> Any:
        """Dict-like access: config['key'] or config['nested.key']."""
        if isinstance(key, str) and "." in key:
            return self.get(key)
        if key in self.data:
            value = self.data[key]
            # Return nested dicts as Config objects for chaining
            if isinstance(value, dict):
                return Config(value)
            return value
        raise KeyError(f"Config key '{key}' not found")

    def __contains__(self, key: str) -> bool:
        """Check if key exists in config."""
        if isinstance(key, str) and "." in key:
            value = self.data
            for k in key.split("."):
                if not isinstance(value, dict) or k not in value:
                    return False
                value = value[k]
            return True
        return key in self.data

    def __iter__(self) -> "Iterator[str]":
        """Iterate over top-level keys."""
        return iter(self.data)

    def keys(self):
        return self.data.keys()

    def values(self):
        return self.data.values()

    def items(self):
        return self.data.items()

    def validate(self) -> None:
        """Validate configuration structure and content."""
        errors = []

        if not isinstance(self.data, dict):
            raise ConfigurationError(
                f"Configuration must be a dictionary/mapping, got {type(self.data).__name__}"
            )

        for section in ("analysis", "logging"):
            value = self.data.get(section)
            if value is not None and not isinstance(value, dict):
                errors.append(f"Configuration '{section}' must be a dictionary, got {type(value).__name__}")

        if errors:
            raise ConfigurationError("\n".join(errors))

        # Surfaces bad option values
        AnalysisOptions.from_config(self)


@dataclass
class AnalysisOptions:
    """
    Options for one dependency analysis run.

    tie_break: order among vertices with no remaining constraints,
        "insertion" (vertex insertion order) or "lexical".
    deep_chains: what to do with dependency chains the two-hop resolution
        cannot express: "warn", "error" or "ignore".
    """

    tie_break: str = "insertion"
    deep_chains: str = "warn"

    def __post_init__(self) -> None:
        if self.tie_break not in _VALID_TIE_BREAKS:
            raise ConfigurationError(
                f"Invalid analysis.tie_break '{self.tie_break}', "
                f"expected one of: {', '.join(_VALID_TIE_BREAKS)}",
                details={"option": "tie_break", "value": self.tie_break},
            )
        if self.deep_chains not in _VALID_DEEP_CHAINS:
            raise ConfigurationError(
                f"Invalid analysis.deep_chains '{self.deep_chains}', "
                f"expected one of: {', '.join(_VALID_DEEP_CHAINS)}",
                details={"option": "deep_chains", "value": self.deep_chains},
            )

    @classmethod
    def from_config(cls, config: Union["Config", dict[str, Any], None]) -> "AnalysisOptions":
        """Build options from the ``analysis:`` section, defaults for missing keys."""
        if config is None:
            return cls()
        data = config.data if isinstance(config, Config) else config
        section = data.get("analysis") or {}
        return cls(
            tie_break=section.get("tie_break", "insertion"),
            deep_chains=section.get("deep_chains", "warn"),
        )


def load_config(project_path: Path | None = None, env: str | None = None) -> Config:
    """
    Load autodeps configuration.

    Load config.yaml and config.{env}.yaml, then resolve environment variables.

    Args:
        project_path: Path to project root (default: current directory)
        env: Environment name (dev, staging, prod)

    Returns:
        Config instance with merged configuration
    """
    if project_path is None:
        project_path = Path.cwd()

    base_config_path = project_path / "config.yaml"
    if not base_config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {base_config_path}\n"
            f"  Suggestion: Create a config.yaml file in your project root"
        )

    if not base_config_path.is_file():
        raise FileNotFoundError(f"Configuration path is not a file: {base_config_path}")

    config_data = _read_yaml(base_config_path)

    if env:
        env_config_path = project_path / f"config.{env}.yaml"
        if env_config_path.exists():
            _merge_dict(config_data, _read_yaml(env_config_path))

    config_data = resolve_config(config_data, env or "dev")

    return Config(config_data)


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            error_msg = str(e)
            if hasattr(e, "problem_mark"):
                mark = e.problem_mark
                raise ValueError(
                    f"Error parsing {path.name} at line {mark.line + 1}, column {mark.column + 1}:\n"
                    f"  {error_msg}\n"
                    f"  File: {path}\n"
                    f"  Suggestion: Check YAML syntax, ensure proper indentation and quotes"
                ) from e
            raise ValueError(f"Error parsing {path.name}: {error_msg}\n" f"  File: {path}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a mapping at the top level\n  File: {path}")
    return data


def _merge_dict(base: dict, override: dict):
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value
