"""
Configuration management for iam2cfn.

Settings come from an optional YAML file and are overridden by CLI options.
Credentials and the default region are resolved by boto3 itself.
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from jsonschema import ValidationError, validate

from .exceptions import ConfigurationError
from .naming import NamingMode

CONFIG_ENV_VAR = "IAM2CFN_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".iam2cfn.yaml"

OUTPUT_FORMATS = ["yaml", "json"]

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "profile": {"type": ["string", "null"]},
        "region": {"type": ["string", "null"]},
        "naming": {"enum": NamingMode.choices()},
        "output_format": {"enum": OUTPUT_FORMATS},
        "fetch_tags": {"type": "boolean"},
        "seed": {"type": ["integer", "null"]},
    },
}


@dataclass(frozen=True)
class ExportConfig:
    """Settings for a single export run."""

    # AWS session
    profile: Optional[str] = None
    region: Optional[str] = None

    # Rendering
    naming: str = NamingMode.SANITIZED.value
    output_format: str = "yaml"
    seed: Optional[int] = None

    # Fetching
    fetch_tags: bool = True

    @property
    def naming_mode(self) -> NamingMode:
        return NamingMode(self.naming)

    def merge(self, **overrides: Any) -> "ExportConfig":
        """Return a copy with every override that is not None applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportConfig":
        """Create config from a dictionary, validating it first."""
        try:
            validate(instance=data, schema=CONFIG_SCHEMA)
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e.message}",
                details=f"Path: {' -> '.join(str(p) for p in e.absolute_path)}"
                if e.absolute_path
                else None,
            ) from e
        return cls(**data)


def _find_config_file(path: Optional[Union[str, Path]]) -> Optional[Path]:
    """Resolve the config file: explicit path, then env var, then home dir."""
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(path: Optional[Union[str, Path]] = None) -> ExportConfig:
    """
    Load the export configuration.

    Args:
        path: Explicit config file. Falls back to $IAM2CFN_CONFIG, then
            ~/.iam2cfn.yaml. Defaults are used when no file is found.

    Returns:
        The loaded configuration

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    config_file = _find_config_file(path)
    if config_file is None:
        return ExportConfig()

    if not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse configuration: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration must be a mapping, got {type(data).__name__}",
            details=str(config_file),
        )

    return ExportConfig.from_dict(data)
