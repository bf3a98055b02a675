"""
Configuration loader for graphql_fetch.

This module loads configuration from a JSON or YAML file and from
``GRAPHQL_FETCH_*`` environment variables, the environment taking
precedence over the file.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from .models import GlobalConfig

# Environment variable suffix -> (section, field)
ENV_FIELDS: Dict[str, Tuple[str, str]] = {
    "ENDPOINT": ("client", "endpoint"),
    "METHOD": ("client", "method"),
    "ERROR_POLICY": ("client", "error_policy"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_FILE": ("logging", "file_path"),
    "LOG_FORMAT": ("logging", "format"),
}


def merge_sections(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = merge_sections(current, value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Configuration loader with support for files and environment variables."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            environ: Environment to read; defaults to ``os.environ``
        """
        home = Path.home() / ".graphql_fetch"
        self.config_paths = [
            *(Path(f"graphql_fetch{suffix}") for suffix in (".yaml", ".yml", ".json")),
            *(home / f"config{suffix}" for suffix in (".yaml", ".yml", ".json")),
        ]
        self.env_prefix = "GRAPHQL_FETCH_"
        self.environ = environ if environ is not None else os.environ

    def load_config(self, config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
        """
        Load configuration from a file and the environment.

        Args:
            config_file: Config file to read; the search paths are tried if omitted

        Returns:
            GlobalConfig built from the file overlaid with the environment

        Raises:
            ValueError: If a config file cannot be read or the merged
                configuration is invalid
        """
        path = self.find_config_file(config_file)
        data = self.read_config_file(path) if path is not None else {}
        data = merge_sections(data, self.read_environment())

        try:
            return GlobalConfig(**data)
        except ValidationError as e:
            raise ValueError(f"Invalid graphql_fetch configuration: {e}") from e

    def find_config_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Path]:
        """Return the explicit config file, or the first search path that exists."""
        if config_file:
            path = Path(config_file)
            if not path.exists():
                raise ValueError(f"Config file not found: {path}")
            return path
        return next((path for path in self.config_paths if path.exists()), None)

    def read_config_file(self, path: Path) -> Dict[str, Any]:
        """Read a YAML or JSON config file into a dictionary."""
        suffix = path.suffix.lower()
        if suffix in (".yaml", ".yml"):
            load = yaml.safe_load
        elif suffix == ".json":
            load = json.load
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        try:
            with path.open(encoding="utf-8") as stream:
                return load(stream) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to parse config file {path}: {e}") from e

    def read_environment(self) -> Dict[str, Any]:
        """Collect ``GRAPHQL_FETCH_*`` variables into config sections."""
        data: Dict[str, Dict[str, Any]] = {}

        for suffix, (section, field) in ENV_FIELDS.items():
            value = self.environ.get(self.env_prefix + suffix)
            if value is not None:
                data.setdefault(section, {})[field] = value

        if "file_path" in data.get("logging", {}):
            data["logging"]["enable_file"] = True

        # GRAPHQL_FETCH_HEADER_X_API_KEY=... sets the X-Api-Key header
        header_prefix = f"{self.env_prefix}HEADER_"
        for name, value in self.environ.items():
            if name.startswith(header_prefix) and len(name) > len(header_prefix):
                header = "-".join(part.capitalize() for part in name[len(header_prefix):].split("_"))
                data.setdefault("client", {}).setdefault("headers", {})[header] = value

        return data


def load_config(config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
    """Load configuration with a default ConfigLoader."""
    return ConfigLoader().load_config(config_file)
