"""Configuration management for the CLI.

Configuration is read from YAML files and environment variables. Example::

    mode: biblatex
    file_directory: ~/papers
    file_directories:
      pdf: ~/papers/pdf
    bib_location_as_primary: true
    field_properties:
      collaborator: [person_names]
    format: table
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from bibcheck.core.fields import FieldProperties
from bibcheck.core.models import BibDatabaseMode
from bibcheck.exceptions import ConfigError
from bibcheck.storage.files import FileDirectoryPreferences

OUTPUT_FORMATS = ("table", "json", "csv", "markdown")


class Config:
    """Configuration management for the CLI application."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}", str(path)) from e
        except OSError as e:
            raise ConfigError(f"Error reading config file: {e}", str(path)) from e

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping", str(path))
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths to check."""
        paths = []

        # User config
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "bibcheck" / "config.yaml")

        # Project config
        paths.append(Path(".bibcheck.yaml"))
        paths.append(Path("bibcheck.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from files and environment variables.

    Default locations are merged in order (last one wins); an explicit
    ``path`` is applied on top of them. Environment variables override
    everything.
    """
    config: dict[str, Any] = {}

    for default_path in Config.get_config_paths():
        if default_path.exists():
            config = Config.merge_configs(config, Config.from_file(default_path))

    if path is not None:
        config = Config.merge_configs(config, Config.from_file(path))

    env_overrides = {}
    if mode := os.environ.get("BIBCHECK_MODE"):
        env_overrides["mode"] = mode
    if file_dir := os.environ.get("BIBCHECK_FILE_DIR"):
        env_overrides["file_directory"] = file_dir

    return Config.merge_configs(config, env_overrides)


@dataclass
class CheckSettings:
    """Typed view of the settings an integrity run needs."""

    mode: BibDatabaseMode | None = None
    file_preferences: FileDirectoryPreferences = field(
        default_factory=FileDirectoryPreferences
    )
    field_properties: FieldProperties = field(default_factory=FieldProperties)
    format: str = "table"

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "CheckSettings":
        """Validate a raw config mapping."""
        try:
            mode = BibDatabaseMode.parse(config["mode"]) if config.get("mode") else None
        except ValueError as e:
            raise ConfigError(str(e)) from e

        directories = config.get("file_directories") or {}
        if not isinstance(directories, dict):
            raise ConfigError("file_directories must map extensions to directories")

        bib_first = config.get("bib_location_as_primary", True)
        if not isinstance(bib_first, bool):
            raise ConfigError(
                f"bib_location_as_primary must be true or false, got {bib_first!r}"
            )

        main_directory = config.get("file_directory")
        preferences = FileDirectoryPreferences(
            main_file_directory=Path(main_directory).expanduser()
            if main_directory
            else None,
            field_directories={
                str(ext).lower().lstrip("."): Path(directory).expanduser()
                for ext, directory in directories.items()
            },
            bib_location_as_primary=bib_first,
        )

        overrides = config.get("field_properties") or {}
        if not isinstance(overrides, dict):
            raise ConfigError("field_properties must map field names to roles")
        try:
            field_properties = FieldProperties.from_config(overrides)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        output_format = str(config.get("format", "table")).lower()
        if output_format not in OUTPUT_FORMATS:
            choices = ", ".join(OUTPUT_FORMATS)
            raise ConfigError(f"format must be one of {choices}, got {output_format}")

        return cls(
            mode=mode,
            file_preferences=preferences,
            field_properties=field_properties,
            format=output_format,
        )


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
