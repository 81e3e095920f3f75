"""Configuration loading and validation for mdutils."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from mdutils.core.errors import ConfigError
from mdutils.core.models import ReplacementRule

DEFAULT_CONFIG_PATH = ".mdutils.yaml"


class ReplaceConfig(BaseModel):
    """Regex tables applied to link destinations."""

    link_replacements: list[ReplacementRule] = Field(
        default_factory=list,
        description="Rules tried on the raw destination of every link",
    )
    local_link_replacements: list[ReplacementRule] = Field(
        default_factory=list,
        description="Rules tried first on root-relative paths of in-tree links",
    )


class MdutilsConfig(ReplaceConfig):
    """Top-level mdutils configuration."""

    summary_file: str = Field(default="SUMMARY.md", description="Summary file name")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("summary_file")
    @classmethod
    def validate_summary_file(cls, v: str) -> str:
        """Summary file must be a bare file name."""
        if not v or Path(v).name != v:
            raise ValueError(f"Invalid summary file name: {v!r}. Expected a file name.")
        return v


def load_config(path: str | None = None) -> MdutilsConfig:
    """Load and validate configuration from a YAML file.

    Environment variable overrides:
        MDUTILS_SUMMARY_FILE: overrides summary_file

    Args:
        path: Path to config file. Defaults to ./.mdutils.yaml, which may be
            absent, in which case defaults are used.

    Returns:
        Validated MdutilsConfig.

    Raises:
        ConfigError: If config file is missing, unreadable, or invalid.
    """
    config_path = Path(path or DEFAULT_CONFIG_PATH).expanduser()

    data: Any
    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {config_path}")
        data = {}
    else:
        try:
            raw = config_path.read_text()
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}") from e

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a YAML mapping")

    env_summary = os.environ.get("MDUTILS_SUMMARY_FILE")
    if env_summary:
        data["summary_file"] = env_summary

    try:
        return MdutilsConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def replace_config_from_table(table: Any, name: str) -> ReplaceConfig:
    """Validate a preprocessor table taken from a host tool's configuration.

    Raises:
        ConfigError: If the table does not hold arrays of {regex, replacement}.
    """
    if not isinstance(table, dict):
        raise ConfigError(f"'{name}' expects a table")
    try:
        return ReplaceConfig.model_validate(
            {
                key: table[key]
                for key in ("link_replacements", "local_link_replacements")
                if key in table
            }
        )
    except ValidationError as e:
        raise ConfigError(f"'{name}' expects arrays of {{regex, replacement}} tables: {e}") from e
