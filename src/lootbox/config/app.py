"""
Configuration management for Lootbox.

Settings come from three layers, later ones winning: model defaults, an
optional YAML or JSON settings file, and command-line options.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_SETTINGS_PATH = "~/.lootbox/config.yaml"


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Log level",
    )


class MCPClientSettings(BaseModel):
    """MCP client connection settings."""

    config_path: str = Field(
        default=".mcp.json",
        description="Path to the MCP servers config file",
    )
    client_name: str = Field(
        default="lootbox",
        description="Client name announced to MCP servers during the handshake",
    )
    connect_timeout: float | None = Field(
        default=None,
        description="Seconds to wait for each server handshake (unset waits indefinitely)",
    )

    @field_validator("connect_timeout")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        """Validate timeout is positive when set."""
        if v is not None and v <= 0:
            raise ValueError("connect_timeout must be a positive number")
        return v


class AppConfig(BaseModel):
    """Top-level Lootbox configuration."""

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    mcp_client: MCPClientSettings = Field(default_factory=MCPClientSettings)


_SETTINGS_PARSERS: dict[str, Callable[[str], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.loads,
}


def read_settings_file(path: Path) -> dict[str, Any]:
    """
    Parse a settings file into a plain dict.

    A missing or empty file yields ``{}``.

    Raises:
        ValueError: On an unsupported suffix, unparseable content, or a
            document that is not a mapping
    """
    parser = _SETTINGS_PARSERS.get(path.suffix.lower())
    if parser is None:
        supported = ", ".join(_SETTINGS_PARSERS)
        raise ValueError(f"Unsupported settings file type '{path.suffix}' ({supported}): {path}")

    try:
        text = path.read_text()
    except FileNotFoundError:
        return {}
    if not text.strip():
        return {}

    try:
        data = parser(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Could not parse settings file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return data


def with_overrides(settings: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of ``settings`` with dotted-key overrides applied.

    ``{"logging.level": "debug"}`` sets ``settings["logging"]["level"]``.
    Overrides whose value is ``None`` are options the user did not pass and
    leave the file value alone.
    """
    merged = copy.deepcopy(settings)
    for dotted_key, value in overrides.items():
        if value is None:
            continue
        *sections, leaf = dotted_key.split(".")
        target = merged
        for section in sections:
            nested = target.get(section)
            if not isinstance(nested, dict):
                nested = target[section] = {}
            target = nested
        target[leaf] = value
    return merged


def load_config(
    settings_file: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Build the application config from defaults, a settings file and overrides.

    Args:
        settings_file: YAML or JSON settings path (default: ~/.lootbox/config.yaml)
        overrides: Dotted-key values from command-line options

    Returns:
        Validated AppConfig instance

    Raises:
        ValueError: If the file cannot be read or the merged settings are invalid
    """
    path = Path(settings_file or DEFAULT_SETTINGS_PATH).expanduser()
    settings = with_overrides(read_settings_file(path), overrides or {})

    try:
        return AppConfig.model_validate(settings)
    except ValidationError as e:
        raise ValueError(f"Invalid settings ({path}): {e}") from e
