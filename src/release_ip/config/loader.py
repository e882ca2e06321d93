"""Configuration loading.

Settings are read from the first of these found while walking up from the
project directory:

- ``release-ip.toml`` (settings at the top level)
- ``pyproject.toml`` with a ``[tool.release-ip]`` table

When neither exists the defaults are used.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from release_ip.config.models import ReleaseIpConfig
from release_ip.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError

CONFIG_FILENAME = "release-ip.toml"
PYPROJECT_FILENAME = "pyproject.toml"
TOOL_KEY = "release-ip"


def load_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def extract_release_ip_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.release-ip]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_KEY, {})


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the configuration file that applies to ``start``.

    The search stops at the repository root (a directory containing
    ``.git``) or the filesystem root.
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and TOOL_KEY in load_toml(pyproject).get("tool", {}):
            return pyproject

        if (directory / ".git").exists():
            break
    return None


def load_config(path: Path | None = None) -> ReleaseIpConfig:
    """Load configuration for the project at ``path``.

    Raises:
        ConfigError: If a configuration file exists but cannot be read
        ConfigValidationError: If configuration values are invalid
    """
    config_file = find_config_file(path)
    if config_file is None:
        return ReleaseIpConfig()

    data = load_toml(config_file)
    if config_file.name == PYPROJECT_FILENAME:
        data = extract_release_ip_config(data)

    try:
        return ReleaseIpConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {config_file}:\n{e}") from e
