"""
Configuration loader — reads metabuild.yml into the workspace model.

The workspace file is looked up from the current directory upward, so
commands work from anywhere inside the workspace. ``read_yaml_mapping``
is shared with the catalog loader: both files must hold a YAML mapping.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from metabuild.core.models.workspace import WorkspaceConfig

logger = logging.getLogger(__name__)

WORKSPACE_CONFIG_FILE = "metabuild.yml"


class ConfigError(Exception):
    """Raised when workspace configuration is invalid or missing."""


def read_yaml_mapping(path: Path, error: type[Exception]) -> dict:
    """Parse *path* as YAML and return its top-level mapping.

    An empty file is an empty mapping. Unreadable files, syntax errors
    and non-mapping documents raise *error*.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise error(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise error(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise error(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def find_workspace_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest metabuild.yml at or above *start_dir* (default: cwd)."""
    start = (start_dir or Path.cwd()).resolve()
    for folder in (start, *start.parents):
        candidate = folder / WORKSPACE_CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def load_workspace(path: Path | None = None) -> WorkspaceConfig:
    """Load and validate workspace configuration.

    Args:
        path: Explicit path to metabuild.yml. If None, searches upward.

    Returns:
        Validated WorkspaceConfig with ``config_dir`` set.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    path = path or find_workspace_file()
    if path is None:
        raise ConfigError(
            f"No {WORKSPACE_CONFIG_FILE} found. "
            "Create one at the workspace root, or specify --config."
        )
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading workspace config from %s", path)
    data = read_yaml_mapping(path, ConfigError)

    try:
        config = WorkspaceConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid workspace configuration in {path}: {e}") from e

    config.config_dir = path.parent.resolve()
    logger.info("Loaded workspace %s", config.workspace_folder)
    return config
