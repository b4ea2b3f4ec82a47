"""Configuration file discovery and loading."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from monopub.config.schema import MonoPubConfig
from monopub.errors import ConfigurationError, WorkspaceNotFoundError


CONFIG_FILENAMES = ("monopub.yaml", "monopub.yml")
ROOT_MANIFEST = "package.json"


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` looking for a monopub config file.

    Args:
        start: Directory to start from (default: cwd).

    Returns:
        Path to the config file, or None.
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
    return None


def load_config(path: Path) -> MonoPubConfig:
    """Load and validate a config file.

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping")

    try:
        return MonoPubConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}:\n{e}") from e


def resolve_workspace(start: Path | None = None) -> tuple[Path, MonoPubConfig]:
    """Locate the workspace root and its configuration.

    A directory with a monopub config file is a workspace root. Without one,
    a directory holding a package.json is accepted with default settings.

    Returns:
        Tuple of (root, config).

    Raises:
        WorkspaceNotFoundError: If neither is found.
    """
    start = (start or Path.cwd()).resolve()
    config_file = find_config_file(start)
    if config_file is not None:
        return config_file.parent, load_config(config_file)

    if (start / ROOT_MANIFEST).is_file():
        return start, MonoPubConfig()

    raise WorkspaceNotFoundError(str(start))
