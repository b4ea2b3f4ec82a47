"""Configuration loading."""

from monopub.config.loader import find_config_file, load_config, resolve_workspace
from monopub.config.schema import (
    BumpPolicy,
    ChangelogConfig,
    MonoPubConfig,
    PublishConfig,
    VersioningConfig,
)

__all__ = [
    "BumpPolicy",
    "ChangelogConfig",
    "MonoPubConfig",
    "PublishConfig",
    "VersioningConfig",
    "find_config_file",
    "load_config",
    "resolve_workspace",
]
