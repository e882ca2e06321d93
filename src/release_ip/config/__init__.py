"""Configuration management for release-ip."""

from __future__ import annotations

from release_ip.config.loader import load_config
from release_ip.config.models import (
    ChangelogConfig,
    GitConfig,
    GitHubConfig,
    ReleaseIpConfig,
    VersionConfig,
)

__all__ = [
    "ChangelogConfig",
    "GitConfig",
    "GitHubConfig",
    "ReleaseIpConfig",
    "VersionConfig",
    "load_config",
]
