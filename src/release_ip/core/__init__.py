"""Core business logic for release-ip.

This module contains the fundamental building blocks:
- Semantic version parsing and incrementing
- Changelog transformations over the Unreleased section
- Release orchestration
"""

from __future__ import annotations

from release_ip.core.changelog import (
    extract_release_notes,
    normalize_header_spacing,
    prepare_release,
    prune_empty_subsections,
    rename_unreleased,
    reopen_unreleased,
)
from release_ip.core.release import ReleaseIntent, ReleaseOrchestrator, ReleasePlan
from release_ip.core.version import BumpType, Version, parse_version

__all__ = [
    # Version
    "BumpType",
    # Release
    "ReleaseIntent",
    "ReleaseOrchestrator",
    "ReleasePlan",
    "Version",
    # Changelog
    "extract_release_notes",
    "normalize_header_spacing",
    "parse_version",
    "prepare_release",
    "prune_empty_subsections",
    "rename_unreleased",
    "reopen_unreleased",
]
