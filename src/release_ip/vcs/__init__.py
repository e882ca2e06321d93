"""Version control integration."""

from __future__ import annotations

from release_ip.vcs.git import GitRepository

__all__ = ["GitRepository"]
