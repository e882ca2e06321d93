"""Release publishing."""

from __future__ import annotations

from release_ip.forge.github import GitHubCliPublisher

__all__ = ["GitHubCliPublisher"]
