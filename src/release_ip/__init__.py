"""release-ip: version bumps, changelog rewrites and releases for IP repositories."""

from __future__ import annotations

__version__ = "0.1.0"
