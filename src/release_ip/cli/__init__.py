"""Command line interface for release-ip."""

from __future__ import annotations
