"""CLI command implementations."""

from __future__ import annotations
