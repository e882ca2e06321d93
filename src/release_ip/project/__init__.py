"""Project version files."""

from __future__ import annotations
