"""Shared fixtures for release-ip tests."""

from __future__ import annotations

import shutil
import subprocess
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

CHANGELOG = """\
# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.1.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).


## Unreleased

### Added

- UART loopback mode

### Changed

### Fixed

- Parity error flag clears on read


## 1.2.3 - 2024-01-15

### Fixed

- Baud rate divider rounding
"""

CORE_DESCRIPTOR = """\
CAPI=2:

name : acme::uart:1.2.3
description : Simple UART core

filesets:
  rtl:
    files:
      - rtl/uart.sv
    file_type: systemVerilogSource
"""


def _git(path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=path,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def git():
    """Run git in a directory and return stdout."""
    return _git


@pytest.fixture
def changelog_text() -> str:
    """A changelog with one empty Unreleased subsection."""
    return CHANGELOG


@pytest.fixture
def ip_project(tmp_path: Path) -> Path:
    """A project directory with changelog, VERSION and core descriptor."""
    (tmp_path / "CHANGELOG.md").write_text(CHANGELOG)
    (tmp_path / "VERSION").write_text("1.2.4-dev\n")
    (tmp_path / "uart.core").write_text(CORE_DESCRIPTOR)
    return tmp_path


@pytest.fixture
def temp_git_repo(ip_project: Path) -> Path:
    """A real git repository holding the IP project, tagged v1.2.3."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    _git(ip_project, "init", "-q")
    _git(ip_project, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(ip_project, "config", "user.email", "test@example.com")
    _git(ip_project, "config", "user.name", "Test")
    _git(ip_project, "config", "commit.gpgsign", "false")
    _git(ip_project, "config", "tag.gpgsign", "false")
    _git(ip_project, "add", ".")
    _git(ip_project, "commit", "-q", "-m", "Initial commit")
    _git(ip_project, "tag", "-a", "v1.2.3", "-m", "Release 1.2.3")
    return ip_project
