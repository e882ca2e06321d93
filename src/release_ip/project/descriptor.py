"""VERSION file and core descriptor manipulation.

An IP repository records its version twice besides the git tag: a plain
``VERSION`` file holding only the version string, and a FuseSoC-style
``*.core`` descriptor whose ``name`` line ends with the version::

    name : acme::uart:1.2.3

The descriptor is rewritten with a targeted regex so that comments and the
rest of the file are preserved.
"""

from __future__ import annotations

import re
from pathlib import Path

from release_ip.exceptions import ProjectError, VersionNotFoundError

DESCRIPTOR_GLOB = "*.core"

# name : <namespace>::<ip-name>:<version>, also accepting a full
# vendor:library:name:version identifier.
_NAME_LINE_RE = re.compile(
    r"^(?P<prefix>\s*name\s*:\s*[^\s:]*:[^\s:]*:[^\s:]+:)(?P<version>[^\s:]+)[ \t]*$",
    re.MULTILINE,
)


def read_version_file(path: Path) -> str:
    """Return the version stored in a VERSION file.

    Raises:
        ProjectError: If the file does not exist
        VersionNotFoundError: If the file is empty
    """
    if not path.is_file():
        raise ProjectError(f"Version file not found: {path}")
    version = path.read_text(encoding="utf-8").strip()
    if not version:
        raise VersionNotFoundError(f"Version file is empty: {path}")
    return version


def write_version_file(path: Path, new_version: str) -> None:
    path.write_text(f"{new_version}\n", encoding="utf-8")


def find_descriptor(project_path: Path, configured: Path | None = None) -> Path | None:
    """Locate the core descriptor of the project.

    Args:
        project_path: Project root directory
        configured: Descriptor path from configuration, relative to the root

    Returns:
        The descriptor path, or None when the project has none

    Raises:
        ProjectError: If the configured file is missing or the root holds
            more than one descriptor
    """
    if configured is not None:
        path = project_path / configured
        if not path.is_file():
            raise ProjectError(f"Core descriptor not found: {path}")
        return path

    candidates = sorted(project_path.glob(DESCRIPTOR_GLOB))
    if len(candidates) > 1:
        names = ", ".join(p.name for p in candidates)
        raise ProjectError(
            f"Found several core descriptors ({names}). "
            "Set [version].descriptor in the configuration."
        )
    return candidates[0] if candidates else None


def get_descriptor_version(path: Path) -> str:
    """Return the version from a descriptor's ``name`` line.

    Raises:
        VersionNotFoundError: If no ``name`` line carries a version
    """
    match = _NAME_LINE_RE.search(path.read_text(encoding="utf-8"))
    if match is None:
        raise VersionNotFoundError(
            f"Could not find 'name : <namespace>::<ip-name>:<version>' in {path}"
        )
    return match.group("version")


def update_descriptor_version(path: Path, new_version: str) -> None:
    """Splice ``new_version`` into the descriptor's ``name`` line.

    Raises:
        ProjectError: If the file does not exist
        VersionNotFoundError: If no ``name`` line carries a version
    """
    if not path.is_file():
        raise ProjectError(f"Core descriptor not found: {path}")

    content = path.read_text(encoding="utf-8")
    new_content, count = _NAME_LINE_RE.subn(
        lambda m: f"{m.group('prefix')}{new_version}",
        content,
        count=1,
    )
    if count == 0:
        raise VersionNotFoundError(
            f"Could not find 'name : <namespace>::<ip-name>:<version>' in {path}"
        )
    path.write_text(new_content, encoding="utf-8")
