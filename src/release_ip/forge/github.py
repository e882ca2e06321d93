"""GitHub releases via the ``gh`` command line tool.

The tool is optional. When it is missing, or too old, the release still
succeeds and the user is told to create the GitHub release by hand.
"""

from __future__ import annotations

import re
import shutil
import subprocess
import tempfile
from pathlib import Path

from release_ip.exceptions import PublishError

_VERSION_RE = re.compile(r"version\s+v?(\d+)\.")


class GitHubCliPublisher:
    """Create GitHub releases with ``gh release create``."""

    def __init__(self, path: Path | str, *, cli: str = "gh", min_major: int = 1) -> None:
        self.path = Path(path)
        self.cli = cli
        self.min_major = min_major

    def cli_major_version(self) -> int | None:
        """Return the major version reported by ``gh --version``, or None."""
        if shutil.which(self.cli) is None:
            return None
        try:
            result = subprocess.run(
                [self.cli, "--version"],
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError):
            return None
        match = _VERSION_RE.search(result.stdout)
        return int(match.group(1)) if match else None

    def is_available(self) -> bool:
        major = self.cli_major_version()
        return major is not None and major >= self.min_major

    def publish(self, tag: str, title: str, notes: str) -> None:
        """Create the release for ``tag`` with ``notes`` as its body.

        Raises:
            PublishError: If ``gh`` fails
        """
        with tempfile.TemporaryDirectory(prefix="release-ip-") as tmp:
            notes_file = Path(tmp) / "release-notes.md"
            notes_file.write_text(notes + "\n", encoding="utf-8")
            args = [
                self.cli,
                "release",
                "create",
                tag,
                "--title",
                title,
                "--notes-file",
                str(notes_file),
            ]
            try:
                subprocess.run(args, capture_output=True, text=True, check=True, cwd=self.path)
            except FileNotFoundError as e:
                raise PublishError(f"{self.cli} not found") from e
            except subprocess.CalledProcessError as e:
                raise PublishError(
                    f"{self.cli} release create failed with exit code {e.returncode}",
                    stderr=e.stderr,
                ) from e
