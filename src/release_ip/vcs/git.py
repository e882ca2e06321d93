"""Git operations via the git command line.

Every command runs in the repository directory and blocks until it exits.
A non-zero exit status raises GitError with git's own diagnostic attached.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from release_ip.exceptions import GitError

if TYPE_CHECKING:
    from rich.console import Console

_NO_TAG_MARKERS = ("No names found", "No tags can describe", "cannot describe anything")


class GitRepository:
    """A git working tree."""

    def __init__(self, path: Path | str, *, console: Console | None = None) -> None:
        """
        Args:
            path: Directory inside the working tree
            console: When given, every git command is echoed to it
        """
        self.path = Path(path)
        self._console = console

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        if self._console is not None:
            self._console.print(f"  [dim]$ git {escape(' '.join(args))}[/]")
        try:
            return subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                check=check,
                cwd=self.path,
            )
        except FileNotFoundError as e:
            raise GitError("git not found. Is it installed and on PATH?") from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {args[0]} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e

    def _run_quiet(self, *args: str) -> bool:
        """Run a ``--quiet`` diff; return True when it reports differences."""
        result = self._run(*args, check=False)
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        raise GitError(
            f"git {args[0]} failed with exit code {result.returncode}",
            stderr=result.stderr,
        )

    # Queries

    def is_repository(self) -> bool:
        result = self._run("rev-parse", "--is-inside-work-tree", check=False)
        return result.returncode == 0 and result.stdout.strip() == "true"

    def get_latest_tag(self, pattern: str | None = None) -> str | None:
        """Return the most recent tag reachable from HEAD, optionally matching a glob.

        Returns None when no tag matches.
        """
        args = ["describe", "--tags", "--abbrev=0"]
        if pattern:
            args.extend(["--match", pattern])
        result = self._run(*args, check=False)
        if result.returncode == 0:
            return result.stdout.strip()
        if any(marker in result.stderr for marker in _NO_TAG_MARKERS):
            return None
        raise GitError(
            f"git describe failed with exit code {result.returncode}",
            stderr=result.stderr,
        )

    def has_staged_changes(self) -> bool:
        return self._run_quiet("diff", "--cached", "--quiet")

    def path_has_changes(self, path: Path | str) -> bool:
        """Whether a tracked path differs from HEAD, staged or not."""
        return self._run_quiet("diff", "HEAD", "--quiet", "--", str(path))

    def show_last_commit(self) -> str:
        return self._run("show", "--stat", "HEAD").stdout

    # Commits and tags

    def add(self, *paths: Path | str) -> None:
        self._run("add", "--", *(str(p) for p in paths))

    def commit(self, message: str, *paths: Path | str) -> None:
        """Commit; with ``paths`` only those files go into the commit."""
        args = ["commit", "-m", message]
        if paths:
            args += ["--", *(str(p) for p in paths)]
        self._run(*args)

    def create_annotated_tag(self, name: str, message: str) -> None:
        self._run("tag", "-a", name, "-m", message)

    # Branches

    def checkout_new_branch(self, name: str) -> None:
        self._run("checkout", "-b", name)

    def checkout(self, name: str) -> None:
        self._run("checkout", name)

    def merge_ff_only(self, branch: str) -> None:
        self._run("merge", "--ff-only", branch)

    def delete_local_branch(self, name: str) -> None:
        self._run("branch", "-d", name)

    # Remote

    def push_branch(self, remote: str, branch: str, *, set_upstream: bool = False) -> None:
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        self._run(*args, remote, branch)

    def push_tag(self, remote: str, tag: str) -> None:
        self._run("push", remote, f"refs/tags/{tag}")

    def delete_remote_branch(self, remote: str, branch: str) -> None:
        self._run("push", remote, "--delete", branch)
