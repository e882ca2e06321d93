"""Implementation of the release command.

Without ``--dev`` this performs a full release; with it, only the
development version is bumped and committed.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from release_ip.cli.prompt import keystroke_confirm
from release_ip.config import load_config
from release_ip.core.release import ReleaseIntent, ReleaseOrchestrator
from release_ip.exceptions import (
    ExternalCommandError,
    ReleaseIpError,
    UserRejectedError,
)
from release_ip.forge import GitHubCliPublisher
from release_ip.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from release_ip.core.release import Confirm
    from release_ip.core.version import BumpType


def run_release(
    path: str | None,
    kind: BumpType,
    dev: bool,
    verbose: bool,
    console: Console,
    err_console: Console,
    confirm: Confirm | None = None,
) -> None:
    """Run the release command.

    Args:
        path: Optional path to project directory
        kind: Which version component to increment
        dev: Only bump to the next development version
        verbose: Echo git commands
        console: Console for standard output
        err_console: Console for error output
        confirm: Confirmation callback, defaults to a single-keystroke prompt
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
    except ReleaseIpError as e:
        err_console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    repo = GitRepository(project_path, console=console if verbose else None)
    if not repo.is_repository():
        err_console.print(f"[red]Error:[/] {escape(str(project_path))} is not a git repository")
        raise SystemExit(1)

    publisher = None
    if config.github.enabled:
        publisher = GitHubCliPublisher(
            project_path,
            cli=config.github.cli,
            min_major=config.github.min_cli_major,
        )

    orchestrator = ReleaseOrchestrator(
        repo,
        config,
        project_path,
        confirm=confirm or keystroke_confirm(console),
        publisher=publisher,
        console=console,
    )

    try:
        orchestrator.run(ReleaseIntent(kind, dev_only=dev))
    except UserRejectedError as e:
        err_console.print(f"[red]{escape(e.message)}[/] Completed steps were left in place.")
        raise SystemExit(1) from e
    except ExternalCommandError as e:
        err_console.print(f"[red]Error:[/] {escape(e.message)}")
        if e.stderr:
            err_console.print(escape(e.stderr.rstrip()), highlight=False)
        raise SystemExit(1) from e
    except ReleaseIpError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e
