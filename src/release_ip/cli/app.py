"""Command line entry point for release-ip."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from release_ip.core.version import BumpType

console = Console()
err_console = Console(stderr=True)

USAGE_ERROR_STATUS = 2

app = typer.Typer(
    name="release-ip",
    help="Bump the version, update the changelog and release an IP repository.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.command()
def release(
    kind: Annotated[
        BumpType,
        typer.Argument(help="Version component to increment.", show_default=False),
    ],
    dev: Annotated[
        bool,
        typer.Option("--dev", help="Only bump to the next development version and commit."),
    ] = False,
    path: Annotated[
        str | None,
        typer.Option("--path", "-C", help="Project directory (default: current directory)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Echo git commands."),
    ] = False,
) -> None:
    """Release a new MAJOR, MINOR or PATCH version."""
    from release_ip.cli.commands.release import run_release

    run_release(path, kind, dev, verbose, console, err_console)


def main(argv: list[str] | None = None) -> None:
    """Run the CLI; usage errors exit with status 1."""
    try:
        app(args=argv, prog_name="release-ip")
    except SystemExit as e:
        # typer prints usage and the error itself, then exits with status 2
        if e.code == USAGE_ERROR_STATUS:
            raise SystemExit(1) from e
        raise
