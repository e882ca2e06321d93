"""Interactive confirmation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from release_ip.exceptions import UserRejectedError

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console


def keystroke_confirm(console: Console) -> Callable[[str], bool]:
    """Return a confirmation callback that reads a single key.

    Only ``y`` or ``Y`` counts as yes. Ctrl-C or end of input aborts.
    """

    def confirm(question: str) -> bool:
        console.print(f"[bold]{question}[/] \\[y/N] ", end="")
        try:
            answer = typer.getchar()
        except (KeyboardInterrupt, EOFError) as e:
            console.print()
            raise UserRejectedError("Aborted by user.") from e
        console.print(answer)
        return answer in ("y", "Y")

    return confirm
