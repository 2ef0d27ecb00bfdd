"""Interactive console backend of the trashcan engine.

ConsoleUI implements the TrashUI protocol on top of the shared Rich
consoles: informational output on stdout, errors and prompts on stderr,
and single-keypress confirmations.
"""

from typing import Literal

import click
import typer
from rich.console import Console
from rich.markup import escape

from trashctl.utils.formatting import console, err_console, format_trashcan_heading


class ConsoleUI:
    """Terminal implementation of TrashUI.

    Attributes:
        exit_status: 1 once any error was reported, 0 before.
    """

    def __init__(
        self,
        script_name: str = "trash",
        out: Console | None = None,
        err: Console | None = None,
    ) -> None:
        self.script_name = script_name
        self.exit_status = 0
        self._out = out or console
        self._err = err or err_console

    def respond(self, *lines: str) -> None:
        """Print lines, highlighting trashcan headings."""
        for line in lines:
            self._out.print(format_trashcan_heading(line), soft_wrap=True)

    def error(self, *lines: str) -> Literal[False]:
        """Print lines to stderr prefixed with the script name."""
        self.exit_status = 1
        for line in lines:
            self._err.print(f"{self.script_name}: {escape(line)}", soft_wrap=True)
        return False

    def confirm(self, action: str, subject: str, default: bool = False) -> bool:
        """Ask a yes/no question answered by a single keypress.

        Any key other than y/n selects the default. Ctrl-C or end of input
        aborts the whole program.

        Raises:
            typer.Abort: If the user cancelled.
        """
        choices = "[Y|n]" if default else "[y|N]"
        self._err.print(
            f"[prompt]{escape(action)}[/]: {escape(subject)}: {escape(choices)}? ",
            end="",
            soft_wrap=True,
        )

        try:
            key = click.getchar()
        except (KeyboardInterrupt, EOFError):
            self._err.print(f"\n{self.script_name}: User cancelled")
            raise typer.Abort() from None

        self._err.print(escape(key))
        if key in ("y", "Y"):
            return True
        if key in ("n", "N"):
            return False
        return default
