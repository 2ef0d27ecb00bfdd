"""User interaction seam of the trashcan engine.

The engine never talks to a terminal directly. It is constructed with an
object implementing TrashUI, so an interactive console, a scripted test
double or a non-interactive backend can be substituted freely.
"""

from typing import Literal, Protocol

from trashctl.filesystem.models import OperationResult


class TrashUI(Protocol):
    """Confirmation and reporting capability required by the engine."""

    def confirm(self, action: str, subject: str) -> bool:
        """Ask for a yes/no decision about one subject.

        Cancelling (e.g. Ctrl-C) must terminate the process instead of
        returning, so a cancelled confirmation never leads to a mutation.
        """
        ...

    def respond(self, *lines: str) -> None:
        """Show informational output."""
        ...

    def error(self, *lines: str) -> Literal[False]:
        """Report an error, record a non-zero exit status and return False."""
        ...


class Reporter:
    """Routes diagnostics to the UI and into the current OperationResult.

    One Reporter is shared by the engine components. The engine starts a
    fresh result at the beginning of every top-level operation.
    """

    def __init__(self, ui: TrashUI) -> None:
        self._ui = ui
        self.result = OperationResult()

    def begin(self) -> OperationResult:
        """Start collecting diagnostics for a new operation."""
        self.result = OperationResult()
        return self.result

    def confirm(self, action: str, subject: str) -> bool:
        return self._ui.confirm(action, subject)

    def respond(self, *lines: str) -> None:
        self._ui.respond(*lines)

    def error(self, *lines: str) -> Literal[False]:
        """Record and report diagnostics; always returns False."""
        self.result.errors.extend(lines)
        return self._ui.error(*lines)
