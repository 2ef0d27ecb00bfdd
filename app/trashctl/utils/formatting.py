"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape

from trashctl.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system(), highlight=False)
err_console = Console(
    theme=get_theme(), stderr=True, color_system=_detect_color_system(), highlight=False
)


def format_trashcan_heading(line: str) -> str:
    """Highlight a "/path/to/trashcan:" heading line, escape anything else."""
    if line.startswith("/") and line.endswith(":"):
        return f"[trashcan]{escape(line)}[/]"
    return escape(line)


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")
