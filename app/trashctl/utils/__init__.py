"""Utility modules for trashctl.

This module exports commonly used utility functions.
"""

from trashctl.utils.formatting import (
    console,
    err_console,
    format_trashcan_heading,
    print_error,
)
from trashctl.utils.shell import (
    CommandResult,
    SudoEscalator,
    command_exists,
    list_entries,
    run_command,
)

__all__ = [
    "CommandResult",
    "SudoEscalator",
    "command_exists",
    "console",
    "err_console",
    "format_trashcan_heading",
    "list_entries",
    "print_error",
    "run_command",
]
