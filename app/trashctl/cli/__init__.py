"""CLI package for trashctl.

This package contains the Typer application and the console UI.
"""

from trashctl.cli.main import app

__all__ = ["app"]
