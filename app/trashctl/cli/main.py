"""Main CLI application entry point.

Defines the `trash` command: transfer files to the trashcan, restore them
(-W), empty the trashcan (-e) or list its contents (-l).
"""

import logging
from typing import Annotated

import click
import typer
from rich.logging import RichHandler

from trashctl import __version__
from trashctl.cli.console import ConsoleUI
from trashctl.core.config import load_or_create_config
from trashctl.core.errors import ConfigError, HomeTrashError
from trashctl.filesystem.engine import Trashcan
from trashctl.filesystem.models import TrashRequest
from trashctl.utils.formatting import err_console, print_error
from trashctl.utils.shell import SudoEscalator

# ctx.meta key collecting -f/-i in command line order
_PROMPT_FLAGS = "trashctl.prompt_flags"

app = typer.Typer(
    name="trash",
    help="Move files to the trashcan, restore or delete them.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"trash version {__version__}")
        raise typer.Exit()


def prompt_flag_callback(ctx: typer.Context, param: typer.CallbackParam, value: bool) -> bool:
    """Record -f/-i as given; click invokes callbacks in command line order."""
    if value:
        ctx.meta.setdefault(_PROMPT_FLAGS, []).append(param.name)
    return value


def configure_logging(verbose: bool) -> None:
    """Send debug logging to stderr when verbose."""
    if not verbose:
        return
    handler = RichHandler(console=err_console, show_time=False, show_path=False)
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", handlers=[handler])


def build_request(
    ctx: typer.Context,
    *,
    directory: bool,
    recursive: bool,
    purge: bool,
    overwrite: bool,
    verbose: bool,
    whiteout: bool,
) -> TrashRequest:
    """Resolve the interplay of flags into a TrashRequest."""
    prompt_flags: list[str] = ctx.meta.get(_PROMPT_FLAGS, [])
    last = prompt_flags[-1] if prompt_flags else None
    recursive = recursive or whiteout

    return TrashRequest(
        force=last == "force",
        interactive=last == "interactive",
        recursive=recursive,
        directory=directory and not recursive,
        permanent=purge or overwrite,
        overwrite=overwrite,
        verbose=verbose,
        whiteout=whiteout,
    )


@app.command()
def trash(
    ctx: typer.Context,
    files: Annotated[
        list[str] | None,
        typer.Argument(help="Files or patterns to act on.", show_default=False),
    ] = None,
    directory: Annotated[
        bool,
        typer.Option("--directory", "-d", help="Transfer empty directories."),
    ] = False,
    empty: Annotated[
        bool,
        typer.Option("--empty", "-e", help="Permanently delete trashcan contents."),
    ] = False,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            callback=prompt_flag_callback,
            help="Ignore warnings and never prompt.",
        ),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option(
            "--interactive",
            "-i",
            callback=prompt_flag_callback,
            help="Prompt before acting on each file.",
        ),
    ] = False,
    list_contents: Annotated[
        bool,
        typer.Option("--list", "-l", help="List trashcan contents."),
    ] = False,
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", "-P", help="Overwrite regular files before deleting (implies -p)."),
    ] = False,
    purge: Annotated[
        bool,
        typer.Option("--purge", "-p", help="Delete files instead of transferring them."),
    ] = False,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-R", "-r", help="Transfer directory hierarchies."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Report degraded operation."),
    ] = False,
    whiteout: Annotated[
        bool,
        typer.Option("--whiteout", "-W", help="Restore files from the trashcan."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Transfer FILEs to the trashcan.

    With -W, restore FILEs from the trashcan into the current directory.
    With -e, permanently delete FILEs (everything if none) from the trashcan.
    With -l, list FILEs (everything if none) in the trashcan.
    """
    patterns = files or []
    configure_logging(verbose)

    if not (list_contents or empty or whiteout or patterns):
        raise click.UsageError("missing file operand", ctx=ctx)

    request = build_request(
        ctx,
        directory=directory,
        recursive=recursive,
        purge=purge,
        overwrite=overwrite,
        verbose=verbose,
        whiteout=whiteout,
    )

    try:
        config = load_or_create_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    ui = ConsoleUI(script_name="trash")
    try:
        trashcan = Trashcan(ui, config=config, escalator=SudoEscalator())
    except HomeTrashError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if list_contents:
        result = trashcan.list(patterns, request)
    elif empty:
        result = trashcan.empty(patterns, request)
    elif whiteout:
        result = trashcan.restore(patterns, request)
    else:
        result = trashcan.transfer(patterns, request)

    if not result.success:
        raise typer.Exit(code=result.exit_status)


if __name__ == "__main__":
    app()
