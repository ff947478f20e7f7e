"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from deltree import __version__
from deltree.cli.commands import config, delete
from deltree.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="deltree",
    help="Resilient recursive deletion with retries and permission recovery.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"deltree version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route deltree log records to stderr through Rich."""
    logger = logging.getLogger("deltree")
    logger.handlers.clear()
    if verbose:
        logger.addHandler(RichHandler(console=err_console, show_path=False))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)


@app.callback()
def main(
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
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every deletion pass and retry.",
        ),
    ] = False,
) -> None:
    """deltree - delete files and directory trees, retrying on transient failures.

    Locked files, permission problems and concurrently changing trees are
    handled with bounded retries, exponential backoff and optional
    permission repair.
    """
    configure_logging(verbose)


# Register commands
app.command(name="rm")(delete.rm)
app.command(name="clean")(delete.clean)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
