"""Settings file commands.

Provides commands to show, initialise and locate the deletion settings
file used as defaults by ``deltree rm`` and ``deltree clean``.
"""

from pathlib import Path
from typing import Annotated

import typer

from deltree.cli.display import print_config
from deltree.core.paths import get_config_path
from deltree.core.settings import ConfigError, load_config_or_default, save_config
from deltree.models.config import DEFAULT_CONFIG
from deltree.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialise deletion settings.",
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Settings file to use instead of the default."),
]


@app.command()
def show(config_path: ConfigOption = None) -> None:
    """Show the effective deletion settings."""
    try:
        config = load_config_or_default(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_config(config)


@app.command()
def init(
    config_path: ConfigOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with default values."""
    target = config_path or get_config_path()
    if target.exists() and not force:
        print_info(f"Settings file already exists: {target} (use --force to overwrite)")
        return

    try:
        saved = save_config(DEFAULT_CONFIG, target)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")


@app.command()
def path() -> None:
    """Print the default settings file location."""
    console.print(str(get_config_path()), markup=False, highlight=False, soft_wrap=True)
