"""CLI package for deltree.

This package contains the Typer application and all subcommands.
"""

from deltree.cli.main import app

__all__ = ["app"]
