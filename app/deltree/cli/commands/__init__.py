"""CLI commands for deltree.

This package contains all subcommand implementations.
"""

from deltree.cli.commands import config, delete

__all__ = ["config", "delete"]
