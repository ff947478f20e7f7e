"""Rich display functions for deletion results and failures."""

from rich.markup import escape
from rich.table import Table

from deltree.models.config import DeletionConfig
from deltree.models.errors import CompositeDeletionError
from deltree.utils.formatting import console


def flatten_causes(error: BaseException, depth: int = 0) -> list[tuple[int, BaseException]]:
    """Flatten a CompositeDeletionError into (depth, cause) pairs.

    Nested composite errors (e.g. from permission recovery) are listed
    followed by their own causes one level deeper.

    Args:
        error: Error to flatten.
        depth: Nesting depth of ``error``'s causes.

    Returns:
        Every cause in order, depth-first.
    """
    rows: list[tuple[int, BaseException]] = []
    if not isinstance(error, CompositeDeletionError):
        return rows
    for cause in error.causes:
        rows.append((depth, cause))
        rows.extend(flatten_causes(cause, depth + 1))
    return rows


def describe_error(error: BaseException) -> str:
    """Get a short description of a single failure."""
    if isinstance(error, CompositeDeletionError):
        return error.message
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    return str(error) or type(error).__name__


def error_path(error: BaseException) -> str:
    """Get the path a failure refers to, if it carries one."""
    if isinstance(error, OSError) and error.filename is not None:
        return str(error.filename)
    return "-"


def create_failures_table(error: CompositeDeletionError) -> Table:
    """Create a Rich table listing every underlying failure.

    Args:
        error: Composite failure to display.

    Returns:
        Rich Table with Path, Error and Details columns.
    """
    table = Table(
        title="Deletion Failures",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", style="path", no_wrap=True)
    table.add_column("Error", width=24)
    table.add_column("Details", style="muted")

    for depth, cause in flatten_causes(error):
        indent = "  " * depth
        table.add_row(
            escape(indent + error_path(cause)),
            f"[error]{escape(type(cause).__name__)}[/]",
            escape(describe_error(cause)),
        )

    return table


def print_failure(error: CompositeDeletionError, details: bool = True) -> None:
    """Print a composite failure summary and, optionally, its causes."""
    console.print(f"[error]{escape(error.message)}[/]")
    if details and error.causes:
        console.print(create_failures_table(error))


def print_config(config: DeletionConfig) -> None:
    """Print a deletion configuration as a two-column table."""
    table = Table(
        title="Deletion Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value", style="info")

    for name, value in config.model_dump().items():
        table.add_row(name, str(value))

    console.print(table)
