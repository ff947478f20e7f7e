"""Deletion commands.

Provides ``deltree rm`` to delete files and directory trees and
``deltree clean`` to empty a directory, both retrying with backoff
according to the settings file and command-line overrides.
"""

import signal
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from deltree.cli.display import print_failure
from deltree.core.engine import DeletionEngine
from deltree.core.retry import CancellationToken
from deltree.core.settings import ConfigError, load_config_or_default
from deltree.models.config import DeletionConfig
from deltree.models.errors import CompositeDeletionError, NotADirectoryArgumentError
from deltree.utils.formatting import print_error, print_success, print_warning

RetriesOption = Annotated[
    int | None,
    typer.Option("--retries", "-r", min=0, help="Retries after the first attempt."),
]
WaitOption = Annotated[
    float | None,
    typer.Option("--wait", "-w", min=0.0, help="Seconds to wait before a retry."),
]
BackoffOption = Annotated[
    float | None,
    typer.Option("--backoff", "-b", min=1.0, help="Multiply the wait by this per retry."),
]
FixPermissionsOption = Annotated[
    bool | None,
    typer.Option(
        "--fix-permissions/--no-fix-permissions",
        help="Make entries and parents writable and retry when a delete fails.",
    ),
]
AllPermissionsOption = Annotated[
    bool | None,
    typer.Option(
        "--all-permissions/--owner-write",
        help="Grant every permission bit instead of owner-write when fixing.",
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Settings file to use instead of the default."),
]


def rm(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Files or directories to delete."),
    ],
    retries: RetriesOption = None,
    wait: WaitOption = None,
    backoff: BackoffOption = None,
    fix_permissions: FixPermissionsOption = None,
    all_permissions: AllPermissionsOption = None,
    config_path: ConfigOption = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only report which paths failed."),
    ] = False,
) -> None:
    """Delete files and directory trees, retrying on transient failures."""
    config = _resolve_config(config_path, retries, wait, backoff, fix_permissions, all_permissions)
    engine = DeletionEngine(config)

    failed = 0
    with _cancel_on_interrupt() as token:
        for path in paths:
            if quiet:
                if not engine.delete_quietly(path, sleeper=token):
                    print_warning(f"Could not delete {path}")
                    failed += 1
            else:
                try:
                    engine.force_delete(path, sleeper=token)
                except CompositeDeletionError as e:
                    print_failure(e)
                    failed += 1
            if token.cancelled:
                break

    if failed:
        raise typer.Exit(code=1)
    if not quiet:
        print_success(f"Deleted {len(paths)} path(s).")


def clean(
    directory: Annotated[
        Path,
        typer.Argument(help="Directory whose contents are deleted."),
    ],
    retries: RetriesOption = None,
    wait: WaitOption = None,
    backoff: BackoffOption = None,
    fix_permissions: FixPermissionsOption = None,
    all_permissions: AllPermissionsOption = None,
    config_path: ConfigOption = None,
) -> None:
    """Delete everything inside a directory, keeping the directory itself."""
    config = _resolve_config(config_path, retries, wait, backoff, fix_permissions, all_permissions)
    engine = DeletionEngine(config)

    with _cancel_on_interrupt() as token:
        try:
            engine.clean_directory(directory, sleeper=token)
        except NotADirectoryArgumentError as e:
            print_error(str(e))
            raise typer.Exit(code=2) from e
        except CompositeDeletionError as e:
            print_failure(e)
            raise typer.Exit(code=1) from e

    print_success(f"Cleaned {directory}.")


# === Private helper functions ===


def _resolve_config(
    config_path: Path | None,
    retries: int | None,
    wait: float | None,
    backoff: float | None,
    fix_permissions: bool | None,
    all_permissions: bool | None,
) -> DeletionConfig:
    """Load settings and apply command-line overrides."""
    try:
        base = load_config_or_default(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    overrides: dict[str, Any] = {
        "max_retries": retries,
        "wait_between_retries": wait,
        "backoff_multiplier": backoff,
        "retry_overriding_file_attributes": fix_permissions,
        "override_all_attributes": all_permissions,
    }
    data = base.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return DeletionConfig.model_validate(data)
    except ValidationError as e:
        print_error(f"Invalid settings: {e}")
        raise typer.Exit(code=1) from e


@contextmanager
def _cancel_on_interrupt() -> Iterator[CancellationToken]:
    """Turn the first Ctrl-C into a cancellation of the backoff wait.

    A second Ctrl-C restores the default behaviour and interrupts immediately.
    """
    token = CancellationToken()

    def handler(signum: int, frame: object) -> None:
        if token.cancelled:
            raise KeyboardInterrupt
        print_warning("Interrupted; stopping after the current pass.")
        token.cancel()

    try:
        previous = signal.signal(signal.SIGINT, handler)
    except ValueError:
        # Not in the main thread; cancellation is unavailable.
        yield token
        return
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)
