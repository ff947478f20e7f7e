"""Deletion engine facade.

DeletionEngine is the public entry point: it deletes files or whole
directory trees (force_delete, delete_quietly) or the contents of a
directory (clean_directory), retrying with backoff and optionally
repairing permissions according to its DeletionConfig.
"""

import logging
import os
from pathlib import Path

from deltree.core.retry import RetryController, Sleeper
from deltree.filesystem.port import FilesystemPort, LocalFilesystem
from deltree.filesystem.recovery import PermissionRecovery
from deltree.filesystem.walker import TreeWalker
from deltree.models.config import DEFAULT_CONFIG, DeletionConfig
from deltree.models.errors import NotADirectoryArgumentError

logger = logging.getLogger(__name__)

StrPath = str | os.PathLike[str]


class DeletionEngine:
    """Deletes files and directory trees, tolerating transient failures.

    The engine holds only its immutable configuration and may be shared
    by concurrent callers working on disjoint paths.

    Attributes:
        config: Immutable configuration used for every operation.
    """

    def __init__(
        self,
        config: DeletionConfig = DEFAULT_CONFIG,
        fs: FilesystemPort | None = None,
    ) -> None:
        """Initialize the DeletionEngine.

        Args:
            config: Retry, backoff and permission-recovery settings.
            fs: Filesystem port; the local filesystem when omitted.
        """
        self.config = config
        self._fs = fs or LocalFilesystem()
        recovery = (
            PermissionRecovery(self._fs, override_all=config.override_all_attributes)
            if config.retry_overriding_file_attributes
            else None
        )
        self._walker = TreeWalker(self._fs, recovery)
        self._retry = RetryController(config)

    def force_delete(self, path: StrPath, *, sleeper: Sleeper | None = None) -> None:
        """Delete a file or a directory and all of its contents.

        A path that does not exist is reported as a failure like any other
        filesystem error.

        Args:
            path: File, symlink or directory to delete.
            sleeper: Interruptible sleep (e.g. a CancellationToken) used
                between passes, allowing the caller to cancel the operation.

        Raises:
            CompositeDeletionError: If the path could not be deleted after
                all retries, or the wait between passes was interrupted.
        """
        target = Path(path)
        self._retry.run(target, lambda: self._walker.delete_tree(target), sleeper)
        logger.info("Deleted %s", target)

    def delete_quietly(self, path: StrPath, *, sleeper: Sleeper | None = None) -> bool:
        """Delete like force_delete, but report any failure as False instead of raising.

        Invalid paths (e.g. containing a NUL byte) are reported as False too.

        Returns:
            True if the path was deleted, False otherwise.
        """
        try:
            self.force_delete(path, sleeper=sleeper)
        except Exception as e:
            logger.debug("Quiet delete of %s failed: %s", path, e)
            return False
        return True

    def clean_directory(self, directory: StrPath, *, sleeper: Sleeper | None = None) -> None:
        """Delete the contents of a directory, leaving the directory in place.

        Args:
            directory: Directory to clean. Symlinks are not followed.
            sleeper: Interruptible sleep used between passes.

        Raises:
            NotADirectoryArgumentError: If ``directory`` is not a directory;
                nothing is modified in that case.
            CompositeDeletionError: If the contents could not be deleted
                after all retries, or the wait was interrupted.
        """
        target = Path(directory)
        if not self._fs.is_directory(target):
            raise NotADirectoryArgumentError(target)
        self._retry.run(target, lambda: self._walker.clean_contents(target), sleeper)
        logger.info("Cleaned %s", target)


_default_engine = DeletionEngine(DEFAULT_CONFIG)


def get_default_engine() -> DeletionEngine:
    """Get the shared engine built from DEFAULT_CONFIG (single attempt, no recovery)."""
    return _default_engine
