"""Permission recovery for entries that refuse to be deleted.

When a plain delete fails, the entry (and its parent directory, since on
POSIX removing a directory entry is governed by the parent's write
permission) is made writable and the delete is retried once.
"""

import logging
from pathlib import Path

from deltree.filesystem.port import FilesystemPort
from deltree.models.errors import CompositeDeletionError

logger = logging.getLogger(__name__)


class PermissionRecovery:
    """Delete an entry, repairing its permissions and retrying on failure.

    Attributes:
        _fs: Filesystem used for every operation.
        _override_all: Grant all permission bits rather than owner-write only.
    """

    def __init__(self, fs: FilesystemPort, override_all: bool = False) -> None:
        """Initialize the PermissionRecovery.

        Args:
            fs: Filesystem port to operate on.
            override_all: If True, set every permission bit when repairing.
        """
        self._fs = fs
        self._override_all = override_all

    def delete(self, path: Path) -> None:
        """Delete ``path``, repairing permissions once if the first attempt fails.

        Repair is lazy: nothing is changed unless the plain delete fails,
        and an entry that no longer exists is never repaired.

        Args:
            path: File, symlink or empty directory to delete.

        Raises:
            OSError: The plain delete failure, if the entry does not exist.
            CompositeDeletionError: If the entry still cannot be deleted. Its
                causes are the original failure, the failure after repair and,
                for a directory whose contents could not be listed, the
                listing failure.
        """
        try:
            self._fs.delete_entry(path)
            return
        except OSError as first:
            if not self._fs.exists(path):
                # Nothing to repair.
                raise
            original = first

        try:
            self.make_deletable(path)
            self._fs.delete_entry(path)
            logger.info("Deleted %s after repairing permissions", path)
            return
        except OSError as second:
            retried = second

        if self._fs.is_directory(path):
            try:
                entries = [str(child) for child in self._fs.list_children(path)]
            except OSError as listing:
                raise CompositeDeletionError(
                    f"Cannot delete directory {path}", [original, retried, listing]
                ) from original
            raise CompositeDeletionError(
                f"Cannot delete directory {path} with directory contents: {entries}",
                [original, retried],
            ) from original
        raise CompositeDeletionError(f"Cannot delete file {path}", [original, retried]) from original

    def make_deletable(self, path: Path) -> None:
        """Make ``path`` and its parent directory writable where they are not.

        Raises:
            OSError: If changing permissions fails.
        """
        if not self._fs.is_writable(path):
            logger.warning("Making %s writable to retry deletion", path)
            self._fs.set_writable(path, self._override_all)
        parent = self._fs.parent_of(path)
        if parent is not None and not self._fs.is_writable(parent):
            logger.warning("Making parent directory %s writable to retry deletion", parent)
            self._fs.set_writable(parent, self._override_all)
