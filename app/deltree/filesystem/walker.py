"""Best-effort recursive deletion pass.

A pass visits every reachable entry once, deleting children before their
parent directory, and collects every failure instead of stopping at the
first one. Files that can be removed are removed even when a sibling
cannot, so the next pass only has to deal with genuine stragglers. A directory
with a surviving descendant is not attempted, since it cannot be empty;
each pass therefore reports one failure per entry that remains.

Traversal uses an explicit work stack, so tree depth is not limited by
the interpreter's recursion limit.
"""

import logging
from pathlib import Path

from deltree.filesystem.port import FilesystemPort
from deltree.filesystem.recovery import PermissionRecovery

logger = logging.getLogger(__name__)


class TreeWalker:
    """Runs single deletion passes over a file or directory tree.

    Symbolic links are never followed: a link to a directory is deleted
    as a plain entry and its target is left untouched.

    Attributes:
        _fs: Filesystem used for listing and deleting.
        _recovery: Permission recovery strategy, or None for bare deletes.
    """

    def __init__(self, fs: FilesystemPort, recovery: PermissionRecovery | None = None) -> None:
        """Initialize the TreeWalker.

        Args:
            fs: Filesystem port to operate on.
            recovery: If given, every entry deletion is routed through it.
        """
        self._fs = fs
        self._recovery = recovery

    def delete_tree(self, path: Path) -> list[OSError]:
        """Run one pass deleting ``path`` and everything below it.

        Args:
            path: File, symlink or directory to delete.

        Returns:
            Every failure seen during the pass; empty when the pass succeeded.
        """
        return self._walk([path])

    def clean_contents(self, directory: Path) -> list[OSError]:
        """Run one pass deleting the contents of ``directory`` but not itself.

        Args:
            directory: Directory whose children are deleted.

        Returns:
            Every failure seen during the pass; empty when the pass succeeded.
        """
        if not self._fs.is_directory(directory):
            return []
        try:
            children = self._fs.list_children(directory)
        except OSError as e:
            logger.debug("Cannot list %s: %s", directory, e)
            return [e]
        return self._walk(children)

    def _walk(self, roots: list[Path]) -> list[OSError]:
        errors: list[OSError] = []
        # (path, mark): mark is None until a directory's children have been
        # pushed, then the error count at that moment.
        stack: list[tuple[Path, int | None]] = [(root, None) for root in reversed(roots)]

        while stack:
            path, mark = stack.pop()
            if mark is None and self._fs.is_directory(path):
                try:
                    children = self._fs.list_children(path)
                except OSError as e:
                    # Abandon the subtree; an empty directory can still go.
                    logger.debug("Cannot list %s: %s", path, e)
                    if self._delete_entry(path) is not None:
                        errors.append(e)
                    continue
                stack.append((path, len(errors)))
                stack.extend((child, None) for child in reversed(children))
                continue

            if mark is not None and len(errors) > mark:
                # A descendant survived this pass, so the directory is not empty.
                logger.debug("Skipping non-empty directory %s", path)
                continue

            error = self._delete_entry(path)
            if error is not None:
                errors.append(error)

        return errors

    def _delete_entry(self, path: Path) -> OSError | None:
        try:
            if self._recovery is not None:
                self._recovery.delete(path)
            else:
                self._fs.delete_entry(path)
        except OSError as e:
            logger.debug("Failed to delete %s: %s", path, e)
            return e
        logger.debug("Deleted %s", path)
        return None
