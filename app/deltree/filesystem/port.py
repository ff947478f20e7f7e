"""Filesystem access used by the deletion engine.

The engine talks to the filesystem only through FilesystemPort, which
makes every primitive it needs explicit and lets tests substitute a
scripted implementation. LocalFilesystem is the real implementation
backed by os.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Every standard permission bit (rwx for owner, group and others).
ALL_PERMISSION_BITS = stat.S_IRWXU | stat.S_IRWXG | stat.S_IRWXO

# Write for owner, group and others.
ALL_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


@runtime_checkable
class FilesystemPort(Protocol):
    """Primitive filesystem operations required by the deletion engine.

    Implementations raise OSError for every low-level failure.
    """

    def exists(self, path: Path) -> bool:
        """Check whether ``path`` exists (a dangling symlink exists)."""
        ...

    def is_directory(self, path: Path) -> bool:
        """Check whether ``path`` is a directory, never following symlinks."""
        ...

    def list_children(self, directory: Path) -> list[Path]:
        """List the immediate children of ``directory``."""
        ...

    def delete_entry(self, path: Path) -> None:
        """Remove exactly one file, symlink or empty directory."""
        ...

    def is_writable(self, path: Path) -> bool:
        """Check whether the current user may write to ``path``."""
        ...

    def set_writable(self, path: Path, all_bits: bool) -> None:
        """Make ``path`` writable.

        With ``all_bits`` every standard permission bit is granted, otherwise
        only the owner-write bit is added to the existing mode.
        """
        ...

    def parent_of(self, path: Path) -> Path | None:
        """Get the parent of ``path``, or None for a filesystem root."""
        ...


class LocalFilesystem:
    """FilesystemPort implementation for the local operating system."""

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def is_directory(self, path: Path) -> bool:
        try:
            return stat.S_ISDIR(os.lstat(path).st_mode)
        except OSError:
            return False

    def list_children(self, directory: Path) -> list[Path]:
        with os.scandir(directory) as entries:
            return [Path(entry.path) for entry in entries]

    def delete_entry(self, path: Path) -> None:
        if self.is_directory(path):
            os.rmdir(path)
        else:
            os.unlink(path)

    def is_writable(self, path: Path) -> bool:
        if os.path.islink(path):
            # Removing a link never depends on the link's own mode.
            return True
        return os.access(path, os.W_OK)

    def set_writable(self, path: Path, all_bits: bool) -> None:
        if os.path.islink(path):
            return
        if os.name == "posix":
            if all_bits:
                os.chmod(path, ALL_PERMISSION_BITS)
            else:
                mode = stat.S_IMODE(os.lstat(path).st_mode)
                os.chmod(path, mode | stat.S_IWUSR)
        else:
            logger.debug("POSIX permissions unsupported for %s, using fallback", path)

        # Legacy writable flag; a failure here surfaces through the next delete.
        try:
            mode = stat.S_IMODE(os.lstat(path).st_mode)
            extra = ALL_WRITE_BITS if all_bits else stat.S_IWUSR
            if mode & extra != extra:
                os.chmod(path, mode | extra)
        except OSError as e:
            logger.debug("Writable fallback failed for %s: %s", path, e)

    def parent_of(self, path: Path) -> Path | None:
        parent = path.parent
        if parent == path:
            return None
        return parent
