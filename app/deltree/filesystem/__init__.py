"""Filesystem access, tree walking and permission recovery.

This module provides the filesystem port used by the engine, the
single-pass tree walker and the permission recovery strategy.
"""

from deltree.filesystem.port import FilesystemPort, LocalFilesystem
from deltree.filesystem.recovery import PermissionRecovery
from deltree.filesystem.walker import TreeWalker

__all__ = [
    "FilesystemPort",
    "LocalFilesystem",
    "PermissionRecovery",
    "TreeWalker",
]
