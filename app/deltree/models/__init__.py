"""Data models for deltree.

This module exports the deletion configuration and error types.
"""

from deltree.models.config import DEFAULT_CONFIG, DeletionConfig, DeletionConfigBuilder
from deltree.models.errors import CompositeDeletionError, NotADirectoryArgumentError

__all__ = [
    "DEFAULT_CONFIG",
    "CompositeDeletionError",
    "DeletionConfig",
    "DeletionConfigBuilder",
    "NotADirectoryArgumentError",
]
