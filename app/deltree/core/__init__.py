"""Core deletion engine, retry control and settings."""

from deltree.core.engine import DeletionEngine, get_default_engine
from deltree.core.retry import CancellationToken, RetryController

__all__ = [
    "CancellationToken",
    "DeletionEngine",
    "RetryController",
    "get_default_engine",
]
