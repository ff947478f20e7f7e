"""deltree - resilient recursive deletion of files and directory trees.

Deletes files or whole directory trees while tolerating transient
failures through bounded retries, exponential backoff and an optional
permission-repair strategy.
"""

from deltree.core.engine import DeletionEngine, get_default_engine
from deltree.models.config import DEFAULT_CONFIG, DeletionConfig, DeletionConfigBuilder
from deltree.models.errors import CompositeDeletionError, NotADirectoryArgumentError

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "CompositeDeletionError",
    "DeletionConfig",
    "DeletionConfigBuilder",
    "DeletionEngine",
    "NotADirectoryArgumentError",
    "__version__",
    "get_default_engine",
]
