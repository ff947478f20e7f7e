"""Settings file location.

The settings file is looked up in this order:
- ``$DELTREE_CONFIG`` if set,
- ``$XDG_CONFIG_HOME/deltree/config.toml`` if XDG_CONFIG_HOME is an absolute path,
- ``~/.config/deltree/config.toml``.
"""

import os
from pathlib import Path

APP_NAME = "deltree"
CONFIG_FILENAME = "config.toml"
CONFIG_ENV_VAR = "DELTREE_CONFIG"


def get_config_dir() -> Path:
    """Get the XDG configuration directory for deltree.

    A relative XDG_CONFIG_HOME is ignored, as the XDG base directory
    specification requires.
    """
    base = os.environ.get("XDG_CONFIG_HOME", "")
    if base and os.path.isabs(base):
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_path() -> Path:
    """Get the settings file path, honouring the DELTREE_CONFIG override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_config_dir() / CONFIG_FILENAME
