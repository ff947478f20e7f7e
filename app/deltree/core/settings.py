"""Persisted deletion settings.

Default DeletionConfig values for the command line are stored in
~/.config/deltree/config.toml under a [delete] table:

    [delete]
    max_retries = 3
    wait_between_retries = 0.5
    backoff_multiplier = 2.0
    retry_overriding_file_attributes = true
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile

import tomli_w
from pydantic import ValidationError

from deltree.core.paths import get_config_path
from deltree.models.config import DEFAULT_CONFIG, DeletionConfig

logger = logging.getLogger(__name__)

SECTION = "delete"


class ConfigError(Exception):
    """Base exception for settings file errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the settings file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the settings file cannot be parsed."""


def load_config(path: Path | None = None) -> DeletionConfig:
    """Load deletion settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated DeletionConfig.

    Raises:
        ConfigNotFoundError: If the file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    section = data.get(SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"Invalid config content: [{SECTION}] must be a table")

    try:
        return DeletionConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> DeletionConfig:
    """Load deletion settings, falling back to DEFAULT_CONFIG when the file is absent.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file, using defaults")
        return DEFAULT_CONFIG


def save_config(config: DeletionConfig, path: Path | None = None) -> Path:
    """Save deletion settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The DeletionConfig to save.
        path: Path to save the settings. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = {SECTION: config.model_dump()}

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
