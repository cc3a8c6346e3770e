"""Configuration loading with fail-fast behavior."""

import logging
from pathlib import Path

from pydantic import ValidationError

from rpcdispatch.config.load_utils import load_json_file
from rpcdispatch.config.schema import DispatcherConfig
from rpcdispatch.core.errors import ConfigError, LoadError

logger = logging.getLogger(__name__)


def load_config(path: Path | None = None) -> DispatcherConfig:
    """Load and validate dispatcher configuration.

    Args:
        path: Config file path. When None, the built-in defaults are returned.

    Returns:
        Validated DispatcherConfig object.

    Raises:
        ConfigError: If the file doesn't exist, contains invalid JSON, or fails
            validation.
    """
    if path is None:
        logger.debug("No config path given, using defaults")
        return DispatcherConfig()

    try:
        data = load_json_file(path, error_context="config")
    except LoadError as e:
        raise ConfigError(e.message) from e

    try:
        config = DispatcherConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config
