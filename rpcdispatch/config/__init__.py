"""Configuration loading and validation."""

from rpcdispatch.config.loader import load_config
from rpcdispatch.config.schema import DispatcherConfig

__all__ = [
    "DispatcherConfig",
    "load_config",
]
