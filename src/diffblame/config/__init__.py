"""Configuration loading, schema, and defaults."""

from diffblame.config.loader import ConfigError, load_config
from diffblame.config.schema import DiffBlameConfig, DiffConfig, OutputConfig, RefsConfig

__all__ = [
    "ConfigError",
    "DiffBlameConfig",
    "DiffConfig",
    "OutputConfig",
    "RefsConfig",
    "load_config",
]
