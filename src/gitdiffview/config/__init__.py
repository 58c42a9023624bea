"""Configuration loading, schema, and defaults."""

from gitdiffview.config.loader import ConfigError, load_config
from gitdiffview.config.schema import DiffConfig, OutputConfig, ViewConfig, ViewerConfig, WatchConfig

__all__ = [
    "ConfigError",
    "DiffConfig",
    "OutputConfig",
    "ViewConfig",
    "ViewerConfig",
    "WatchConfig",
    "load_config",
]
