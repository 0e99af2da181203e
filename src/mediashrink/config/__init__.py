"""Configuration management for mediashrink.

Precedence (highest to lowest): CLI flags, MEDIASHRINK_* environment
variables, the TOML config file, built-in defaults.
"""

from mediashrink.config.env import EnvReader
from mediashrink.config.loader import (
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from mediashrink.config.models import (
    ConversionConfig,
    LoggingConfig,
    MediaShrinkConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "ConversionConfig",
    "LoggingConfig",
    "MediaShrinkConfig",
    "ToolPathsConfig",
    # Loader
    "EnvReader",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
]
