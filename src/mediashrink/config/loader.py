"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (MEDIASHRINK_*)
3. Config file (~/.mediashrink/config.toml)
4. Default values

Environment variables:
- MEDIASHRINK_DATA_DIR: Data directory (overrides ~/.mediashrink/)
- MEDIASHRINK_CONFIG_PATH: Path to config file
- MEDIASHRINK_ROOT: Library root folder
- MEDIASHRINK_HISTORY_FILE: Path to the history JSON file
- MEDIASHRINK_FFMPEG_PATH / MEDIASHRINK_FFPROBE_PATH: Tool locations
- MEDIASHRINK_MIN_FILE_SIZE_MB, MEDIASHRINK_MIN_BITRATE_KBPS,
  MEDIASHRINK_MIN_SAVINGS_PERCENT, MEDIASHRINK_TRIAL_SECONDS,
  MEDIASHRINK_PREFETCH_COUNT, MEDIASHRINK_DOWNLOAD_TIMEOUT_SECONDS:
  Conversion thresholds
- MEDIASHRINK_LOG_LEVEL / MEDIASHRINK_LOG_FILE: Logging overrides
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import fields
from pathlib import Path
from typing import Any

from mediashrink.config.env import EnvReader
from mediashrink.config.models import (
    ConversionConfig,
    LoggingConfig,
    MediaShrinkConfig,
    ToolPathsConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".mediashrink"

# (dataclass field, env var, reader method) per section
_CONVERSION_ENV: tuple[tuple[str, str, str], ...] = (
    ("min_file_size_mb", "MEDIASHRINK_MIN_FILE_SIZE_MB", "get_int"),
    ("min_bitrate_kbps", "MEDIASHRINK_MIN_BITRATE_KBPS", "get_int"),
    ("min_savings_percent", "MEDIASHRINK_MIN_SAVINGS_PERCENT", "get_float"),
    ("trial_seconds", "MEDIASHRINK_TRIAL_SECONDS", "get_int"),
    ("prefetch_count", "MEDIASHRINK_PREFETCH_COUNT", "get_int"),
    ("download_timeout_seconds", "MEDIASHRINK_DOWNLOAD_TIMEOUT_SECONDS", "get_int"),
    ("root", "MEDIASHRINK_ROOT", "get_path"),
    ("history_file", "MEDIASHRINK_HISTORY_FILE", "get_path"),
)
_TOOLS_ENV: tuple[tuple[str, str, str], ...] = (
    ("ffmpeg", "MEDIASHRINK_FFMPEG_PATH", "get_path"),
    ("ffprobe", "MEDIASHRINK_FFPROBE_PATH", "get_path"),
)
_LOGGING_ENV: tuple[tuple[str, str, str], ...] = (
    ("level", "MEDIASHRINK_LOG_LEVEL", "get_str"),
    ("file", "MEDIASHRINK_LOG_FILE", "get_path"),
    ("format", "MEDIASHRINK_LOG_FORMAT", "get_str"),
)

_PATH_FIELDS = frozenset({"root", "history_file", "ffmpeg", "ffprobe", "file"})


def get_data_dir(env_reader: EnvReader | None = None) -> Path:
    """Get the mediashrink data directory.

    Holds config.toml, history.json and logs/. Can be overridden by
    MEDIASHRINK_DATA_DIR (tilde is expanded).
    """
    reader = env_reader or EnvReader()
    return reader.get_path("MEDIASHRINK_DATA_DIR") or DEFAULT_DATA_DIR


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the config file path (MEDIASHRINK_CONFIG_PATH or <data_dir>/config.toml)."""
    reader = env_reader or EnvReader()
    env_path = reader.get_path("MEDIASHRINK_CONFIG_PATH")
    if env_path is not None:
        return env_path
    return get_data_dir(reader) / "config.toml"


def load_config_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file.
        strict: If True, re-raise parse and read errors.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist or
        (non-strict) cannot be parsed.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def _section_from_file(file_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = file_config.get(name, {})
    if not isinstance(section, dict):
        logger.warning("Ignoring config section [%s]: not a table", name)
        return {}
    return section


def _section_from_env(
    reader: EnvReader, table: tuple[tuple[str, str, str], ...]
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field_name, var, method in table:
        value = getattr(reader, method)(var)
        if value is not None:
            values[field_name] = value
    return values


def _build_section(cls: type, *layers: dict[str, Any]) -> Any:
    """Instantiate a config dataclass from layered dicts (later layers win).

    Unknown keys are ignored with a warning so an old config file keeps
    working after an upgrade.
    """
    known = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            if key not in known:
                logger.warning("Unknown %s option ignored: %s", cls.__name__, key)
                continue
            if value is None:
                continue
            if key in _PATH_FIELDS and not isinstance(value, Path):
                value = Path(str(value)).expanduser()
            kwargs[key] = value
    return cls(**kwargs)


def get_config(
    config_path: Path | None = None,
    *,
    conversion_overrides: dict[str, Any] | None = None,
    logging_overrides: dict[str, Any] | None = None,
    env_reader: EnvReader | None = None,
    strict: bool = False,
) -> MediaShrinkConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides MEDIASHRINK_CONFIG_PATH).
        conversion_overrides: CLI values for [conversion] keys; None values
            are ignored.
        logging_overrides: CLI values for [logging] keys.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise on config file parse failures.

    Returns:
        MediaShrinkConfig with merged configuration.

    Raises:
        ValueError: If a merged value fails validation.
    """
    reader = env_reader or EnvReader()
    data_dir = get_data_dir(reader)
    path = config_path or get_default_config_path(reader)
    file_config = load_config_file(path, strict=strict)

    conversion = _build_section(
        ConversionConfig,
        _section_from_file(file_config, "conversion"),
        _section_from_env(reader, _CONVERSION_ENV),
        conversion_overrides or {},
    )
    tools = _build_section(
        ToolPathsConfig,
        _section_from_file(file_config, "tools"),
        _section_from_env(reader, _TOOLS_ENV),
    )
    logging_config = _build_section(
        LoggingConfig,
        {"file": data_dir / "logs" / "mediashrink.log"},
        _section_from_file(file_config, "logging"),
        _section_from_env(reader, _LOGGING_ENV),
        logging_overrides or {},
    )

    return MediaShrinkConfig(
        tools=tools,
        conversion=conversion,
        logging=logging_config,
        data_dir=data_dir,
    )
