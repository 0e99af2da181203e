"""Configuration data models.

This module defines dataclasses for mediashrink configuration options.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class ConversionConfig:
    """Thresholds and limits that drive the admission gates."""

    min_file_size_mb: int = 250
    """Files smaller than this are not even enumerated."""

    min_bitrate_kbps: int = 1500
    """Video bitrate floor; files below it are recorded as low-bitrate skips."""

    min_savings_percent: float = 10.0
    """Minimum predicted or measured savings for a conversion to go ahead."""

    trial_seconds: int = 30
    """Length of the trial segment encoded before a full transcode."""

    prefetch_count: int = 2
    """How many upcoming candidates may be downloading in the background."""

    download_timeout_seconds: int = 3600
    """Upper bound on waiting for a cloud file to materialize."""

    download_poll_seconds: float = 5.0
    """Interval between locality checks while waiting for a download."""

    disk_space_factor: float = 1.1
    """Free space required at the destination, as a multiple of input size."""

    root: Path | None = None
    """Library root. None means discover it (OneDrive environment variables)."""

    history_file: Path | None = None
    """History location. None means <data_dir>/history.json."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.min_file_size_mb < 0:
            raise ValueError(
                f"min_file_size_mb must be non-negative, got {self.min_file_size_mb}"
            )
        if self.min_bitrate_kbps < 0:
            raise ValueError(
                f"min_bitrate_kbps must be non-negative, got {self.min_bitrate_kbps}"
            )
        if not 0.0 <= self.min_savings_percent < 100.0:
            raise ValueError(
                f"min_savings_percent must be in [0, 100), "
                f"got {self.min_savings_percent}"
            )
        if self.trial_seconds < 1:
            raise ValueError(
                f"trial_seconds must be at least 1, got {self.trial_seconds}"
            )
        if self.prefetch_count < 0:
            raise ValueError(
                f"prefetch_count must be non-negative, got {self.prefetch_count}"
            )
        if self.download_timeout_seconds < 0:
            raise ValueError(
                f"download_timeout_seconds must be non-negative, "
                f"got {self.download_timeout_seconds}"
            )
        if self.download_poll_seconds <= 0:
            raise ValueError(
                f"download_poll_seconds must be positive, "
                f"got {self.download_poll_seconds}"
            )
        if self.disk_space_factor < 1.0:
            raise ValueError(
                f"disk_space_factor must be at least 1.0, "
                f"got {self.disk_space_factor}"
            )

    @property
    def min_file_size_bytes(self) -> int:
        return self.min_file_size_mb * 1024 * 1024


@dataclass
class LoggingConfig:
    """Configuration for the run log."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = True

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )

    def with_overrides(
        self, level: str | None = None, file: Path | None = None, json: bool = False
    ) -> "LoggingConfig":
        """Apply the --log-level, --log-file and --log-json options.

        Raises ValueError (from __post_init__) for an unknown level.
        """
        changes: dict[str, object] = {}
        if level is not None:
            changes["level"] = level
        if file is not None:
            changes["file"] = file
        if json:
            changes["format"] = "json"
        return replace(self, **changes)


@dataclass
class MediaShrinkConfig:
    """Main configuration container.

    Aggregates all configuration sections.
    """

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    data_dir: Path = field(default_factory=lambda: Path.home() / ".mediashrink")

    @property
    def history_path(self) -> Path:
        """Effective location of the history file."""
        if self.conversion.history_file is not None:
            return self.conversion.history_file
        return self.data_dir / "history.json"

    def get_tool_path(self, tool_name: str) -> Path | None:
        """Get configured path for a tool.

        Args:
            tool_name: Name of the tool (ffmpeg, ffprobe).

        Returns:
            Configured path or None if not configured.
        """
        return getattr(self.tools, tool_name.lower(), None)
