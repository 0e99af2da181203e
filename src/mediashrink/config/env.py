"""Environment variable reader with dependency injection support.

EnvReader reads and converts MEDIASHRINK_* variables. Tests pass their own
mapping instead of patching os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_PREFIX = "MEDIASHRINK_"


class EnvReader:
    """Environment variable reader with type conversion.

    Invalid values are logged and replaced by the supplied default rather
    than raising, so a typo in the environment never aborts a run.

    Example:
        reader = EnvReader(env={"MEDIASHRINK_PREFETCH_COUNT": "4"})
        reader.get_int("MEDIASHRINK_PREFETCH_COUNT", 2)  # 4
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string from environment variable."""
        value = self._env.get(var)
        if value is None:
            return default
        return value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Get an integer from environment variable.

        Returns:
            Parsed integer value, or default if not set or invalid.
        """
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_float(self, var: str, default: float | None = None) -> float | None:
        """Get a float from environment variable.

        Returns:
            Parsed float value, or default if not set or invalid.
        """
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", var, value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a boolean from environment variable.

        "true", "1", "yes" and "on" (any case) are true; any other value
        is false.
        """
        value = self._env.get(var)
        if value is None:
            return default
        return value.lower() in ("true", "1", "yes", "on")

    def get_path(
        self, var: str, must_exist: bool = False, default: Path | None = None
    ) -> Path | None:
        """Get a path from environment variable.

        Args:
            var: Environment variable name.
            must_exist: If True, a path that does not exist is logged and
                replaced by the default.
            default: Default value if not set.

        Returns:
            Expanded Path, or default.
        """
        value = self._env.get(var)
        if value is None or not value.strip():
            return default

        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s",
                var,
                value,
            )
            return default
        return path
