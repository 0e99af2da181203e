"""External tool resolution.

A configured path wins; otherwise the tool is looked up on PATH.
"""

from __future__ import annotations

import shutil
from pathlib import Path


class ToolNotFoundError(Exception):
    """Raised when a required external tool cannot be located."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(
            f"{tool} is not installed or not in PATH. Install ffmpeg, or set "
            f"MEDIASHRINK_{tool.upper()}_PATH / [tools] {tool} in config.toml."
        )


def find_tool(name: str, configured: Path | None = None) -> Path | None:
    """Locate a tool executable.

    Args:
        name: Executable name (e.g. "ffmpeg").
        configured: Explicit path from configuration.

    Returns:
        Path to the executable, or None if not found.
    """
    if configured is not None:
        return configured if configured.exists() else None
    found = shutil.which(name)
    return Path(found) if found else None


def require_tool(name: str, configured: Path | None = None) -> Path:
    """Like find_tool() but raises ToolNotFoundError when missing."""
    path = find_tool(name, configured)
    if path is None:
        raise ToolNotFoundError(name)
    return path
