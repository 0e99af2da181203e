"""Formatting utilities.

Pure functions for presenting sizes and ratios in logs and CLI output.
"""


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes. Negative values keep their sign.

    Returns:
        Formatted string (e.g., "4.2 GB", "128 MB", "1.5 KB").
    """
    sign = "-" if size_bytes < 0 else ""
    size = abs(size_bytes)
    if size >= 1024**4:
        return f"{sign}{size / (1024**4):.2f} TB"
    if size >= 1024**3:
        return f"{sign}{size / (1024**3):.2f} GB"
    if size >= 1024**2:
        return f"{sign}{size / (1024**2):.0f} MB"
    if size >= 1024:
        return f"{sign}{size / 1024:.1f} KB"
    return f"{sign}{size} B"


def format_percent(value: float) -> str:
    """Format a percentage with one decimal ("57.9%")."""
    return f"{value:.1f}%"


def savings_percent(original: int | float, new: int | float) -> float:
    """Percent reduction from original to new; 0.0 when original is empty."""
    if original <= 0:
        return 0.0
    return (1.0 - new / original) * 100.0
