"""
This module contains helper functions for formatting data into human-readable strings.
They are used mainly in log messages for sizes and elapsed times.
"""

from datetime import timedelta


def format_timedelta(td_object: timedelta) -> str:
    """
    Formats a timedelta object into a "HH:MM:SS" string.

    Returns:
        For example, a timedelta of 7261 seconds becomes "02:01:01".
        Returns "00:00:00" if the input is not a valid timedelta object.
    """
    if not isinstance(td_object, timedelta):
        return "00:00:00"

    total_seconds = int(td_object.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def size_in_mb(size_bytes: int) -> str:
    """Formats a size in bytes as megabytes with two decimals, e.g. "1.25 MB"."""
    return f"{size_bytes / 1024 / 1024:.2f} MB"


def reduction_percent(original_size: int, encoded_size: int) -> float:
    """
    Returns how much smaller the encoded file is, as a percentage of the original.

    A negative value means the encoded file grew. An empty original yields 0.0.
    """
    if original_size <= 0:
        return 0.0
    return (original_size - encoded_size) / original_size * 100
