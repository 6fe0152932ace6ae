"""Utility functions for Doug."""

from .formatting import (
    format_datetime,
    format_day,
    format_duration,
    format_time,
)

__all__ = [
    "format_duration",
    "format_time",
    "format_datetime",
    "format_day",
]
