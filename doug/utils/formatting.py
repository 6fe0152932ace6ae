"""
Utility functions for formatting time and display elements.

This module provides consistent formatting for durations, dates and times.
"""

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional


def format_duration(duration: timedelta) -> str:
    """
    Format a timedelta as a human-readable duration string.

    Durations longer than a day are shown as accumulated hours.

    Args:
        duration: The timedelta to format

    Returns:
        Formatted duration string (e.g., "42s", "4m 07s", "26h 05m 00s")
    """
    total_seconds = int(duration.total_seconds())

    if total_seconds < 0:
        return "0s"

    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    if total_seconds < 60:
        return f"{seconds}s"
    if hours == 0:
        return f"{minutes}m {seconds:02d}s"
    return f"{hours}h {minutes:02d}m {seconds:02d}s"


def _to_local(dt: datetime, tz: Optional[tzinfo]) -> datetime:
    if dt.tzinfo is None:
        # Assume UTC if no timezone
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def format_time(dt: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format the local time of day as HH:MM."""
    return _to_local(dt, tz).strftime("%H:%M")


def format_datetime(dt: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format a datetime as local YYYY-MM-DD HH:MM."""
    return _to_local(dt, tz).strftime("%Y-%m-%d %H:%M")


def format_day(day: date) -> str:
    """Format a calendar day for headers (e.g., "Monday 1 January 2024")."""
    return f"{day:%A} {day.day} {day:%B %Y}"
