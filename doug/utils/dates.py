"""
Humanized date parsing.

Turns strings such as "today 9am", "yesterday 5:30pm", "last friday 14:00"
or "2018-1-1" into aware datetimes, relative to a given "now".
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Tuple

from dateutil import parser as dtparser

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class DateParseError(ValueError):
    """Raised when a date string cannot be understood."""

    pass


def _relative_day(words: list, today: date) -> Tuple[Optional[date], list]:
    """Resolve a leading relative day word, returning the day and the rest."""
    if not words:
        return None, words

    head = words[0]
    if head == "today":
        return today, words[1:]
    if head == "yesterday":
        return today - timedelta(days=1), words[1:]
    if head == "tomorrow":
        return today + timedelta(days=1), words[1:]

    rest = words
    if head == "last" and len(words) > 1:
        head, rest = words[1], words[1:]
    if head in WEEKDAYS:
        # Most recent such weekday, today included
        days_back = (today.weekday() - WEEKDAYS.index(head)) % 7
        return today - timedelta(days=days_back), rest[1:]

    return None, words


def _localize(naive: datetime, tz: Optional[tzinfo]) -> datetime:
    """Attach a zone to a wall-clock time, using the offset in force that day."""
    if tz is None:
        # System local zone
        return naive.astimezone()
    return naive.replace(tzinfo=tz)


def parse_human_datetime(
    text: str, now: datetime, tz: Optional[tzinfo] = None
) -> datetime:
    """
    Parse a humanized date string.

    Args:
        text: The string to parse
        now: Aware reference time
        tz: Zone of wall-clock times without an explicit offset
            (system local if None)

    Returns:
        Aware datetime in UTC

    Raises:
        DateParseError: If the string cannot be parsed
    """
    words = text.strip().lower().split()
    if not words:
        raise DateParseError(f"Couldn't parse date '{text}'")

    if words == ["now"]:
        return now.astimezone(timezone.utc)

    today = now.astimezone(tz).date()
    day, rest = _relative_day(words, today)
    base = datetime.combine(day or today, time(0))

    if day is not None and not rest:
        return _localize(base, tz).astimezone(timezone.utc)

    try:
        parsed = dtparser.parse(" ".join(rest), default=base)
    except (ValueError, OverflowError) as e:
        raise DateParseError(f"Couldn't parse date '{text}'") from e

    if parsed.tzinfo is None:
        parsed = _localize(parsed, tz)
    return parsed.astimezone(timezone.utc)


def parse_human_date(text: str, now: datetime, tz: Optional[tzinfo] = None) -> date:
    """Parse a humanized date string and return its local calendar day."""
    return parse_human_datetime(text, now, tz).astimezone(tz).date()
