"""
Aggregation of periods for the log and report commands.

Periods are grouped by local calendar day (log) or by project (report).
Reports can be limited to a window; each period then only contributes the
part of its duration that overlaps the window.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..db.models import Period
from ..utils.formatting import format_day, format_duration, format_time

logger = logging.getLogger(__name__)

# Length of one unit of a trailing window
UNIT_LENGTHS = {
    "years": timedelta(days=365),
    "months": timedelta(days=31),
    "weeks": timedelta(days=7),
    "days": timedelta(days=1),
}

LOG_DURATION_MIN_WIDTH = 11

Limits = Tuple[Optional[datetime], Optional[datetime]]
Observed = Optional[Tuple[datetime, datetime]]


def _local_midnight(day: date, tz: Optional[tzinfo]) -> datetime:
    if tz is None:
        # System local zone
        return datetime.combine(day, time(0)).astimezone()
    return datetime.combine(day, time(0), tzinfo=tz)


def _local_date(dt: datetime, tz: Optional[tzinfo]) -> date:
    return dt.astimezone(tz).date()


class ReportWindow(BaseModel):
    """Optional time window for a report.

    Only one kind of window is applied. Precedence: years, months, weeks,
    days, then the explicit date range, then no window at all.
    """

    years: int = Field(0, ge=0)
    months: int = Field(0, ge=0)
    weeks: int = Field(0, ge=0)
    days: int = Field(0, ge=0)
    from_date: Optional[date] = None
    to_date: Optional[date] = None

    def active_kind(self) -> Optional[str]:
        """Return the window kind in effect: a unit name, "range" or None."""
        supplied = [unit for unit in UNIT_LENGTHS if getattr(self, unit) > 0]
        if self.from_date is not None or self.to_date is not None:
            supplied.append("range")
        if len(supplied) > 1:
            logger.warning(
                "Several report windows given (%s); using %s",
                ", ".join(supplied),
                supplied[0],
            )
        return supplied[0] if supplied else None

    def limits(self, now: datetime, tz: Optional[tzinfo] = None) -> Limits:
        """
        Compute the window as a pair of instants.

        Args:
            now: Current time
            tz: Timezone used for calendar days (system local if None)

        Returns:
            (start_limit, end_limit); None means unbounded on that side
        """
        kind = self.active_kind()
        if kind is None:
            return None, None

        if kind in UNIT_LENGTHS:
            count = getattr(self, kind)
            return now - count * UNIT_LENGTHS[kind], now

        start_limit = None
        if self.from_date is not None:
            start_limit = _local_midnight(self.from_date, tz)
        # The end day is inclusive
        to_date = self.to_date or _local_date(now, tz)
        end_limit = _local_midnight(to_date + timedelta(days=1), tz)
        return start_limit, end_limit


def clip_period(
    period: Period,
    start_limit: Optional[datetime],
    end_limit: Optional[datetime],
    now: datetime,
) -> Tuple[timedelta, Observed]:
    """
    Clip a period to a window.

    Open periods run until ``now``.

    Returns:
        The clipped duration and the clipped (start, end) pair, or a zero
        duration and None when the period lies outside the window
    """
    start = period.start_time
    end = period.end_time if period.end_time is not None else now

    if start_limit is not None:
        start = max(start, start_limit)
    if end_limit is not None:
        end = min(end, end_limit)

    if end <= start:
        return timedelta(0), None
    return end - start, (start, end)


def _merge_observed(first: Observed, second: Observed) -> Observed:
    if first is None:
        return second
    if second is None:
        return first
    return min(first[0], second[0]), max(first[1], second[1])


class LogEntry(BaseModel):
    """One period as shown in the log."""

    project: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: timedelta


class DayLog(BaseModel):
    """All periods started on one local calendar day."""

    day: date
    total: timedelta
    entries: List[LogEntry] = Field(default_factory=list)


class ProjectTotal(BaseModel):
    """Time spent on one project within a report window."""

    project: str
    duration: timedelta


class Report(BaseModel):
    """Per-project totals and the range of days they cover."""

    first_day: date
    last_day: date
    totals: List[ProjectTotal] = Field(default_factory=list)


def build_log(
    periods: List[Period], now: datetime, tz: Optional[tzinfo] = None
) -> List[DayLog]:
    """Group periods by the local day they started on, oldest day first."""
    days: Dict[date, List[Period]] = defaultdict(list)
    for period in periods:
        days[_local_date(period.start_time, tz)].append(period)

    result = []
    for day in sorted(days):
        day_periods = sorted(days[day], key=lambda p: p.start_time)
        entries = [
            LogEntry(
                project=period.project,
                start_time=period.start_time,
                end_time=period.end_time,
                duration=period.duration(now),
            )
            for period in day_periods
        ]
        total = sum((entry.duration for entry in entries), timedelta(0))
        result.append(DayLog(day=day, total=total, entries=entries))
    return result


def render_log(days: List[DayLog], tz: Optional[tzinfo] = None) -> str:
    """Render the log as one block of lines per day."""
    lines = []
    for day in days:
        lines.append(f"{format_day(day.day)} ({format_duration(day.total)})")
        durations = [format_duration(entry.duration) for entry in day.entries]
        width = max([LOG_DURATION_MIN_WIDTH] + [len(d) for d in durations])
        for entry, duration in zip(day.entries, durations):
            end = (
                format_time(entry.end_time, tz)
                if entry.end_time is not None
                else "present"
            )
            lines.append(
                f"    {format_time(entry.start_time, tz)} to {end} "
                f"{duration:>{width}} {entry.project}"
            )
    return "\n".join(lines)


def build_report(
    periods: List[Period],
    window: ReportWindow,
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> Report:
    """
    Sum the time spent per project within a window.

    Projects with nothing inside the window are left out. Totals are sorted
    by project name.
    """
    start_limit, end_limit = window.limits(now, tz)

    by_project: Dict[str, List[Period]] = defaultdict(list)
    for period in periods:
        by_project[period.project].append(period)

    totals = []
    observed: Observed = None
    for project, project_periods in by_project.items():
        duration = timedelta(0)
        for period in project_periods:
            clipped, period_range = clip_period(period, start_limit, end_limit, now)
            duration += clipped
            observed = _merge_observed(observed, period_range)

        # skip projects that weren't worked on
        if duration == timedelta(0):
            continue
        totals.append(ProjectTotal(project=project, duration=duration))

    totals.sort(key=lambda total: total.project)

    if observed is None:
        today = _local_date(now, tz)
        return Report(first_day=today, last_day=today, totals=totals)

    return Report(
        first_day=_local_date(observed[0], tz),
        last_day=_local_date(observed[1], tz),
        totals=totals,
    )


def render_report(report: Report) -> str:
    """Render a report: a date range header and one aligned line per project."""
    lines = [f"{format_day(report.first_day)} -> {format_day(report.last_day)}"]
    durations = [format_duration(total.duration) for total in report.totals]
    name_width = max([len(total.project) for total in report.totals], default=0)
    duration_width = max([len(d) for d in durations], default=0)
    for total, duration in zip(report.totals, durations):
        lines.append(f"{total.project:<{name_width}} {duration:>{duration_width}}")
    return "\n".join(lines)
