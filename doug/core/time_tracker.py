"""
Core time tracking functionality for Doug.

This module contains the main TimeTracker class that applies tracking
operations to the stored periods and produces the log and report views.
"""

import logging
from datetime import date, datetime, timezone, tzinfo
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..db.models import Period
from ..db.repository import PeriodStore
from ..utils.dates import parse_human_date, parse_human_datetime
from ..utils.formatting import format_datetime, format_duration
from .aggregation import ReportWindow, build_log, build_report, render_log, render_report

logger = logging.getLogger(__name__)

DATA_FILE_NAME = "periods.json"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


class TimeTrackingError(Exception):
    """Base exception for time tracking operations."""

    pass


class AlreadyTrackingError(TimeTrackingError):
    """Raised when a project is already being tracked."""

    pass


class NothingTrackedError(TimeTrackingError):
    """Raised when an operation needs a running project and there is none."""

    pass


class NoHistoryError(TimeTrackingError):
    """Raised when there is no previous period to restart."""

    pass


class ProjectNotFoundError(TimeTrackingError):
    """Raised when no period belongs to the requested project."""

    pass


class NoPeriodError(TimeTrackingError):
    """Raised when there is no period to edit."""

    pass


class InvalidPeriodError(TimeTrackingError):
    """Raised when an edit would end a period before it starts."""

    pass


class OpenPeriodError(TimeTrackingError):
    """Raised when a running period is not the most recent one."""

    pass


class TimeTracker:
    """Main time tracking service operating on the stored periods."""

    def __init__(
        self,
        data_dir: Path,
        clock: Optional[Clock] = None,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize TimeTracker with the given data directory.

        Args:
            data_dir: Directory where periods.json is stored
            clock: Callable returning the current aware UTC time
            tz: Timezone for display and date parsing (system local if None)

        Raises:
            StoreIOError: If the data file cannot be created or read
            StoreParseError: If the data file is malformed
        """
        self.data_dir = Path(data_dir)
        self.clock = clock or utc_now
        self.tz = tz
        self.store = PeriodStore(self.data_dir / DATA_FILE_NAME)
        self.periods: List[Period] = self.store.load()

    @property
    def data_file(self) -> Path:
        """Path of the JSON data file."""
        return self.store.path

    def now(self) -> datetime:
        """Current time according to the tracker's clock."""
        return self.clock()

    def current_period(self) -> Optional[Period]:
        """
        Get the running period.

        Returns:
            The open period, which is always the last one, or None
        """
        if self.periods and self.periods[-1].is_open:
            return self.periods[-1]
        return None

    def last_period(self) -> Optional[Period]:
        """Get the most recent period, running or not."""
        return self.periods[-1] if self.periods else None

    def _check_open_period(self) -> None:
        """Check that only the last period may be open."""
        for period in self.periods[:-1]:
            if period.is_open:
                raise OpenPeriodError(
                    f"Period for project '{period.project}' started "
                    f"{format_datetime(period.start_time, self.tz)} is still open "
                    "but is not the most recent period"
                )

    def _save(self) -> None:
        self._check_open_period()
        self.store.save(self.periods)

    def start(self, project: str) -> Period:
        """
        Start tracking a project.

        Args:
            project: Name of the project to track

        Returns:
            The new running period

        Raises:
            AlreadyTrackingError: If a project is already being tracked
        """
        current = self.current_period()
        if current:
            raise AlreadyTrackingError(
                f"Project {current.project} is being tracked. "
                "Try stopping your current project with stop first."
            )
        if not project.strip():
            raise TimeTrackingError("Project name cannot be empty")

        period = Period(project=project, start_time=self.now(), end_time=None)
        self.periods.append(period)
        logger.info("Started tracking %s", period.project)
        self._save()
        return period

    def stop(self) -> Period:
        """
        Stop the running period.

        Returns:
            The stopped period

        Raises:
            NothingTrackedError: If no project is being tracked
        """
        current = self.current_period()
        if not current:
            raise NothingTrackedError("No project started.")

        current.stop(self.now())
        logger.info("Stopped tracking %s", current.project)
        self._save()
        return current

    def cancel(self) -> Period:
        """
        Stop the running period and discard it.

        Returns:
            The removed period

        Raises:
            NothingTrackedError: If no project is being tracked
        """
        if not self.current_period():
            raise NothingTrackedError("No project started.")

        period = self.periods.pop()
        logger.info("Canceled tracking %s", period.project)
        self._save()
        return period

    def restart(self) -> Period:
        """
        Start a new period for the most recently tracked project.

        Returns:
            The new running period

        Raises:
            AlreadyTrackingError: If a project is already being tracked
            NoHistoryError: If nothing was ever tracked
        """
        last = self.last_period()
        if last is None:
            raise NoHistoryError("No previous project to restart")
        if last.is_open:
            raise AlreadyTrackingError(
                f"No project to restart. Project {last.project} is being tracked. "
                "Try stopping your current project with stop first."
            )
        return self.start(last.project)

    def amend(self, project: str) -> Tuple[str, Period]:
        """
        Rename the running period.

        Returns:
            The old project name and the renamed period

        Raises:
            NothingTrackedError: If no project is being tracked
        """
        current = self.current_period()
        if not current:
            raise NothingTrackedError("No project started")
        if not project.strip():
            raise TimeTrackingError("Project name cannot be empty")

        old_name = current.project
        current.project = project.strip()
        logger.info("Renamed %s to %s", old_name, current.project)
        self._save()
        return old_name, current

    def delete(self, project: str) -> int:
        """
        Remove every period of a project.

        Returns:
            Number of removed periods

        Raises:
            ProjectNotFoundError: If the project has no periods
        """
        project = project.strip()
        kept = [period for period in self.periods if period.project != project]
        removed = len(self.periods) - len(kept)
        if removed == 0:
            raise ProjectNotFoundError(f"Project '{project}' not found.")

        self.periods = kept
        logger.info("Deleted %d periods of %s", removed, project)
        self._save()
        return removed

    def parse_datetime(self, text: str) -> datetime:
        """Parse a humanized date string relative to now."""
        return parse_human_datetime(text, self.now(), self.tz)

    def parse_date(self, text: str) -> date:
        """Parse a humanized date string into a local calendar day."""
        return parse_human_date(text, self.now(), self.tz)

    def edit(
        self, start: Optional[str] = None, end: Optional[str] = None
    ) -> Optional[Period]:
        """
        Change the start and/or end time of the most recent period.

        Both arguments accept humanized dates (e.g. "thursday 9:00am",
        "today 12:15pm").

        Returns:
            The edited period, or None when neither argument was given

        Raises:
            DateParseError: If a date cannot be parsed
            NoPeriodError: If there is no period to edit
            InvalidPeriodError: If the period would end before it starts
        """
        if start is None and end is None:
            return None

        start_time = self.parse_datetime(start) if start is not None else None
        end_time = self.parse_datetime(end) if end is not None else None

        period = self.last_period()
        if period is None:
            raise NoPeriodError("No period to edit")

        new_start = start_time or period.start_time
        new_end = end_time or period.end_time
        if new_end is not None and new_end < new_start:
            raise InvalidPeriodError(
                f"End time {format_datetime(new_end, self.tz)} is before "
                f"start time {format_datetime(new_start, self.tz)}"
            )

        period.start_time = new_start
        period.end_time = new_end
        logger.info("Edited last period of %s", period.project)
        self._save()
        return period

    def status(self, simple_name: bool = False, simple_time: bool = False) -> Optional[str]:
        """
        Describe the running period.

        Args:
            simple_name: Return only the project name
            simple_time: Return only the elapsed time

        Returns:
            The status text, or None when nothing runs and a simple form was asked

        Raises:
            NothingTrackedError: If nothing runs and no simple form was asked
        """
        current = self.current_period()
        if current is None:
            if simple_name or simple_time:
                return None
            raise NothingTrackedError("No running project")

        elapsed = format_duration(current.duration(self.now()))
        if simple_name:
            return current.project
        if simple_time:
            return elapsed
        return (
            f"Project {current.project} started {elapsed} ago "
            f"({format_datetime(current.start_time, self.tz)})"
        )

    def log(self) -> str:
        """Render all periods grouped by day."""
        return render_log(build_log(self.periods, self.now(), self.tz), self.tz)

    def report(self, window: Optional[ReportWindow] = None) -> str:
        """Render time per project within an optional window."""
        report = build_report(
            self.periods, window or ReportWindow(), self.now(), self.tz
        )
        return render_report(report)
