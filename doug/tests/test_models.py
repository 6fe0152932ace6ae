"""
Tests for data models (doug.db.models).
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from doug.db.models import Period, Settings
from doug.tests.conftest import utc


class TestPeriod:
    """Test cases for the Period model."""

    def test_create_open_period(self) -> None:
        """Test creating a running period."""
        period = Period(project="alpha", start_time=utc(2024, 1, 1, 9, 0))

        assert period.project == "alpha"
        assert period.end_time is None
        assert period.is_open is True

    def test_project_is_stripped(self) -> None:
        """Test that project names are trimmed."""
        period = Period(project="  alpha  ", start_time=utc(2024, 1, 1, 9, 0))

        assert period.project == "alpha"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_project_rejected(self, name: str) -> None:
        """Test that empty project names are rejected."""
        with pytest.raises(ValidationError):
            Period(project=name, start_time=utc(2024, 1, 1, 9, 0))

    def test_naive_times_are_utc(self) -> None:
        """Test that naive timestamps are interpreted as UTC."""
        period = Period(project="alpha", start_time=datetime(2024, 1, 1, 9, 0))

        assert period.start_time == utc(2024, 1, 1, 9, 0)
        assert period.start_time.tzinfo == timezone.utc

    def test_aware_times_are_converted_to_utc(self) -> None:
        """Test that offsets are normalized to UTC."""
        tz = timezone(timedelta(hours=2))
        period = Period(
            project="alpha",
            start_time=datetime(2024, 1, 1, 9, 0, tzinfo=tz),
            end_time=datetime(2024, 1, 1, 10, 0, tzinfo=tz),
        )

        assert period.start_time == utc(2024, 1, 1, 7, 0)
        assert period.end_time is not None
        assert period.end_time.utcoffset() == timedelta(0)

    def test_end_before_start_rejected(self) -> None:
        """Test that a period cannot end before it starts."""
        with pytest.raises(ValidationError) as exc_info:
            Period(
                project="alpha",
                start_time=utc(2024, 1, 1, 10, 0),
                end_time=utc(2024, 1, 1, 9, 0),
            )

        assert "before start time" in str(exc_info.value)

    def test_zero_length_period_allowed(self) -> None:
        """Test that end_time may equal start_time."""
        period = Period(
            project="alpha",
            start_time=utc(2024, 1, 1, 10, 0),
            end_time=utc(2024, 1, 1, 10, 0),
        )

        assert period.duration(utc(2024, 1, 2)) == timedelta(0)

    def test_duration_closed(self) -> None:
        """Test the duration of a closed period."""
        period = Period(
            project="alpha",
            start_time=utc(2024, 1, 1, 9, 0),
            end_time=utc(2024, 1, 1, 10, 30),
        )

        assert period.duration(utc(2024, 1, 5)) == timedelta(hours=1, minutes=30)

    def test_duration_open_runs_until_now(self) -> None:
        """Test that open periods count until the given time."""
        period = Period(project="alpha", start_time=utc(2024, 1, 1, 9, 0))

        assert period.duration(utc(2024, 1, 1, 9, 45)) == timedelta(minutes=45)

    def test_stop(self) -> None:
        """Test closing a period."""
        period = Period(project="alpha", start_time=utc(2024, 1, 1, 9, 0))

        period.stop(utc(2024, 1, 1, 10, 0))

        assert period.is_open is False
        assert period.end_time == utc(2024, 1, 1, 10, 0)


class TestSettings:
    """Test cases for the Settings model."""

    def test_data_location_from_json(self) -> None:
        """Test parsing the settings document."""
        settings = Settings.model_validate_json('{"data_location": "/tmp/doug"}')

        assert settings.data_location == Path("/tmp/doug")

    def test_data_location_required(self) -> None:
        """Test that data_location is required."""
        with pytest.raises(ValidationError):
            Settings.model_validate({})
