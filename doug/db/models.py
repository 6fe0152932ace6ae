"""
Data models for Doug.

This module defines the Pydantic models for tracked periods and the settings file.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class Period(BaseModel):
    """A start/stop interval of work on a project."""

    project: str = Field(..., min_length=1, description="Name of the project")
    start_time: datetime = Field(..., description="Period start time (UTC)")
    end_time: Optional[datetime] = Field(
        None, description="Period end time (UTC, None while running)"
    )

    @field_validator("project")
    @classmethod
    def validate_project(cls, v: str) -> str:
        """Strip surrounding whitespace from the project name."""
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store every timestamp as an aware UTC datetime."""
        if v is None:
            return v
        if v.tzinfo is None:
            # Naive timestamps on disk are UTC
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @model_validator(mode="after")
    def validate_order(self) -> "Period":
        """Validate that end_time is not before start_time."""
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("End time must not be before start time")
        return self

    @property
    def is_open(self) -> bool:
        """Whether the period is still running."""
        return self.end_time is None

    def duration(self, now: datetime) -> timedelta:
        """Get the period duration, counting an open period up to ``now``."""
        end_time = self.end_time if self.end_time is not None else now
        return end_time - self.start_time

    def stop(self, end_time: datetime) -> None:
        """Close the period at the given time."""
        self.end_time = end_time


class Settings(BaseModel):
    """Contents of the settings file."""

    data_location: Path = Field(..., description="Directory holding periods.json")
