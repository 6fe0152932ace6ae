"""
Period store for Doug.

This module provides the data access layer for tracked periods: a single JSON
array in a file, with a backup copy written before every overwrite.
"""

import logging
import shutil
from pathlib import Path
from typing import List

from pydantic import TypeAdapter, ValidationError

from .models import Period

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".json-backup"

_periods_adapter = TypeAdapter(List[Period])


class StoreError(Exception):
    """Base exception for period store operations."""

    pass


class StoreIOError(StoreError):
    """Raised when the data file cannot be created, read, backed up or written."""

    pass


class StoreParseError(StoreError):
    """Raised when the data file does not hold a valid array of periods."""

    pass


class PeriodStore:
    """Repository for the periods kept in a JSON data file."""

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: Location of the JSON data file
        """
        self.path = Path(path)
        self.backup_path = self.path.with_suffix(BACKUP_SUFFIX)

    def load(self) -> List[Period]:
        """
        Load all periods from the data file.

        The data file (and its directory) is created when missing.

        Returns:
            Periods in the order they were stored

        Raises:
            StoreIOError: If the file cannot be created or read
            StoreParseError: If the file contents are not a valid period array
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(exist_ok=True)
            raw = self.path.read_bytes()
        except OSError as e:
            raise StoreIOError(f"Couldn't open data file {self.path}: {e}") from e

        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StoreParseError(
                f"There was a problem reading {self.path}: {e}"
            ) from e

        if not content.strip():
            logger.debug("Data file %s is empty", self.path)
            return []

        try:
            periods = _periods_adapter.validate_json(content)
        except ValidationError as e:
            raise StoreParseError(
                f"There was a problem reading {self.path}: {e}"
            ) from e

        logger.debug("Loaded %d periods from %s", len(periods), self.path)
        return periods

    def save(self, periods: List[Period]) -> None:
        """
        Save all periods, replacing the data file contents.

        A backup of the current data file is made before writing.

        Raises:
            StoreIOError: If the backup copy or the write fails
        """
        serialized = _periods_adapter.dump_json(periods)

        if self.path.exists():
            try:
                shutil.copyfile(self.path, self.backup_path)
            except OSError as e:
                raise StoreIOError(f"Couldn't create backup file: {e}") from e
            logger.debug("Backed up %s to %s", self.path, self.backup_path)

        try:
            with open(self.path, "wb") as f:
                f.write(serialized)
        except OSError as e:
            raise StoreIOError(f"Couldn't write data file {self.path}: {e}") from e

        logger.info("Saved %d periods to %s", len(periods), self.path)
