"""
Settings management for Doug.

This module handles the settings file and the location of the data directory.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..db.models import Settings

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "settings.json"


def default_settings_dir() -> Path:
    """Folder holding settings.json (and, by default, the data)."""
    return Path.home() / ".doug"


class SettingsManager:
    """Manages the Doug settings file and data directory."""

    def __init__(self, settings_dir: Optional[Path] = None) -> None:
        """
        Initialize settings manager.

        Args:
            settings_dir: Folder of settings.json (defaults to ~/.doug)
        """
        self.settings_dir = Path(settings_dir) if settings_dir else default_settings_dir()
        self.settings_file = self.settings_dir / SETTINGS_FILE_NAME

        # Ensure directory exists
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        self.default_settings = Settings(data_location=self.settings_dir)

        # Load existing settings
        self._settings = self._load_settings()

    def _load_settings(self) -> Settings:
        """Load settings from file, creating default if it doesn't exist."""
        if self.settings_file.exists():
            try:
                content = self.settings_file.read_text(encoding="utf-8")
                if content.strip():
                    return Settings.model_validate_json(content)
            except (ValidationError, OSError, UnicodeDecodeError) as e:
                logger.warning("Could not load settings file %s: %s", self.settings_file, e)
                logger.warning("Using default settings")
                return self.default_settings.model_copy()

        # Create default settings file
        self._save_settings(self.default_settings)
        return self.default_settings.model_copy()

    def _save_settings(self, settings: Settings) -> None:
        """Save settings to file."""
        with open(self.settings_file, "w") as f:
            json.dump(settings.model_dump(mode="json"), f, indent=2, sort_keys=True)
        logger.debug("Saved settings to %s", self.settings_file)

    @property
    def settings(self) -> Settings:
        """Current settings."""
        return self._settings

    def get_data_dir(self) -> Path:
        """Get the data directory path."""
        return self._settings.data_location

    def set_data_dir(self, path: Path) -> None:
        """Point the data location at another directory, creating it."""
        path = Path(path).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        self._settings = Settings(data_location=path)
        self._save_settings(self._settings)

    def clear(self) -> None:
        """Reset settings to default values."""
        self._settings = self.default_settings.model_copy()
        self._save_settings(self._settings)


# Global settings manager instance
_settings_manager: Optional[SettingsManager] = None


def get_settings_manager() -> SettingsManager:
    """Get the global settings manager instance."""
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager
