"""
Core settings management for SDE Patcher.
"""

import logging
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QSettings

from .types import ValidationResult
from .validation import SettingsValidator
from .paths import PathSettings
from .patching import PatchingSettings
from .logging import LoggingSettings

logger = logging.getLogger(__name__)


class AppSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to application settings stored either in the
    platform's native per-user store or in an explicit INI file.
    """

    def __init__(
        self, profile: str = "default", settings_file: Optional[str | Path] = None
    ):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: INI file to use instead of the native store
        """
        if settings_file:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings("sde_patcher", "sde_patcher")
        self.profile = profile

        # Use profile as a group to create hierarchy: sde_patcher/sde_patcher/default/...
        self.settings.beginGroup(profile)

        # Initialize subsystems
        self._validator = SettingsValidator(self)
        self._paths = PathSettings(self.settings)
        self._patching = PatchingSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === PATH SETTINGS (DELEGATED) ===

    @property
    def resources_path(self) -> Optional[Path]:
        """Get the directory holding the SDE YAML tables."""
        return self._paths.resources_path

    @resources_path.setter
    def resources_path(self, value: Optional[Path]) -> None:
        self._paths.resources_path = value

    @property
    def patches_path(self) -> Optional[Path]:
        """Get patch documents directory."""
        return self._paths.patches_path

    @patches_path.setter
    def patches_path(self, value: Optional[Path]) -> None:
        self._paths.patches_path = value

    @property
    def output_path(self) -> Optional[Path]:
        """Get JSON output directory."""
        return self._paths.output_path

    @output_path.setter
    def output_path(self, value: Optional[Path]) -> None:
        self._paths.output_path = value

    # === PATCHING SETTINGS (DELEGATED) ===

    @property
    def tables(self) -> List[str]:
        """Get names of the SDE tables to convert."""
        return self._patching.tables

    @tables.setter
    def tables(self, value: List[str]) -> None:
        self._patching.tables = value

    @property
    def legacy_has_all_attributes(self) -> bool:
        """Whether hasAllAttributes uses the legacy any-of semantics."""
        return self._patching.legacy_has_all_attributes

    @legacy_has_all_attributes.setter
    def legacy_has_all_attributes(self, value: bool) -> None:
        self._patching.legacy_has_all_attributes = value

    @property
    def name_language(self) -> str:
        """Get the language checked for localized names."""
        return self._patching.name_language

    @name_language.setter
    def name_language(self, value: str) -> None:
        self._patching.name_language = value

    @property
    def clear_destination(self) -> bool:
        """Whether the output directory is emptied before writing."""
        return self._patching.clear_destination

    @clear_destination.setter
    def clear_destination(self, value: bool) -> None:
        self._patching.clear_destination = value

    @property
    def max_workers(self) -> int:
        """Get number of threads used for file I/O."""
        return self._patching.max_workers

    @max_workers.setter
    def max_workers(self, value: int) -> None:
        self._patching.max_workers = value

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        """Get log file path."""
        return self._logging.log_file_path

    @log_file_path.setter
    def log_file_path(self, value: str) -> None:
        self._logging.log_file_path = value

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
