"""
Patching and output settings for SDE Patcher.
"""

import logging
from typing import List, Optional, TYPE_CHECKING, cast

from ..dogma.models import DEFAULT_LANGUAGE
from ..sde.service import DEFAULT_TABLES

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


class PatchingSettings:
    """Manages which tables are converted and how patches are applied."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    def _get_list(self, key: str, default: Optional[List[str]] = None) -> List[str]:
        """Type-safe list retrieval from settings."""
        if default is None:
            default = []
        value = self.settings.value(key, default)
        if isinstance(value, list):
            return [
                str(item) if item is not None else ""
                for item in cast(List[object], value)
            ]
        # INI storage returns a single-item list as a plain string
        if isinstance(value, str) and value:
            return [value]
        return default

    @property
    def tables(self) -> List[str]:
        """Get names of the SDE tables to convert."""
        return self._get_list("patching/tables", list(DEFAULT_TABLES))

    @tables.setter
    def tables(self, value: List[str]) -> None:
        """Set names of the SDE tables to convert."""
        self.settings.setValue("patching/tables", value)
        self.settings.sync()

    @property
    def legacy_has_all_attributes(self) -> bool:
        """Whether hasAllAttributes keeps types having any listed attribute."""
        return self._get_bool("patching/legacy_has_all_attributes", False)

    @legacy_has_all_attributes.setter
    def legacy_has_all_attributes(self, value: bool) -> None:
        self.settings.setValue("patching/legacy_has_all_attributes", value)
        self.settings.sync()

    @property
    def name_language(self) -> str:
        """Get the language checked for localized category/type names."""
        value = self.settings.value("patching/name_language", DEFAULT_LANGUAGE)
        return str(value) if value else DEFAULT_LANGUAGE

    @name_language.setter
    def name_language(self, value: str) -> None:
        self.settings.setValue("patching/name_language", value)
        self.settings.sync()

    @property
    def clear_destination(self) -> bool:
        """Whether the output directory is emptied before writing."""
        return self._get_bool("output/clear_destination", True)

    @clear_destination.setter
    def clear_destination(self, value: bool) -> None:
        self.settings.setValue("output/clear_destination", value)
        self.settings.sync()

    @property
    def max_workers(self) -> int:
        """Get number of threads used for loading and writing files."""
        value = self.settings.value("output/max_workers", 8)
        try:
            return int(str(value)) if value is not None else 8
        except (ValueError, TypeError):
            return 8

    @max_workers.setter
    def max_workers(self, value: int) -> None:
        if value > 0:
            self.settings.setValue("output/max_workers", value)
            self.settings.sync()
        else:
            logger.warning(
                f"Invalid worker count: {value}, keeping current: {self.max_workers}"
            )
