"""
Path-related settings for SDE Patcher.
"""

from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings


class PathSettings:
    """Manages path-related settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_path(self, key: str) -> Optional[Path]:
        value = self.settings.value(key, "")
        path_str = str(value) if value is not None else ""
        return Path(path_str) if path_str else None

    def _set_path(self, key: str, value: Optional[Path]) -> None:
        self.settings.setValue(key, str(value) if value else "")
        self.settings.sync()

    @property
    def resources_path(self) -> Optional[Path]:
        """Get the directory holding the SDE YAML tables."""
        return self._get_path("paths/resources")

    @resources_path.setter
    def resources_path(self, value: Optional[Path]) -> None:
        """Set the directory holding the SDE YAML tables."""
        self._set_path("paths/resources", value)

    @property
    def patches_path(self) -> Optional[Path]:
        """Get patch documents directory (defaults to resources/patches)."""
        path = self._get_path("paths/patches")
        if path is None and self.resources_path:
            return self.resources_path / "patches"
        return path

    @patches_path.setter
    def patches_path(self, value: Optional[Path]) -> None:
        """Set patch documents directory."""
        self._set_path("paths/patches", value)

    @property
    def output_path(self) -> Optional[Path]:
        """Get JSON output directory (defaults to resources/sde-json)."""
        path = self._get_path("paths/output")
        if path is None and self.resources_path:
            return self.resources_path / "sde-json"
        return path

    @output_path.setter
    def output_path(self, value: Optional[Path]) -> None:
        """Set JSON output directory."""
        self._set_path("paths/output", value)
