"""
Settings validation system for SDE Patcher.
"""

import logging
from typing import List, TYPE_CHECKING

from .logging import VALID_LEVELS
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        # Validate SDE resources path
        resources = self.settings.resources_path
        if resources:
            if not resources.exists():
                errors.append(f"Resources path does not exist: {resources}")
            elif not any(resources.rglob("*.yaml")):
                warnings.append(f"Resources path contains no YAML files: {resources}")
        else:
            errors.append("Resources path not set")

        patches = self.settings.patches_path
        if patches and not patches.is_dir():
            warnings.append(f"Patch directory does not exist: {patches}")

        output = self.settings.output_path
        if resources and output and output.resolve() == resources.resolve():
            errors.append(f"Output path must differ from resources path: {output}")

        if not self.settings.tables:
            errors.append("No SDE tables configured")

        if self.settings.console_log_level.upper() not in VALID_LEVELS:
            warnings.append(
                f"Unknown console log level: {self.settings.console_log_level}"
            )

        if self.settings.legacy_has_all_attributes:
            warnings.append(
                "Legacy hasAllAttributes semantics enabled (matches any listed attribute)"
            )

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
