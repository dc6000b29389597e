"""
Settings package for SDE Patcher.

This package provides a modular, type-safe configuration management system
using Qt's QSettings for cross-platform storage.

Usage:
    from sde_patcher.settings import AppSettings, ValidationResult

    settings = AppSettings()
    result = settings.validate()
"""

from .core import AppSettings
from .types import ConfigError, ValidationResult
from .paths import PathSettings
from .patching import PatchingSettings
from .logging import LoggingSettings

__all__ = [
    "AppSettings",
    "ConfigError",
    "ValidationResult",
    "PathSettings",
    "PatchingSettings",
    "LoggingSettings",
]
