"""
SDE Patcher: applies community patch documents to EVE static data tables.

Resolves attribute, effect, skill, category and type names in patch
documents to IDs and merges the patch content into the dogma tables before
converting the SDE to JSON.
"""

__version__ = "0.1.0"
__author__ = "SDE Patcher Contributors"

# Core service imports
from .sde import SdePatchService
from .utils.logging_config import setup_logging

# Patch engine
from .dogma import (
    PatchContext,
    PatchSet,
    PatchError,
    apply_attribute_patches,
    apply_effect_patches,
    apply_type_dogma_patches,
)

__all__ = [
    # Services
    "SdePatchService",

    # Logging
    "setup_logging",

    # Patch engine
    "PatchContext",
    "PatchSet",
    "PatchError",
    "apply_attribute_patches",
    "apply_effect_patches",
    "apply_type_dogma_patches",
]
