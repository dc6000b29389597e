"""
Module for reading, patching and writing SDE tables.

Provides the service driving a whole run plus the file loaders and JSON
writers it is built from.
"""

from .service import SdePatchService, DEFAULT_TABLES, DOGMA_TABLES
from .loaders import (
    SdeFileLoader,
    PatchSetLoader,
    load_patch_set,
    normalize_id_keys,
)
from .writers import write_table, build_types_index

__all__ = [
    # Main service
    "SdePatchService",
    # Constants
    "DEFAULT_TABLES",
    "DOGMA_TABLES",
    # Component classes and helpers
    "SdeFileLoader",
    "PatchSetLoader",
    "load_patch_set",
    "normalize_id_keys",
    "write_table",
    "build_types_index",
]
