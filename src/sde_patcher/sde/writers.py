"""
JSON output for patched SDE tables.

Uses orjson for serialization. Tables keyed by numeric ID are written in
ascending ID order, so patch-created (negative) IDs come first.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import orjson

from ..dogma.lookups import display_name
from ..dogma.models import Table, DEFAULT_LANGUAGE

logger = logging.getLogger(__name__)

JSON_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS


def sorted_by_id(data: Any) -> Any:
    """Return an int-keyed mapping as a str-keyed dict sorted by ID."""
    if isinstance(data, dict) and data and all(
        isinstance(key, int) and not isinstance(key, bool) for key in data
    ):
        return {str(key): data[key] for key in sorted(data)}
    return data


def write_table(data: Any, destination: Path) -> Path:
    """Write a table as pretty-printed JSON.

    Args:
        data: Table (or any JSON-compatible YAML data)
        destination: Output file path; parent directories are created

    Returns:
        The written path
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(orjson.dumps(sorted_by_id(data), option=JSON_OPTIONS))
    logger.debug(f"Wrote {destination}")
    return destination


def build_types_index(
    types: Table, language: str = DEFAULT_LANGUAGE
) -> Dict[str, Dict[str, Any]]:
    """Build a name <-> ID index of the types table.

    Returns:
        ``{"byID": {"587": "Rifter"}, "byName": {"Rifter": [587]}}``; types
        without a usable name are left out
    """
    by_id: Dict[str, str] = {}
    by_name: Dict[str, List[int]] = {}

    for type_id, type_row in types.items():
        if not isinstance(type_row, dict):
            continue
        name = display_name(type_row.get("name"), language)
        if not name:
            continue
        by_id[str(type_id)] = name
        by_name.setdefault(name, []).append(type_id)

    for ids in by_name.values():
        ids.sort()

    return {"byID": by_id, "byName": by_name}
