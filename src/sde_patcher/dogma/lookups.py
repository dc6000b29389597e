"""
Name lookups over ID-keyed tables.

Patch documents reference rows by human-readable name. Instead of scanning
a table once per reference, NameIndex builds a name -> IDs map once and is
kept up to date while a patcher inserts rows.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, cast

from .models import Record, Table, DEFAULT_LANGUAGE


def localized_name(value: Any, language: str = DEFAULT_LANGUAGE) -> Optional[str]:
    """Return the name stored in a plain or localized ({lang: name}) field."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        name = cast(Dict[str, Any], value).get(language)
        if isinstance(name, str):
            return name
    return None


def display_name(value: Any, language: str = DEFAULT_LANGUAGE) -> Optional[str]:
    """Like localized_name, but falls back to any available translation."""
    name = localized_name(value, language)
    if name is None and isinstance(value, dict):
        for candidate in cast(Dict[str, Any], value).values():
            if isinstance(candidate, str):
                return candidate
    return name or None


def reference_name(entry: Any, keys: Tuple[str, ...]) -> str:
    """Extract the referenced name from a patch list entry.

    Entries are either bare strings or mappings carrying the name under one
    of ``keys`` (checked in order). Returns an empty string if none is set.
    """
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        for key in keys:
            value = cast(Dict[str, Any], entry).get(key)
            if isinstance(value, str):
                return value
    return ""


class NameIndex:
    """Index of a table by one of its name fields.

    Args:
        table: Table to index
        name_field: Field holding the row name
        localized: Whether the field may hold a {lang: name} mapping
        language: Language checked for localized names
    """

    def __init__(
        self,
        table: Table,
        name_field: str,
        localized: bool = False,
        language: str = DEFAULT_LANGUAGE,
    ):
        self.name_field = name_field
        self.localized = localized
        self.language = language
        self._ids: Dict[str, List[int]] = defaultdict(list)
        for row_id, row in table.items():
            name = self.name_of(row)
            if name is not None:
                self._ids[name].append(row_id)

    def name_of(self, row: Record) -> Optional[str]:
        """Return the indexed name of a row, if it has one."""
        value = row.get(self.name_field)
        if self.localized:
            return localized_name(value, self.language)
        return value if isinstance(value, str) else None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(self._ids.get(name))

    def first(self, name: str) -> Optional[int]:
        """Return the ID of the first row with this name, or None."""
        ids = self._ids.get(name)
        return ids[0] if ids else None

    def ids(self, name: str) -> List[int]:
        """Return the IDs of all rows with this name, in table order."""
        return list(self._ids.get(name, []))

    def ids_for(self, names: Iterable[str]) -> List[int]:
        """Return the IDs of all rows whose name is in ``names``, deduplicated."""
        result: List[int] = []
        seen: Set[int] = set()
        for name in names:
            for row_id in self._ids.get(name, []):
                if row_id not in seen:
                    seen.add(row_id)
                    result.append(row_id)
        return result

    def add(self, name: str, row_id: int) -> None:
        """Register a row inserted after the index was built."""
        if row_id not in self._ids[name]:
            self._ids[name].append(row_id)

    def discard(self, name: str, row_id: int) -> None:
        """Forget a row under a name it no longer carries."""
        ids = self._ids.get(name)
        if ids and row_id in ids:
            ids.remove(row_id)
