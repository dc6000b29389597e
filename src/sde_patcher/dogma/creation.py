"""
Row creation shared by the attribute and effect patchers.

Handles ID allocation for patch-created rows and the unique-name check.
"""

import logging
from typing import Any, Dict, Optional, Type, cast

from .errors import DuplicateName
from .lookups import NameIndex
from .models import PatchOperation, Record, Table, NEW_KEY


class RowCreator:
    """Inserts rows described by ``new`` payloads into a table.

    Rows without an explicit ID get negative IDs from a counter that starts
    at -1 and moves down by one for every created row, whether or not that
    row used an explicit ID.
    """

    def __init__(
        self,
        table: Table,
        name_field: str,
        duplicate_error: Type[DuplicateName],
    ):
        self.table = table
        self.name_field = name_field
        self.duplicate_error = duplicate_error
        self.index = NameIndex(table, name_field)
        self.next_id = -1
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def create(self, operation: PatchOperation) -> Optional[int]:
        """Insert the row described by a creation operation.

        Args:
            operation: Patch operation carrying a ``new`` payload

        Returns:
            The ID of the inserted row, or None if the payload has no name

        Raises:
            DuplicateName: If a row with the same name already exists
        """
        new_info = cast(Dict[str, Any], operation.get(NEW_KEY) or {})
        name = new_info.get("name")
        if not isinstance(name, str):
            self.logger.warning(f"Skipping creation without a name: {new_info}")
            return None

        explicit_id = new_info.get("id")
        if isinstance(explicit_id, int) and not isinstance(explicit_id, bool):
            row_id = explicit_id
        else:
            row_id = self.next_id

        if name in self.index:
            raise self.duplicate_error(name)

        row: Record = {key: value for key, value in operation.items() if key != NEW_KEY}
        for key, value in new_info.items():
            if key not in ("name", "id"):
                row[key] = value
        row[self.name_field] = name

        replaced = self.table.get(row_id)
        if replaced is not None:
            self.logger.warning(
                f"New row '{name}' replaces existing row {row_id} "
                f"('{replaced.get(self.name_field)}')"
            )
            old_name = self.index.name_of(replaced)
            if old_name is not None:
                self.index.discard(old_name, row_id)

        self.table[row_id] = row
        self.index.add(name, row_id)
        self.next_id -= 1
        self.logger.debug(f"Created '{name}' with ID {row_id}")
        return row_id
