"""
Attribute patcher.

Creates new dogma attribute definitions from patch operations. Attributes
can only be created by patches, never modified.
"""

import logging

from .creation import RowCreator
from .errors import DuplicateAttributeName
from .models import PatchList, Table, ATTRIBUTE_NAME_FIELD, NEW_KEY

logger = logging.getLogger(__name__)


def apply_attribute_patches(table: Table, patches: PatchList) -> Table:
    """Apply attribute patches to the attribute table in place.

    Args:
        table: Attribute table (ID -> attribute row)
        patches: Attribute patch operations in document order

    Returns:
        The patched table

    Raises:
        DuplicateAttributeName: If a created attribute's name already exists
    """
    creator = RowCreator(table, ATTRIBUTE_NAME_FIELD, DuplicateAttributeName)
    created = 0

    for operation in patches:
        if NEW_KEY not in operation:
            logger.warning(
                f"Ignoring attribute patch without '{NEW_KEY}': {sorted(operation)}"
            )
            continue
        if creator.create(operation) is not None:
            created += 1

    logger.info(f"Attribute patches applied: {created} created")
    return table
