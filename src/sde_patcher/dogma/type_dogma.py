"""
Type-dogma patcher.

Appends attribute and effect assignments to the dogma rows of types chosen
by selectors. A selector picks either every type of a category or a single
named type, optionally narrowed by attribute/effect presence filters.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple, cast

from .errors import UnknownAttribute, UnknownCategory, UnknownEffect, UnknownType
from .lookups import NameIndex, reference_name
from .models import (
    PatchContext,
    PatchList,
    PatchOperation,
    Record,
    Table,
    ATTRIBUTE_NAME_FIELD,
    CATEGORY_KEY,
    CATEGORY_NAME_FIELD,
    DOGMA_ATTRIBUTES_KEY,
    DOGMA_EFFECTS_KEY,
    EFFECT_NAME_FIELD,
    HAS_ALL_ATTRIBUTES_KEY,
    HAS_ANY_ATTRIBUTES_KEY,
    HAS_ANY_EFFECTS_KEY,
    PATCH_KEY,
    TYPE_KEY,
    TYPE_NAME_FIELD,
)

ATTRIBUTE_REFERENCE_KEYS = ("attribute", "name")
EFFECT_REFERENCE_KEYS = ("effect", "name")


@dataclass
class ResolvedSelector:
    """A selector with every name reference replaced by IDs."""

    type_ids: List[int]
    has_all_attributes: Optional[List[int]] = None
    has_any_attributes: Optional[List[int]] = None
    has_any_effects: Optional[List[int]] = None


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return cast(List[Any], value)
    return [value]


def _assigned_ids(row: Record, list_key: str, id_key: str) -> Set[int]:
    """Return the IDs assigned in one of a dogma row's lists."""
    entries = cast(List[Any], row.get(list_key) or [])
    return {
        cast(int, entry[id_key])
        for entry in entries
        if isinstance(entry, dict) and id_key in entry
    }


class TypeDogmaPatcher:
    """Applies type-dogma patch operations to a type-dogma table.

    Every name an operation references is resolved before the operation
    writes anything, so an operation that fails leaves the table as it was.

    Args:
        table: Type-dogma table (type ID -> dogma row)
        context: Lookup tables for attributes, effects, categories, groups
            and types
        legacy_has_all: Treat ``hasAllAttributes`` like ``hasAnyAttributes``
            (keep types having any of the listed attributes)
    """

    def __init__(
        self, table: Table, context: PatchContext, legacy_has_all: bool = False
    ):
        self.table = table
        self.context = context
        self.legacy_has_all = legacy_has_all
        self.attributes = NameIndex(context.dogma_attributes, ATTRIBUTE_NAME_FIELD)
        self.effects = NameIndex(context.dogma_effects, EFFECT_NAME_FIELD)
        self.categories = NameIndex(
            context.categories,
            CATEGORY_NAME_FIELD,
            localized=True,
            language=context.language,
        )
        self.types = NameIndex(
            context.types, TYPE_NAME_FIELD, localized=True, language=context.language
        )
        self._types_by_category: Optional[Dict[int, List[int]]] = None
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def apply(self, patches: PatchList) -> Table:
        """Apply all operations in order and return the patched table."""
        mutated = 0
        for operation in patches:
            mutated += self.apply_operation(operation)
        self.logger.info(
            f"Type dogma patches applied: {len(patches)} operations, "
            f"{mutated} type rows extended"
        )
        return self.table

    def apply_operation(self, operation: PatchOperation) -> int:
        """Apply a single operation.

        Returns:
            Number of type rows the operation's content was merged into
        """
        attributes = [
            self.resolve_attribute_entry(entry)
            for entry in _as_list(operation.get(DOGMA_ATTRIBUTES_KEY))
        ]
        effects = [
            self.resolve_effect_entry(entry)
            for entry in _as_list(operation.get(DOGMA_EFFECTS_KEY))
        ]
        selectors = [
            self.resolve_selector(cast(Record, selector))
            for selector in _as_list(operation.get(PATCH_KEY))
        ]

        applied: Set[int] = set()
        for selector in selectors:
            for type_id in selector.type_ids:
                row = self.table.get(type_id)
                if not isinstance(row, dict):
                    row = self.table[type_id] = {}
                for list_key in (DOGMA_ATTRIBUTES_KEY, DOGMA_EFFECTS_KEY):
                    if not isinstance(row.get(list_key), list):
                        row[list_key] = []

            targets = [
                type_id
                for type_id in self.filter_types(selector)
                if type_id not in applied
            ]
            for type_id in targets:
                row = self.table[type_id]
                row[DOGMA_ATTRIBUTES_KEY].extend(dict(entry) for entry in attributes)
                row[DOGMA_EFFECTS_KEY].extend(dict(entry) for entry in effects)
            applied.update(targets)

        return len(applied)

    # Name resolution

    def resolve_attribute_entry(self, entry: Any) -> Record:
        """Turn an attribute reference into an ``attributeID`` entry."""
        name = reference_name(entry, ATTRIBUTE_REFERENCE_KEYS)
        attribute_id = self.attributes.first(name)
        if attribute_id is None:
            raise UnknownAttribute(name)
        return self._with_id(
            entry, "attributeID", attribute_id, ATTRIBUTE_REFERENCE_KEYS
        )

    def resolve_effect_entry(self, entry: Any) -> Record:
        """Turn an effect reference into an ``effectID`` entry."""
        name = reference_name(entry, EFFECT_REFERENCE_KEYS)
        effect_id = self.effects.first(name)
        if effect_id is None:
            raise UnknownEffect(name)
        return self._with_id(entry, "effectID", effect_id, EFFECT_REFERENCE_KEYS)

    @staticmethod
    def _with_id(
        entry: Any, id_key: str, row_id: int, name_keys: Tuple[str, ...]
    ) -> Record:
        resolved: Record = {id_key: row_id}
        if isinstance(entry, dict):
            for key, value in cast(Dict[str, Any], entry).items():
                if key not in name_keys and key != id_key:
                    resolved[key] = value
        return resolved

    def resolve_selector(self, selector: Record) -> ResolvedSelector:
        """Resolve a selector's target types and filter prerequisites.

        Raises:
            UnknownCategory: If the category does not exist, or the selector
                names neither a category nor a type
            UnknownType: If no type has the given name
            UnknownAttribute, UnknownEffect: If a filter entry does not exist
        """
        if not isinstance(selector, dict):
            raise UnknownCategory(str(selector))
        category = selector.get(CATEGORY_KEY)
        type_name = selector.get(TYPE_KEY)
        if isinstance(category, str):
            type_ids = self.types_in_category(category)
        elif isinstance(type_name, str):
            type_ids = self.types.ids(type_name)
            if not type_ids:
                raise UnknownType(type_name)
        else:
            raise UnknownCategory(str(category if category is not None else selector))

        resolved = ResolvedSelector(type_ids=type_ids)
        if HAS_ALL_ATTRIBUTES_KEY in selector:
            resolved.has_all_attributes = [
                entry["attributeID"]
                for entry in map(
                    self.resolve_attribute_entry,
                    _as_list(selector[HAS_ALL_ATTRIBUTES_KEY]),
                )
            ]
        if HAS_ANY_ATTRIBUTES_KEY in selector:
            resolved.has_any_attributes = [
                entry["attributeID"]
                for entry in map(
                    self.resolve_attribute_entry,
                    _as_list(selector[HAS_ANY_ATTRIBUTES_KEY]),
                )
            ]
        if HAS_ANY_EFFECTS_KEY in selector:
            resolved.has_any_effects = [
                entry["effectID"]
                for entry in map(
                    self.resolve_effect_entry, _as_list(selector[HAS_ANY_EFFECTS_KEY])
                )
            ]
        return resolved

    def types_in_category(self, category_name: str) -> List[int]:
        """Return IDs of all types whose group belongs to the named category."""
        category_id = self.categories.first(category_name)
        if category_id is None:
            raise UnknownCategory(category_name)

        if self._types_by_category is None:
            self._types_by_category = self._group_types_by_category()
        return list(self._types_by_category.get(category_id, []))

    def _group_types_by_category(self) -> Dict[int, List[int]]:
        category_of_group: Dict[Any, Any] = {
            group_id: group.get("categoryID")
            for group_id, group in self.context.groups.items()
        }
        by_category: Dict[int, List[int]] = defaultdict(list)
        for type_id, type_row in self.context.types.items():
            group_id = type_row.get("groupID")
            if group_id in category_of_group:
                by_category[category_of_group[group_id]].append(type_id)
        return by_category

    # Filtering

    def filter_types(self, selector: ResolvedSelector) -> List[int]:
        """Narrow a selector's types by its presence filters."""
        candidates = selector.type_ids

        if selector.has_all_attributes is not None:
            required = selector.has_all_attributes
            if self.legacy_has_all:
                candidates = self._keep_with_any(
                    candidates, required, DOGMA_ATTRIBUTES_KEY, "attributeID"
                )
            else:
                required_ids = set(required)
                candidates = [
                    type_id
                    for type_id in candidates
                    if required_ids
                    <= _assigned_ids(
                        self.table[type_id], DOGMA_ATTRIBUTES_KEY, "attributeID"
                    )
                ]

        if selector.has_any_attributes is not None:
            candidates = self._keep_with_any(
                candidates,
                selector.has_any_attributes,
                DOGMA_ATTRIBUTES_KEY,
                "attributeID",
            )

        if selector.has_any_effects is not None:
            candidates = self._keep_with_any(
                candidates, selector.has_any_effects, DOGMA_EFFECTS_KEY, "effectID"
            )

        return candidates

    def _keep_with_any(
        self, candidates: List[int], wanted: List[int], list_key: str, id_key: str
    ) -> List[int]:
        wanted_ids = set(wanted)
        return [
            type_id
            for type_id in candidates
            if wanted_ids & _assigned_ids(self.table[type_id], list_key, id_key)
        ]


def apply_type_dogma_patches(
    table: Table,
    patches: PatchList,
    context: PatchContext,
    legacy_has_all: bool = False,
) -> Table:
    """Apply type-dogma patches to the type-dogma table in place.

    Args:
        table: Type-dogma table (type ID -> dogma row)
        patches: Type-dogma patch operations in document order
        context: Lookup tables (patched attributes and effects, categories,
            groups, types)
        legacy_has_all: Use the any-of semantics for ``hasAllAttributes``

    Returns:
        The patched table

    Raises:
        UnknownAttribute, UnknownEffect, UnknownCategory, UnknownType
    """
    return TypeDogmaPatcher(table, context, legacy_has_all).apply(patches)
