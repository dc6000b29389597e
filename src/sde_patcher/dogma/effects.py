"""
Effect patcher.

Creates new dogma effects and extends existing ones. Modifiers reference
attributes and skills by name; these are resolved to IDs against the
(already patched) attribute table and the types table.
"""

import copy
import logging
from typing import Any, Dict, List, cast

from .creation import RowCreator
from .errors import DuplicateEffectName, UnknownAttribute, UnknownSkill
from .lookups import NameIndex, reference_name
from .models import (
    PatchContext,
    PatchList,
    PatchOperation,
    Record,
    Table,
    ANY_SKILL_ID,
    ANY_SKILL_NAME,
    ATTRIBUTE_NAME_FIELD,
    EFFECT_CATEGORY_IDS,
    EFFECT_NAME_FIELD,
    MODIFIER_INFO_KEY,
    MODIFIER_OPERATION_IDS,
    NEW_KEY,
    PATCH_KEY,
    TYPE_NAME_FIELD,
)

# Modifier keys naming an attribute, and the ID key each resolves to
MODIFIER_ATTRIBUTE_KEYS = (
    ("modifiedAttribute", "modifiedAttributeID"),
    ("modifyingAttribute", "modifyingAttributeID"),
)


class EffectPatcher:
    """Applies effect patch operations to an effect table.

    Name indexes for attributes and types are built once per patcher, the
    effect index is maintained while rows are created.
    """

    def __init__(self, table: Table, context: PatchContext):
        self.table = table
        self.context = context
        self.creator = RowCreator(table, EFFECT_NAME_FIELD, DuplicateEffectName)
        self.attributes = NameIndex(context.dogma_attributes, ATTRIBUTE_NAME_FIELD)
        self.types = NameIndex(
            context.types, TYPE_NAME_FIELD, localized=True, language=context.language
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def apply(self, patches: PatchList) -> Table:
        """Apply all operations in order and return the patched table."""
        created = 0
        extended = 0

        for operation in patches:
            fixed = self.fixup_operation(operation)
            if NEW_KEY in fixed:
                if self.creator.create(fixed) is not None:
                    created += 1
            elif PATCH_KEY in fixed:
                extended += self.extend(fixed)
            else:
                self.logger.warning(
                    f"Ignoring effect patch without '{NEW_KEY}' or '{PATCH_KEY}': "
                    f"{sorted(operation)}"
                )

        self.logger.info(
            f"Effect patches applied: {created} created, {extended} extended"
        )
        return self.table

    def fixup_operation(self, operation: PatchOperation) -> PatchOperation:
        """Return a copy of the operation with category and modifiers resolved."""
        fixed = dict(operation)

        category = fixed.get("effectCategory")
        if isinstance(category, str) and category in EFFECT_CATEGORY_IDS:
            fixed["effectCategory"] = EFFECT_CATEGORY_IDS[category]

        modifiers = fixed.get(MODIFIER_INFO_KEY)
        if isinstance(modifiers, list):
            fixed[MODIFIER_INFO_KEY] = [
                self.fixup_modifier(cast(Record, modifier))
                for modifier in cast(List[Any], modifiers)
            ]
        return fixed

    def fixup_modifier(self, modifier: Record) -> Record:
        """Resolve attribute, skill and operation names of one modifier.

        Raises:
            UnknownAttribute: If a referenced attribute does not exist
            UnknownSkill: If the skill type does not exist
        """
        fixed = dict(modifier)

        for name_key, id_key in MODIFIER_ATTRIBUTE_KEYS:
            name = fixed.get(name_key)
            if isinstance(name, str):
                attribute_id = self.attributes.first(name)
                if attribute_id is None:
                    raise UnknownAttribute(name)
                fixed[id_key] = attribute_id
                del fixed[name_key]

        skill = fixed.get("skillType")
        if isinstance(skill, str):
            if skill == ANY_SKILL_NAME:
                fixed["skillTypeID"] = ANY_SKILL_ID
            else:
                skill_id = self.types.first(skill)
                if skill_id is None:
                    raise UnknownSkill(skill)
                fixed["skillTypeID"] = skill_id
            del fixed["skillType"]

        operation = fixed.get("operation")
        if isinstance(operation, str) and operation in MODIFIER_OPERATION_IDS:
            fixed["operation"] = MODIFIER_OPERATION_IDS[operation]

        return fixed

    def extend(self, operation: PatchOperation) -> int:
        """Merge a mutation into every effect it targets.

        Modifiers are appended to the target's modifier list; all other
        fields overwrite the target's fields. Target names that match no
        effect are skipped.

        Returns:
            Number of effects that were extended
        """
        targets = cast(List[Any], operation.get(PATCH_KEY) or [])
        names = [reference_name(target, ("name",)) for target in targets]
        index = self.creator.index

        for name in names:
            if name not in index:
                self.logger.debug(f"Effect patch target '{name}' not found, skipping")

        modifiers = operation.get(MODIFIER_INFO_KEY)
        fields: Dict[str, Any] = {
            key: value
            for key, value in operation.items()
            if key not in (PATCH_KEY, MODIFIER_INFO_KEY)
        }

        effect_ids = index.ids_for(names)
        for effect_id in effect_ids:
            entry = self.table[effect_id]
            if isinstance(modifiers, list):
                existing = cast(List[Any], entry.get(MODIFIER_INFO_KEY) or [])
                entry[MODIFIER_INFO_KEY] = existing + [
                    dict(modifier) for modifier in cast(List[Record], modifiers)
                ]

            old_name = index.name_of(entry)
            entry.update(copy.deepcopy(fields))
            new_name = index.name_of(entry)
            if new_name != old_name:
                if old_name is not None:
                    index.discard(old_name, effect_id)
                if new_name is not None:
                    index.add(new_name, effect_id)

        return len(effect_ids)


def apply_effect_patches(
    table: Table, patches: PatchList, context: PatchContext
) -> Table:
    """Apply effect patches to the effect table in place.

    Args:
        table: Effect table (ID -> effect row)
        patches: Effect patch operations in document order
        context: Lookup tables; needs ``dogma_attributes`` and ``types``

    Returns:
        The patched table

    Raises:
        UnknownAttribute, UnknownSkill, DuplicateEffectName
    """
    return EffectPatcher(table, context).apply(patches)
