"""
Dogma patch engine.

Resolves name references in patch documents to IDs and merges patch
content into the dogma attribute, effect and type-dogma tables. The three
patchers must run in order: attributes, effects, type dogma.
"""

from .models import (
    Record,
    Table,
    PatchOperation,
    PatchList,
    PatchContext,
    PatchSet,
    EFFECT_CATEGORY_IDS,
    MODIFIER_OPERATION_IDS,
    ANY_SKILL_NAME,
    ANY_SKILL_ID,
)
from .errors import (
    PatchError,
    UnknownReference,
    UnknownAttribute,
    UnknownEffect,
    UnknownSkill,
    UnknownCategory,
    UnknownType,
    DuplicateName,
    DuplicateAttributeName,
    DuplicateEffectName,
)
from .lookups import NameIndex
from .attributes import apply_attribute_patches
from .effects import EffectPatcher, apply_effect_patches
from .type_dogma import TypeDogmaPatcher, apply_type_dogma_patches

__all__ = [
    # Patchers
    "apply_attribute_patches",
    "apply_effect_patches",
    "apply_type_dogma_patches",
    "EffectPatcher",
    "TypeDogmaPatcher",
    "NameIndex",
    # Type aliases and models
    "Record",
    "Table",
    "PatchOperation",
    "PatchList",
    "PatchContext",
    "PatchSet",
    # Constants
    "EFFECT_CATEGORY_IDS",
    "MODIFIER_OPERATION_IDS",
    "ANY_SKILL_NAME",
    "ANY_SKILL_ID",
    # Errors
    "PatchError",
    "UnknownReference",
    "UnknownAttribute",
    "UnknownEffect",
    "UnknownSkill",
    "UnknownCategory",
    "UnknownType",
    "DuplicateName",
    "DuplicateAttributeName",
    "DuplicateEffectName",
]
