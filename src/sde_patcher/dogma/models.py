"""
Data models for dogma tables and patches.

Contains type definitions, key names and lookup constants used throughout
the dogma package. Keeps the dict-based approach so unknown record fields
pass through untouched, while providing clear type hints.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, TypeAlias

# Type aliases for clarity
Record: TypeAlias = Dict[str, Any]
"""A single table row (attribute, effect, type, ...) as a dict."""

Table: TypeAlias = Dict[int, Record]
"""Maps a numeric ID to its row."""

PatchOperation: TypeAlias = Dict[str, Any]
"""A single creation or mutation entry from a patch document."""

PatchList: TypeAlias = List[PatchOperation]
"""An ordered sequence of patch operations of the same kind."""


# Patch operation keys
NEW_KEY = "new"
PATCH_KEY = "patch"
MODIFIER_INFO_KEY = "modifierInfo"
DOGMA_ATTRIBUTES_KEY = "dogmaAttributes"
DOGMA_EFFECTS_KEY = "dogmaEffects"

# Selector keys
CATEGORY_KEY = "category"
TYPE_KEY = "type"
HAS_ALL_ATTRIBUTES_KEY = "hasAllAttributes"
HAS_ANY_ATTRIBUTES_KEY = "hasAnyAttributes"
HAS_ANY_EFFECTS_KEY = "hasAnyEffects"

# Name fields of the tables
ATTRIBUTE_NAME_FIELD = "name"
EFFECT_NAME_FIELD = "effectName"
TYPE_NAME_FIELD = "name"
CATEGORY_NAME_FIELD = "name"

DEFAULT_LANGUAGE = "en"

# Skill type name meaning "any skill, if one is required"
ANY_SKILL_NAME = "IfSkillRequired"
ANY_SKILL_ID = -1

EFFECT_CATEGORY_IDS: Dict[str, int] = {
    "passive": 0,
    "active": 1,
    "target": 2,
    "area": 3,
    "online": 4,
    "overload": 5,
    "dungeon": 6,
    "system": 7,
}

MODIFIER_OPERATION_IDS: Dict[str, int] = {
    "preAssign": -1,
    "preMul": 0,
    "preDiv": 1,
    "modAdd": 2,
    "modSub": 3,
    "postMul": 4,
    "postDiv": 5,
    "postPercent": 6,
    "postAssign": 7,
}


@dataclass
class PatchContext:
    """Read-only lookup tables shared by the patchers.

    The dogma tables are replaced with their patched versions as the run
    progresses, so the effect patcher sees patched attributes and the
    type-dogma patcher sees patched attributes and effects.
    """

    dogma_attributes: Table = field(default_factory=dict)
    dogma_effects: Table = field(default_factory=dict)
    categories: Table = field(default_factory=dict)
    groups: Table = field(default_factory=dict)
    types: Table = field(default_factory=dict)
    language: str = DEFAULT_LANGUAGE


@dataclass
class PatchSet:
    """Patch operations collected from all patch documents, by kind."""

    attributes: PatchList = field(default_factory=list)
    effects: PatchList = field(default_factory=list)
    type_dogma: PatchList = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.attributes) + len(self.effects) + len(self.type_dogma)
