"""Tests for the type-dogma patcher."""

import copy
from typing import Any

import pytest

from sde_patcher.dogma import (
    PatchContext,
    UnknownAttribute,
    UnknownCategory,
    UnknownEffect,
    UnknownType,
    apply_type_dogma_patches,
)

Table = dict[int, dict[str, Any]]


def attribute_ids(row: dict[str, Any]) -> list[int]:
    return [entry["attributeID"] for entry in row["dogmaAttributes"]]


def effect_ids(row: dict[str, Any]) -> list[int]:
    return [entry["effectID"] for entry in row["dogmaEffects"]]


class TestTargetResolution:
    """Category and type selectors."""

    def test_category_selector_creates_missing_row(self) -> None:
        context = PatchContext(
            dogma_attributes={-1: {"name": "damageMultiplier"}},
            dogma_effects={-1: {"effectName": "fireEffect"}},
            categories={6: {"name": "Ship"}},
            groups={10: {"categoryID": 6}},
            types={5: {"groupID": 10}},
        )
        table = apply_type_dogma_patches(
            {},
            [
                {
                    "patch": [{"category": "Ship"}],
                    "dogmaAttributes": [{"name": "damageMultiplier", "value": 1.5}],
                    "dogmaEffects": [{"name": "fireEffect", "isDefault": False}],
                }
            ],
            context,
        )
        assert table == {
            5: {
                "dogmaAttributes": [{"attributeID": -1, "value": 1.5}],
                "dogmaEffects": [{"effectID": -1, "isDefault": False}],
            }
        }

    def test_empty_row_replaced(self, dogma_context: PatchContext) -> None:
        """A row parsed from a bare `6:` entry is treated as missing."""
        table: Table = {6: None}  # type: ignore[dict-item]
        apply_type_dogma_patches(
            table,
            [
                {
                    "patch": [{"type": "Slasher"}],
                    "dogmaAttributes": [{"name": "damageMultiplier", "value": 2.0}],
                }
            ],
            dogma_context,
        )
        assert table == {
            6: {
                "dogmaAttributes": [{"attributeID": -1, "value": 2.0}],
                "dogmaEffects": [],
            }
        }

    def test_category_by_localized_name(
        self, dogma_context: PatchContext, type_dogma_table: Table
    ) -> None:
        apply_type_dogma_patches(
            type_dogma_table,
            [{"patch": [{"category": "Ship"}], "dogmaEffects": [{"effect": "loPower"}]}],
            dogma_context,
        )
        assert effect_ids(type_dogma_table[5]) == [12, 11]
        assert effect_ids(type_dogma_table[6]) == [11]
        assert 7 not in type_dogma_table

    def test_type_selector(self, dogma_context: PatchContext) -> None:
        table = apply_type_dogma_patches(
            {},
            [{"patch": [{"type": "Small Gun"}], "dogmaAttributes": [{"attribute": "hp", "value": 10}]}],
            dogma_context,
        )
        assert table == {
            7: {"dogmaAttributes": [{"attributeID": 9, "value": 10}], "dogmaEffects": []}
        }

    def test_type_selector_localized(self, dogma_context: PatchContext, type_dogma_table: Table) -> None:
        apply_type_dogma_patches(
            type_dogma_table,
            [{"patch": [{"type": "Slasher"}], "dogmaAttributes": [{"name": "maxVelocity", "value": 1}]}],
            dogma_context,
        )
        assert attribute_ids(type_dogma_table[6]) == [9, 37]
        assert attribute_ids(type_dogma_table[5]) == [9, 37]

    def test_unknown_category(self, dogma_context: PatchContext) -> None:
        with pytest.raises(UnknownCategory) as exc_info:
            apply_type_dogma_patches({}, [{"patch": [{"category": "Drone"}]}], dogma_context)
        assert exc_info.value.name == "Drone"

    def test_selector_without_category_or_type(self, dogma_context: PatchContext) -> None:
        with pytest.raises(UnknownCategory):
            apply_type_dogma_patches({}, [{"patch": [{"hasAnyEffects": ["loPower"]}]}], dogma_context)

    def test_unknown_type_leaves_table_untouched(
        self, dogma_context: PatchContext, type_dogma_table: Table
    ) -> None:
        """A failing selector aborts the operation before anything is written."""
        snapshot = copy.deepcopy(type_dogma_table)
        with pytest.raises(UnknownType) as exc_info:
            apply_type_dogma_patches(
                type_dogma_table,
                [
                    {
                        "patch": [{"category": "Module"}, {"type": "Nonexistent"}],
                        "dogmaAttributes": [{"name": "hp", "value": 1}],
                    }
                ],
                dogma_context,
            )
        assert exc_info.value.name == "Nonexistent"
        assert type_dogma_table == snapshot

    def test_earlier_operations_stay_applied(
        self, dogma_context: PatchContext, type_dogma_table: Table
    ) -> None:
        with pytest.raises(UnknownType):
            apply_type_dogma_patches(
                type_dogma_table,
                [
                    {"patch": [{"type": "Slasher"}], "dogmaEffects": ["loPower"]},
                    {"patch": [{"type": "Nonexistent"}], "dogmaEffects": ["loPower"]},
                ],
                dogma_context,
            )
        assert effect_ids(type_dogma_table[6]) == [11]


class TestPayloadResolution:
    """Fixup of the dogmaAttributes/dogmaEffects content."""

    def test_unknown_payload_attribute(self, dogma_context: PatchContext) -> None:
        table: Table = {}
        with pytest.raises(UnknownAttribute) as exc_info:
            apply_type_dogma_patches(
                table,
                [{"patch": [{"type": "Rifter"}], "dogmaAttributes": [{"name": "cpuBonus", "value": 1}]}],
                dogma_context,
            )
        assert exc_info.value.name == "cpuBonus"
        assert table == {}

    def test_unknown_payload_effect(self, dogma_context: PatchContext) -> None:
        with pytest.raises(UnknownEffect):
            apply_type_dogma_patches(
                {},
                [{"patch": [{"type": "Rifter"}], "dogmaEffects": [{"effect": "warpDrive"}]}],
                dogma_context,
            )

    def test_extra_entry_fields_kept(self, dogma_context: PatchContext) -> None:
        table = apply_type_dogma_patches(
            {},
            [
                {
                    "patch": [{"type": "Rifter"}],
                    "dogmaEffects": [{"name": "fireEffect", "isDefault": True}],
                }
            ],
            dogma_context,
        )
        assert table[5]["dogmaEffects"] == [{"effectID": -1, "isDefault": True}]

    def test_existing_entries_kept_in_order(
        self, dogma_context: PatchContext, type_dogma_table: Table
    ) -> None:
        apply_type_dogma_patches(
            type_dogma_table,
            [
                {
                    "patch": [{"type": "Rifter"}],
                    "dogmaAttributes": [
                        {"name": "damageMultiplier", "value": 2.0},
                        {"name": "damageMultiplierBonus", "value": 5.0},
                    ],
                }
            ],
            dogma_context,
        )
        assert type_dogma_table[5]["dogmaAttributes"] == [
            {"attributeID": 9, "value": 350.0},
            {"attributeID": 37, "value": 365.0},
            {"attributeID": -1, "value": 2.0},
            {"attributeID": 64, "value": 5.0},
        ]

    def test_merged_entries_are_not_shared(self, dogma_context: PatchContext) -> None:
        table = apply_type_dogma_patches(
            {},
            [{"patch": [{"category": "Ship"}], "dogmaAttributes": [{"name": "hp", "value": 1}]}],
            dogma_context,
        )
        table[5]["dogmaAttributes"][0]["value"] = 99
        assert table[6]["dogmaAttributes"][0]["value"] == 1


class TestIdempotency:
    """Each type receives an operation's content at most once."""

    def test_overlapping_selectors(self, dogma_context: PatchContext, type_dogma_table: Table) -> None:
        apply_type_dogma_patches(
            type_dogma_table,
            [
                {
                    "patch": [{"category": "Ship"}, {"type": "Rifter"}, {"type": "Slasher"}],
                    "dogmaEffects": [{"name": "loPower"}],
                }
            ],
            dogma_context,
        )
        assert effect_ids(type_dogma_table[5]) == [12, 11]
        assert effect_ids(type_dogma_table[6]) == [11]

    def test_separate_operations_both_apply(self, dogma_context: PatchContext) -> None:
        """Idempotency is per operation; two operations append twice."""
        operation = {"patch": [{"type": "Rifter"}], "dogmaEffects": ["loPower"]}
        table = apply_type_dogma_patches({}, [operation, operation], dogma_context)
        assert effect_ids(table[5]) == [11, 11]


class TestPresenceFilters:
    """hasAllAttributes / hasAnyAttributes / hasAnyEffects."""

    def test_has_any_attributes(self, dogma_context: PatchContext, type_dogma_table: Table) -> None:
        apply_type_dogma_patches(
            type_dogma_table,
            [
                {
                    "patch": [{"category": "Ship", "hasAnyAttributes": [{"name": "maxVelocity"}]}],
                    "dogmaEffects": ["loPower"],
                }
            ],
            dogma_context,
        )
        assert effect_ids(type_dogma_table[5]) == [12, 11]
        assert effect_ids(type_dogma_table[6]) == []

    def test_has_any_effects_absent_everywhere(
        self, dogma_context: PatchContext, type_dogma_table: Table
    ) -> None:
        """An effect no candidate has narrows the selector to nothing."""
        apply_type_dogma_patches(
            type_dogma_table,
            [
                {
                    "patch": [{"category": "Ship", "hasAnyEffects": [{"name": "fireEffect"}]}],
                    "dogmaAttributes": [{"name": "hp", "value": 1}],
                }
            ],
            dogma_context,
        )
        assert attribute_ids(type_dogma_table[5]) == [9, 37]
        assert attribute_ids(type_dogma_table[6]) == [9]

    def test_has_any_effects_match(self, dogma_context: PatchContext, type_dogma_table: Table) -> None:
        apply_type_dogma_patches(
            type_dogma_table,
            [
                {
                    "patch": [{"category": "Ship", "hasAnyEffects": ["hiPower", "loPower"]}],
                    "dogmaAttributes": [{"name": "damageMultiplier", "value": 1}],
                }
            ],
            dogma_context,
        )
        assert attribute_ids(type_dogma_table[5]) == [9, 37, -1]
        assert attribute_ids(type_dogma_table[6]) == [9]

    def test_rows_synthesized_even_when_filtered_out(self, dogma_context: PatchContext) -> None:
        table = apply_type_dogma_patches(
            {},
            [{"patch": [{"category": "Ship", "hasAnyAttributes": ["hp"]}], "dogmaEffects": ["loPower"]}],
            dogma_context,
        )
        assert table == {
            5: {"dogmaAttributes": [], "dogmaEffects": []},
            6: {"dogmaAttributes": [], "dogmaEffects": []},
        }

    def test_unknown_filter_attribute(self, dogma_context: PatchContext, type_dogma_table: Table) -> None:
        snapshot = copy.deepcopy(type_dogma_table)
        with pytest.raises(UnknownAttribute):
            apply_type_dogma_patches(
                type_dogma_table,
                [{"patch": [{"category": "Ship", "hasAllAttributes": ["agility"]}], "dogmaEffects": ["loPower"]}],
                dogma_context,
            )
        assert type_dogma_table == snapshot

    def test_unknown_filter_effect(self, dogma_context: PatchContext) -> None:
        with pytest.raises(UnknownEffect):
            apply_type_dogma_patches(
                {},
                [{"patch": [{"type": "Rifter", "hasAnyEffects": ["cloak"]}]}],
                dogma_context,
            )

    def test_filter_sees_earlier_operations(self, dogma_context: PatchContext) -> None:
        """Operations fold in order: a later filter sees earlier merges."""
        table = apply_type_dogma_patches(
            {},
            [
                {"patch": [{"type": "Rifter"}], "dogmaEffects": ["hiPower"]},
                {
                    "patch": [{"category": "Ship", "hasAnyEffects": ["hiPower"]}],
                    "dogmaAttributes": [{"name": "hp", "value": 1}],
                },
            ],
            dogma_context,
        )
        assert attribute_ids(table[5]) == [9]
        assert attribute_ids(table[6]) == []


class TestHasAllAttributesSemantics:
    """Both readings of hasAllAttributes, labeled by intent."""

    @pytest.fixture
    def operation(self) -> dict[str, Any]:
        return {
            "patch": [
                {"category": "Ship", "hasAllAttributes": [{"name": "hp"}, {"name": "maxVelocity"}]}
            ],
            "dogmaEffects": [{"name": "loPower"}],
        }

    def test_all_of_requires_every_attribute(
        self, dogma_context: PatchContext, type_dogma_table: Table, operation: dict[str, Any]
    ) -> None:
        """Default: only types having hp AND maxVelocity are patched."""
        apply_type_dogma_patches(type_dogma_table, [operation], dogma_context)
        assert effect_ids(type_dogma_table[5]) == [12, 11]
        assert effect_ids(type_dogma_table[6]) == []

    def test_legacy_any_of_accepts_single_attribute(
        self, dogma_context: PatchContext, type_dogma_table: Table, operation: dict[str, Any]
    ) -> None:
        """Legacy: types having hp OR maxVelocity are patched."""
        apply_type_dogma_patches(
            type_dogma_table, [operation], dogma_context, legacy_has_all=True
        )
        assert effect_ids(type_dogma_table[5]) == [12, 11]
        assert effect_ids(type_dogma_table[6]) == [11]

    def test_all_of_combined_with_any_effects(
        self, dogma_context: PatchContext, type_dogma_table: Table
    ) -> None:
        """Filters narrow one after another."""
        apply_type_dogma_patches(
            type_dogma_table,
            [
                {
                    "patch": [
                        {
                            "category": "Ship",
                            "hasAllAttributes": ["hp"],
                            "hasAnyEffects": ["loPower"],
                        }
                    ],
                    "dogmaAttributes": [{"name": "damageMultiplier", "value": 1}],
                }
            ],
            dogma_context,
        )
        assert attribute_ids(type_dogma_table[5]) == [9, 37]
        assert attribute_ids(type_dogma_table[6]) == [9]
