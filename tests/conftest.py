"""Shared fixtures for the patch engine tests."""

from typing import Any

import pytest

from sde_patcher.dogma import PatchContext


@pytest.fixture
def dogma_context() -> PatchContext:
    """Lookup tables resembling a small slice of the SDE."""
    return PatchContext(
        dogma_attributes={
            -1: {"name": "damageMultiplier"},
            9: {"name": "hp"},
            37: {"name": "maxVelocity"},
            64: {"name": "damageMultiplierBonus"},
        },
        dogma_effects={
            -1: {"effectName": "fireEffect", "modifierInfo": []},
            11: {"effectName": "loPower"},
            12: {"effectName": "hiPower"},
        },
        categories={
            6: {"name": {"en": "Ship", "de": "Schiff"}},
            7: {"name": "Module"},
            16: {"name": {"en": "Skill"}},
        },
        groups={
            10: {"categoryID": 6},
            25: {"categoryID": 6},
            53: {"categoryID": 7},
            255: {"categoryID": 16},
        },
        types={
            5: {"name": {"en": "Rifter"}, "groupID": 10},
            6: {"name": {"en": "Slasher"}, "groupID": 25},
            7: {"name": "Small Gun", "groupID": 53},
            3300: {"name": {"en": "Gunnery"}, "groupID": 255},
        },
    )


@pytest.fixture
def type_dogma_table() -> dict[int, dict[str, Any]]:
    """Type dogma rows: Rifter has hp and maxVelocity, Slasher only hp."""
    return {
        5: {
            "dogmaAttributes": [
                {"attributeID": 9, "value": 350.0},
                {"attributeID": 37, "value": 365.0},
            ],
            "dogmaEffects": [{"effectID": 12, "isDefault": False}],
        },
        6: {
            "dogmaAttributes": [{"attributeID": 9, "value": 300.0}],
            "dogmaEffects": [],
        },
    }
