"""
Errors raised while applying dogma patches.

Every error names the string that could not be resolved (or collided), so
the operator can find it in the patch documents.
"""


class PatchError(Exception):
    """Base class for all patch application failures."""

    kind = "patch error"

    def __init__(self, name: str):
        super().__init__(f"{self.kind}: {name!r}")
        self.name = name


class UnknownReference(PatchError):
    """A name reference did not match any row of the looked-up table."""


class UnknownAttribute(UnknownReference):
    kind = "unknown attribute"


class UnknownEffect(UnknownReference):
    kind = "unknown effect"


class UnknownSkill(UnknownReference):
    kind = "unknown skill"


class UnknownCategory(UnknownReference):
    kind = "unknown category"


class UnknownType(UnknownReference):
    kind = "unknown type"


class DuplicateName(PatchError):
    """A created row reuses a name that already exists in its table."""


class DuplicateAttributeName(DuplicateName):
    kind = "duplicate attribute name"


class DuplicateEffectName(DuplicateName):
    kind = "duplicate effect name"
