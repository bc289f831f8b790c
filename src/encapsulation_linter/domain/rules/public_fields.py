"""Public Field Rule (W9701) - flag public mutable instance fields."""

from collections.abc import Iterable
from typing import Optional

from encapsulation_linter.domain.entities import (
    Accessibility,
    FieldMember,
    FieldMetadata,
    MemberKind,
    SourcePosition,
    TransformationPlan,
    Violation,
)
from encapsulation_linter.domain.naming import derive_names
from encapsulation_linter.domain.rules import BaseRule


def classify(field: FieldMetadata) -> Optional[Violation]:
    """Return a Violation iff `field` is a public, mutable, non-polymorphic instance field."""
    if field.accessibility is not Accessibility.PUBLIC:
        return None
    if (
        field.is_const
        or field.is_abstract
        or field.is_static
        or field.is_virtual
        or field.is_override
        or field.is_read_only
        or field.is_sealed
        or field.is_extern
    ):
        return None
    return Violation(name=field.name, location=field.location)


def classify_member(member: MemberKind) -> Optional[Violation]:
    """Classify a host member. Anything that is not a field is never reported."""
    if isinstance(member, FieldMember):
        return classify(member.metadata)
    return None


def classify_all(members: Iterable[MemberKind]) -> list[Violation]:
    """Classify members independently, keeping their order."""
    violations = []
    for member in members:
        violation = classify_member(member)
        if violation is not None:
            violations.append(violation)
    return violations


class PublicFieldRule(BaseRule):
    """
    Rule for W9701: public fields.

    Auto-fix: replaces the field with a private backing field and a property.
    """

    code: str = "W9701"
    symbol: str = "public-field"
    description: str = (
        "Public Field: mutable instance fields should not be public. "
        "Auto-fix: Encapsulate field behind a property."
    )
    fix_type: str = "code"

    def __init__(self, preserve_initializer: bool = True) -> None:
        self.preserve_initializer = preserve_initializer

    def check(self, member: MemberKind) -> Optional[Violation]:
        return classify_member(member)

    def fix(self, violation: Violation) -> Optional[TransformationPlan]:
        """Return a plan that encapsulates the field named in `violation`."""
        if violation.code not in (self.code, self.symbol):
            return None
        position = SourcePosition(violation.location.line, violation.location.column)
        return TransformationPlan.encapsulate_field(position, self.preserve_initializer)

    def get_fix_instructions(self, violation: Violation) -> str:
        """Provide human instructions for manual fix."""
        names = derive_names(violation.name)
        return (
            f"Encapsulate field '{violation.name}': "
            f"1. Rename it to '{names.field_name}' "
            f"2. Add a property '{names.property_name}' whose getter returns self.{names.field_name} "
            f"3. Add a '{names.property_name}' setter assigning value to self.{names.field_name}"
        )
