"""Domain models for rules."""

from typing import Optional, Protocol

from encapsulation_linter.domain.entities import MemberKind, TransformationPlan, Violation


class BaseRule(Protocol):
    """The fundamental unit of field governance."""

    code: str
    description: str

    def check(self, member: MemberKind) -> Optional[Violation]:
        """Interrogate a member for a breach of the rule."""
        ...

    def fix(self, violation: Violation) -> Optional[TransformationPlan]:
        """
        Return a plan ONLY if the resolution is deterministic.

        The plan is interpreted by the fixer gateway; rules never touch syntax
        trees themselves.
        """
        ...

    def get_fix_instructions(self, violation: Violation) -> str:
        """Provide human instructions for a manual fix."""
        ...
