"""Recoverable failures raised by the encapsulation engine."""

from typing import Optional

from encapsulation_linter.domain.entities import SourcePosition


class EncapsulationError(Exception):
    """Base class: a fix request that cannot be carried out. Never retried."""

    def __init__(self, message: str, position: Optional[SourcePosition] = None) -> None:
        super().__init__(message)
        self.position = position


class NotAFieldDeclarationError(EncapsulationError):
    """The target position is not inside a field declaration."""

    def __init__(self, position: SourcePosition) -> None:
        super().__init__(
            f"No field declaration at line {position.line}, column {position.column}",
            position,
        )


class UnsupportedDeclarationShapeError(EncapsulationError):
    """The field declaration binds zero or several names."""

    def __init__(self, position: SourcePosition, declarator_count: int) -> None:
        super().__init__(
            f"Field declaration at line {position.line} declares {declarator_count} names; "
            "only single-name declarations can be encapsulated",
            position,
        )
        self.declarator_count = declarator_count


class OverlappingFixError(EncapsulationError):
    """Two fixes in one batch target the same or overlapping declarations."""

    def __init__(self, first: SourcePosition, second: SourcePosition) -> None:
        super().__init__(
            f"Fixes at line {first.line} and line {second.line} target overlapping declarations",
            second,
        )
        self.first = first
        self.second = second


class ReservedNameError(EncapsulationError):
    """A derived field or property name is a Python keyword."""

    def __init__(self, position: SourcePosition, name: str) -> None:
        super().__init__(
            f"Field at line {position.line} would be encapsulated as '{name}', a reserved keyword",
            position,
        )
        self.name = name


class NameConflictError(EncapsulationError):
    """A derived name is already bound in the class or claimed by another fix in the batch."""

    def __init__(self, position: SourcePosition, name: str) -> None:
        super().__init__(
            f"Field at line {position.line} would be encapsulated as '{name}', "
            "which is already bound in the class",
            position,
        )
        self.name = name
