from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class Accessibility(Enum):
    """Declared accessibility of a member."""
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PUBLIC = "public"
    PROTECTED_INTERNAL = "protected-internal"
    PRIVATE_PROTECTED = "private-protected"


@dataclass(frozen=True)
class SourceLocation:
    """Where a declaration lives. Only used for reporting."""
    path: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


@dataclass(frozen=True, order=True)
class SourcePosition:
    """A point in a source file: 1-based line, 0-based column."""
    line: int
    column: int


@dataclass(frozen=True)
class FieldMetadata:
    """Declared facts about one field, as resolved by the host front-end."""
    name: str
    accessibility: Accessibility
    location: SourceLocation
    is_const: bool = False
    is_static: bool = False
    is_abstract: bool = False
    is_virtual: bool = False
    is_override: bool = False
    is_read_only: bool = False
    is_sealed: bool = False
    is_extern: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("FieldMetadata.name must be a non-empty string")


@dataclass(frozen=True)
class FieldMember:
    """A class member that is a field."""
    metadata: FieldMetadata


@dataclass(frozen=True)
class OtherMember:
    """A class member that is not a field (dunder protocol attributes, etc.)."""
    name: str
    reason: str = ""


MemberKind = Union[FieldMember, OtherMember]


@dataclass(frozen=True)
class Violation:
    """A public, mutable instance field."""
    name: str
    location: SourceLocation
    code: str = "W9701"
    symbol: str = "public-field"

    @property
    def message(self) -> str:
        return f"Field '{self.name}' is public"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code,
            "symbol": self.symbol,
            "name": self.name,
            "message": self.message,
            "location": str(self.location),
        }


@dataclass(frozen=True)
class EncapsulatedNames:
    """Names produced for the backing field and its property."""
    field_name: str
    property_name: str


class TransformationType(Enum):
    """Types of code transformations the fixer can apply."""
    ENCAPSULATE_FIELD = "encapsulate_field"


@dataclass(frozen=True)
class TransformationPlan:
    """
    Pure data structure describing a code transformation.

    Rules return plans instead of LibCST code. The fixer gateway interprets
    the plan and performs the actual rewrite.
    """
    transformation_type: TransformationType
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def encapsulate_field(
        cls, position: SourcePosition, preserve_initializer: bool = True
    ) -> "TransformationPlan":
        """Create plan to replace the field at `position` with a backing field and a property."""
        return cls(
            transformation_type=TransformationType.ENCAPSULATE_FIELD,
            params={"position": position, "preserve_initializer": preserve_initializer},
        )


@dataclass(frozen=True)
class FixFailure:
    """A fix that could not be applied."""
    path: str
    reason: str
    location: Optional[SourceLocation] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "location": str(self.location) if self.location else None,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class FixReport:
    """Summary of one fix run."""
    files_scanned: int = 0
    files_modified: int = 0
    fields_encapsulated: int = 0
    failures: tuple[FixFailure, ...] = ()

    def has_failures(self) -> bool:
        return bool(self.failures)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "files_scanned": self.files_scanned,
            "files_modified": self.files_modified,
            "fields_encapsulated": self.fields_encapsulated,
            "failures": [f.to_dict() for f in self.failures],
        }
