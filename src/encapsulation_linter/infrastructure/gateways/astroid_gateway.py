import logging
from pathlib import Path
from typing import Iterator, Optional

import astroid  # type: ignore[import-untyped]

from encapsulation_linter.domain.entities import (
    Accessibility,
    FieldMember,
    FieldMetadata,
    MemberKind,
    OtherMember,
    SourceLocation,
)
from encapsulation_linter.domain.protocols import AstroidProtocol

logger = logging.getLogger(__name__)

_PROTOCOL_BASES = frozenset({"Protocol", "typing.Protocol", "typing_extensions.Protocol"})
_NAMEDTUPLE_BASES = frozenset({"NamedTuple", "typing.NamedTuple"})
_ENUM_QNAMES = frozenset({"enum.Enum", "enum.IntEnum", "enum.StrEnum", "enum.Flag", "enum.IntFlag"})


class AstroidGateway(AstroidProtocol):
    """Symbol facility: resolves class-body bindings into FieldMetadata using astroid."""

    def parse_file(self, file_path: str) -> Optional[astroid.nodes.Module]:
        """Parse a file and return the astroid Module node, or None if it cannot be read."""
        try:
            source = Path(file_path).read_text(encoding="utf-8")
            return astroid.parse(source, path=file_path)
        except (OSError, UnicodeDecodeError, astroid.AstroidBuildingError) as exc:
            logger.warning("Could not parse %s: %s", file_path, exc)
            return None

    def iter_class_fields(
        self, node: astroid.nodes.NodeNG
    ) -> Iterator[tuple[MemberKind, astroid.nodes.AssignName]]:
        """Yield (member, binding) for every name bound directly in a class body, in source order."""
        classdefs = [node] if isinstance(node, astroid.nodes.ClassDef) else node.nodes_of_class(astroid.nodes.ClassDef)
        for classdef in classdefs:
            for statement in classdef.body:
                for assign_name in self._bound_names(statement):
                    yield self.member_kind(assign_name), assign_name

    def member_kind(self, node: astroid.nodes.AssignName) -> MemberKind:
        """Decide once whether a class-body binding is a field, and gather its flags."""
        name = node.name
        if name.startswith("__") and name.endswith("__"):
            return OtherMember(name, reason="dunder protocol attribute")

        classdef = node.frame()
        if not isinstance(classdef, astroid.nodes.ClassDef):
            return OtherMember(name, reason="not declared in a class body")

        statement = node.statement()
        annotation = statement.annotation if isinstance(statement, astroid.nodes.AnnAssign) else None
        head = self._annotation_head(annotation)

        metadata = FieldMetadata(
            name=name,
            accessibility=self._accessibility(name),
            location=SourceLocation(
                path=node.root().file or "<string>",
                line=node.lineno,
                column=node.col_offset,
            ),
            is_const=name.isupper() or self._is_enum(classdef),
            # PEP 526: unannotated class-body names are class variables
            is_static=annotation is None or head == "ClassVar",
            is_abstract=self.is_protocol_class(classdef),
            is_override=self._declared_in_ancestor(classdef, name),
            is_read_only=(
                head == "Final"
                or self._is_named_tuple(classdef)
                or self.is_frozen_dataclass(classdef)
            ),
            is_extern=(node.root().file or "").endswith(".pyi"),
        )
        return FieldMember(metadata)

    def is_protocol_class(self, node: astroid.nodes.ClassDef) -> bool:
        """True for classes that directly derive from Protocol (interfaces, not implementations)."""
        return any(self._strip_subscript(base) in _PROTOCOL_BASES for base in node.basenames)

    def is_frozen_dataclass(self, node: astroid.nodes.ClassDef) -> bool:
        """True if the class is decorated with @dataclass(frozen=True)."""
        if not node.decorators:
            return False
        for decorator in node.decorators.nodes:
            if not isinstance(decorator, astroid.nodes.Call):
                continue
            if not self._is_dataclass_name(decorator.func):
                continue
            for kw in decorator.keywords or []:
                if (
                    kw.arg == "frozen"
                    and isinstance(kw.value, astroid.nodes.Const)
                    and kw.value.value is True
                ):
                    return True
        return False

    def _bound_names(self, statement: astroid.nodes.NodeNG) -> list[astroid.nodes.AssignName]:
        if isinstance(statement, astroid.nodes.AnnAssign):
            targets = [statement.target]
        elif isinstance(statement, astroid.nodes.Assign):
            targets = list(statement.targets)
        else:
            return []
        names: list[astroid.nodes.AssignName] = []
        for target in targets:
            if isinstance(target, astroid.nodes.AssignName):
                names.append(target)
            elif isinstance(target, (astroid.nodes.Tuple, astroid.nodes.List)):
                names.extend(n for n in target.nodes_of_class(astroid.nodes.AssignName))
        return names

    def _accessibility(self, name: str) -> Accessibility:
        if name.startswith("__"):
            return Accessibility.PRIVATE
        if name.startswith("_"):
            return Accessibility.PROTECTED
        return Accessibility.PUBLIC

    def _annotation_head(self, annotation: Optional[astroid.nodes.NodeNG]) -> Optional[str]:
        """Outermost name of an annotation: `ClassVar` for `typing.ClassVar[int]`."""
        if annotation is None:
            return None
        if isinstance(annotation, astroid.nodes.Const) and isinstance(annotation.value, str):
            return annotation.value.split("[", 1)[0].strip().rsplit(".", 1)[-1]
        if isinstance(annotation, astroid.nodes.Subscript):
            annotation = annotation.value
        if isinstance(annotation, astroid.nodes.Name):
            return annotation.name
        if isinstance(annotation, astroid.nodes.Attribute):
            return annotation.attrname
        return None

    def _is_enum(self, node: astroid.nodes.ClassDef) -> bool:
        try:
            return any(ancestor.qname() in _ENUM_QNAMES for ancestor in node.ancestors())
        except astroid.InferenceError:
            return False

    def _is_named_tuple(self, node: astroid.nodes.ClassDef) -> bool:
        return any(self._strip_subscript(base) in _NAMEDTUPLE_BASES for base in node.basenames)

    def _declared_in_ancestor(self, node: astroid.nodes.ClassDef, name: str) -> bool:
        try:
            return any(name in ancestor.locals for ancestor in node.ancestors())
        except astroid.InferenceError:
            return False

    def _is_dataclass_name(self, n: astroid.nodes.NodeNG) -> bool:
        """Return True if node is 'dataclass' (Name or Attribute)."""
        if isinstance(n, astroid.nodes.Name):
            return n.name == "dataclass"
        if isinstance(n, astroid.nodes.Attribute):
            return n.attrname == "dataclass"
        return False

    @staticmethod
    def _strip_subscript(base: str) -> str:
        return base.split("[", 1)[0]
