"""Field encapsulation: replace a class-body field with a private field and a property."""

import keyword
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

import libcst as cst

from encapsulation_linter.domain.entities import EncapsulatedNames, SourcePosition
from encapsulation_linter.domain.errors import (
    NameConflictError,
    NotAFieldDeclarationError,
    OverlappingFixError,
    ReservedNameError,
    UnsupportedDeclarationShapeError,
)
from encapsulation_linter.domain.naming import derive_names
from encapsulation_linter.infrastructure.gateways.syntax_tree import (
    SyntaxTree,
    find_ancestor_of_type,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Declarator:
    """One name bound by a field declaration."""
    name: str
    annotation: Optional[cst.Annotation]
    value: Optional[cst.BaseExpression]


@dataclass(frozen=True)
class FieldDeclaration:
    """A statement line in a class body that only binds plain names."""
    node: cst.SimpleStatementLine
    declarators: tuple[Declarator, ...]


@dataclass(frozen=True)
class FieldTarget:
    """A resolved fix target: its single declarator and the names it will get."""
    position: SourcePosition
    declaration: FieldDeclaration
    declarator: Declarator
    names: EncapsulatedNames


@dataclass(frozen=True)
class PropertyDeclaration:
    """A property: the `@property` getter and its `.setter`."""
    getter: cst.FunctionDef
    setter: cst.FunctionDef

    @property
    def statements(self) -> tuple[cst.FunctionDef, cst.FunctionDef]:
        return (self.getter, self.setter)


def locate_field_declaration(tree: SyntaxTree, position: SourcePosition) -> FieldDeclaration:
    """Find the field declaration enclosing `position`, walking up from the node found there."""
    node: Optional[cst.CSTNode] = tree.node_at(position)
    line = find_ancestor_of_type(tree, node, cst.SimpleStatementLine)
    while line is not None:
        declaration = _as_field_declaration(tree, line)
        if declaration is not None:
            return declaration
        line = find_ancestor_of_type(tree, tree.parent(line), cst.SimpleStatementLine)
    raise NotAFieldDeclarationError(position)


def encapsulate(
    tree: SyntaxTree, position: SourcePosition, preserve_initializer: bool = True
) -> SyntaxTree:
    """
    Return a new tree where the field at `position` is a private field plus a property.

    Raises NotAFieldDeclarationError, UnsupportedDeclarationShapeError,
    ReservedNameError or NameConflictError; `tree` is never modified.
    """
    return encapsulate_all(tree, [position], preserve_initializer)


def encapsulate_all(
    tree: SyntaxTree, positions: Iterable[SourcePosition], preserve_initializer: bool = True
) -> SyntaxTree:
    """
    Encapsulate several fields in one pass.

    Every position is resolved against the original tree first. The batch fails
    as a whole when any position fails, two positions hit overlapping declarations,
    or a derived name is reserved or already taken in its class.
    """
    located = [(position, locate_field_declaration(tree, position)) for position in positions]
    _check_overlaps(tree, located)

    targets = [_resolve_target(position, declaration) for position, declaration in located]
    _check_name_conflicts(tree, targets)

    result = tree
    for target in targets:
        result = result.replace(
            target.declaration.node, _build_replacement(target, preserve_initializer)
        )
    return result


def build_field_declaration(
    line: cst.SimpleStatementLine, field_name: str, preserve_initializer: bool = True
) -> cst.SimpleStatementLine:
    """Private field with the original declared type; comments on the line are kept."""
    statement = line.body[0]
    if isinstance(statement, cst.AnnAssign):
        new_statement: cst.BaseSmallStatement = statement.with_changes(target=cst.Name(field_name))
        if not preserve_initializer:
            new_statement = new_statement.with_changes(value=None, equal=cst.MaybeSentinel.DEFAULT)
    elif isinstance(statement, cst.Assign):
        target = statement.targets[0].with_changes(target=cst.Name(field_name))
        new_statement = statement.with_changes(targets=[target])
        if not preserve_initializer:
            # an unannotated name needs some value to stay a declaration
            new_statement = new_statement.with_changes(value=cst.Name("None"))
    else:
        raise TypeError(f"Not a field statement: {type(statement).__name__}")
    return line.with_changes(body=[new_statement])


def build_property_declaration(
    names: EncapsulatedNames, annotation: Optional[cst.Annotation] = None
) -> PropertyDeclaration:
    """Getter returning the backing field and setter assigning `value` to it."""
    type_expr = annotation.annotation if annotation is not None else None

    getter = cst.FunctionDef(
        name=cst.Name(names.property_name),
        params=cst.Parameters(params=[cst.Param(name=cst.Name("self"))]),
        body=cst.IndentedBlock(
            body=[cst.SimpleStatementLine(body=[cst.Return(value=_self_attribute(names.field_name))])]
        ),
        decorators=[cst.Decorator(decorator=cst.Name("property"))],
        returns=cst.Annotation(annotation=type_expr.deep_clone()) if type_expr is not None else None,
        leading_lines=[cst.EmptyLine(indent=False)],
    )
    setter = cst.FunctionDef(
        name=cst.Name(names.property_name),
        params=cst.Parameters(
            params=[
                cst.Param(name=cst.Name("self")),
                cst.Param(
                    name=cst.Name("value"),
                    annotation=cst.Annotation(annotation=type_expr.deep_clone())
                    if type_expr is not None
                    else None,
                ),
            ]
        ),
        body=cst.IndentedBlock(
            body=[
                cst.SimpleStatementLine(
                    body=[
                        cst.Assign(
                            targets=[cst.AssignTarget(target=_self_attribute(names.field_name))],
                            value=cst.Name("value"),
                        )
                    ]
                )
            ]
        ),
        decorators=[
            cst.Decorator(
                decorator=cst.Attribute(value=cst.Name(names.property_name), attr=cst.Name("setter"))
            )
        ],
        returns=cst.Annotation(annotation=cst.Name("None")),
        leading_lines=[cst.EmptyLine(indent=False)],
    )
    return PropertyDeclaration(getter=getter, setter=setter)


def _self_attribute(name: str) -> cst.Attribute:
    return cst.Attribute(value=cst.Name("self"), attr=cst.Name(name))


def _resolve_target(position: SourcePosition, declaration: FieldDeclaration) -> FieldTarget:
    if len(declaration.declarators) != 1:
        raise UnsupportedDeclarationShapeError(position, len(declaration.declarators))

    declarator = declaration.declarators[0]
    names = derive_names(declarator.name)
    for name in (names.field_name, names.property_name):
        if keyword.iskeyword(name):
            raise ReservedNameError(position, name)
    return FieldTarget(position, declaration, declarator, names)


def _build_replacement(target: FieldTarget, preserve_initializer: bool) -> list[cst.BaseStatement]:
    names = target.names
    field_line = build_field_declaration(
        target.declaration.node, names.field_name, preserve_initializer
    )
    prop = build_property_declaration(names, target.declarator.annotation)
    logger.debug(
        "Encapsulating field %s as %s / %s",
        target.declarator.name,
        names.field_name,
        names.property_name,
    )
    return [field_line, *prop.statements]


def _check_name_conflicts(tree: SyntaxTree, targets: Sequence[FieldTarget]) -> None:
    """Reject derived names already bound in the class body or claimed by an earlier target."""
    replaced = {id(target.declaration.node) for target in targets}
    bound_by_class: dict[int, set[str]] = {}

    for target in sorted(targets, key=lambda t: (t.position.line, t.position.column)):
        classdef = tree.parent(tree.parent(target.declaration.node))
        if not isinstance(classdef, cst.ClassDef):
            continue
        bound = bound_by_class.get(id(classdef))
        if bound is None:
            bound = bound_by_class[id(classdef)] = _class_body_names(classdef, replaced)
        for name in (target.names.field_name, target.names.property_name):
            if name in bound:
                raise NameConflictError(target.position, name)
            bound.add(name)


def _class_body_names(classdef: cst.ClassDef, skip: set[int]) -> set[str]:
    """Names bound directly in a class body, ignoring the statements in `skip`."""
    names: set[str] = set()
    if not isinstance(classdef.body, cst.IndentedBlock):
        return names
    for statement in classdef.body.body:
        if id(statement) in skip:
            continue
        if isinstance(statement, (cst.FunctionDef, cst.ClassDef)):
            names.add(statement.name.value)
        elif isinstance(statement, cst.SimpleStatementLine):
            for small in statement.body:
                if isinstance(small, cst.AnnAssign) and isinstance(small.target, cst.Name):
                    names.add(small.target.value)
                elif isinstance(small, cst.Assign):
                    for assign_target in small.targets:
                        names.update(_bound_names(assign_target.target) or [])
    return names


def _as_field_declaration(
    tree: SyntaxTree, line: cst.SimpleStatementLine
) -> Optional[FieldDeclaration]:
    block = tree.parent(line)
    if not isinstance(block, cst.IndentedBlock) or not isinstance(tree.parent(block), cst.ClassDef):
        return None

    declarators: list[Declarator] = []
    for statement in line.body:
        if isinstance(statement, cst.AnnAssign):
            if not isinstance(statement.target, cst.Name):
                return None
            declarators.append(Declarator(statement.target.value, statement.annotation, statement.value))
        elif isinstance(statement, cst.Assign):
            for assign_target in statement.targets:
                names = _bound_names(assign_target.target)
                if names is None:
                    return None
                declarators.extend(Declarator(name, None, statement.value) for name in names)
        else:
            return None
    return FieldDeclaration(node=line, declarators=tuple(declarators))


def _bound_names(target: cst.BaseExpression) -> Optional[list[str]]:
    """Names bound by an assignment target, or None if it binds anything but plain names."""
    if isinstance(target, cst.Name):
        return [target.value]
    if isinstance(target, (cst.Tuple, cst.List)):
        names: list[str] = []
        for element in target.elements:
            if not isinstance(element, cst.Element):
                return None
            inner = _bound_names(element.value)
            if inner is None:
                return None
            names.extend(inner)
        return names
    return None


def _check_overlaps(
    tree: SyntaxTree, located: Sequence[tuple[SourcePosition, FieldDeclaration]]
) -> None:
    spans = []
    for position, declaration in located:
        code_range = tree.position(declaration.node)
        if code_range is None:
            continue
        start = (code_range.start.line, code_range.start.column)
        end = (code_range.end.line, code_range.end.column)
        spans.append((start, end, position))
    spans.sort(key=lambda span: (span[0], span[1], span[2]))

    for previous, current in zip(spans, spans[1:]):
        if current[0] < previous[1]:
            raise OverlappingFixError(previous[2], current[2])
