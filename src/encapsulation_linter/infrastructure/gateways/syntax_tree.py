"""Persistent syntax tree over LibCST: parent links, positions and path-copying replacement."""

import dataclasses
from collections.abc import Sequence
from typing import Optional, TypeVar, Union

import libcst as cst
from libcst.metadata import CodeRange, MetadataWrapper, ParentNodeProvider, PositionProvider

from encapsulation_linter.domain.entities import SourcePosition

NodeT = TypeVar("NodeT", bound=cst.CSTNode)


class SyntaxTree:
    """
    An immutable LibCST module together with its resolved parent links and positions.

    LibCST nodes are frozen dataclasses compared by identity, so a tree is never
    mutated. `replace()` rebuilds only the nodes on the path from the root to the
    replaced node; every other node is shared by reference with the new tree.
    """

    def __init__(self, module: cst.Module) -> None:
        # No copy: node identity must survive so callers can keep using their nodes.
        wrapper = MetadataWrapper(module, unsafe_skip_copy=True)
        self._module = module
        self._parents = wrapper.resolve(ParentNodeProvider)
        self._positions = wrapper.resolve(PositionProvider)

    @classmethod
    def parse(cls, source: str) -> "SyntaxTree":
        return cls(cst.parse_module(source))

    @property
    def module(self) -> cst.Module:
        return self._module

    @property
    def code(self) -> str:
        return self._module.code

    def parent(self, node: cst.CSTNode) -> Optional[cst.CSTNode]:
        """Owning node of `node`, or None for the root."""
        return self._parents.get(node)

    def position(self, node: cst.CSTNode) -> Optional[CodeRange]:
        return self._positions.get(node)

    def node_at(self, position: SourcePosition) -> cst.CSTNode:
        """
        Deepest node whose source range covers `position`.

        A position in a line's indentation or past its last character falls
        between statements; it resolves to the innermost statement on that line.
        The module is returned when nothing is found.
        """
        target = (position.line, position.column)
        node: cst.CSTNode = self._module
        while True:
            for child in node.children:
                code_range = self._positions.get(child)
                if code_range is not None and _covers(code_range, target):
                    node = child
                    break
            else:
                break
        if isinstance(node, (cst.Module, cst.IndentedBlock, cst.BaseCompoundStatement)):
            return self._statement_on_line(node, position.line)
        return node

    def _statement_on_line(self, node: cst.CSTNode, line: int) -> cst.CSTNode:
        """Innermost statement below `node` spanning `line`, or `node` itself."""
        found = node
        current: Optional[cst.CSTNode] = node
        while True:
            if isinstance(current, cst.BaseCompoundStatement):
                current = current.body
            if not isinstance(current, (cst.Module, cst.IndentedBlock)):
                return found
            statement = next(
                (s for s in current.body if _spans_line(self._positions.get(s), line)), None
            )
            if statement is None:
                return found
            found = current = statement

    def replace(self, target: cst.CSTNode, replacements: Sequence[cst.CSTNode]) -> "SyntaxTree":
        """
        Return a new tree where `target` is replaced by `replacements`, in order.

        Several replacements are only valid where `target` sits in a sequence
        (a statement body, for example).
        """
        parent = self.parent(target)
        if parent is None:
            raise ValueError("The root of a syntax tree cannot be replaced")

        updated = _replace_child(parent, target, replacements)
        child = parent
        ancestor = self.parent(parent)
        while ancestor is not None:
            updated = _replace_child(ancestor, child, [updated])
            child = ancestor
            ancestor = self.parent(ancestor)

        if not isinstance(updated, cst.Module):
            raise ValueError("Replacement did not produce a module")
        return SyntaxTree(updated)


def find_ancestor_of_type(
    tree: SyntaxTree,
    node: Optional[cst.CSTNode],
    node_type: Union[type[NodeT], tuple[type[NodeT], ...]],
) -> Optional[NodeT]:
    """
    Walk the parent chain from `node` (inclusive) and return the first `node_type` match.

    Returns None when the root is passed without a match. The walk is a loop, so
    tree depth is bounded by memory rather than the call stack.
    """
    current = node
    while current is not None:
        if isinstance(current, node_type):
            return current
        current = tree.parent(current)
    return None


def _covers(code_range: CodeRange, target: tuple[int, int]) -> bool:
    start = (code_range.start.line, code_range.start.column)
    end = (code_range.end.line, code_range.end.column)
    return start <= target < end


def _spans_line(code_range: Optional[CodeRange], line: int) -> bool:
    if code_range is None:
        return False
    # a range ending at column 0 stops before that line
    last = code_range.end.line if code_range.end.column > 0 else code_range.end.line - 1
    return code_range.start.line <= line <= last


def _replace_child(
    parent: cst.CSTNode, old: cst.CSTNode, new: Sequence[cst.CSTNode]
) -> cst.CSTNode:
    """Copy `parent` with `old` swapped for `new` in whichever field holds it."""
    for field in dataclasses.fields(parent):
        value = getattr(parent, field.name)
        if value is old:
            if len(new) != 1:
                raise ValueError(f"{type(parent).__name__}.{field.name} holds a single node")
            return parent.with_changes(**{field.name: new[0]})
        if isinstance(value, (list, tuple)) and any(item is old for item in value):
            spliced: list[cst.CSTNode] = []
            for item in value:
                if item is old:
                    spliced.extend(new)
                else:
                    spliced.append(item)
            return parent.with_changes(**{field.name: spliced})
    raise ValueError(f"{type(old).__name__} is not a child of {type(parent).__name__}")
