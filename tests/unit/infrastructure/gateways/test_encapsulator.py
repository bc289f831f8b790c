"""Unit tests for field encapsulation on LibCST syntax trees."""

import libcst as cst
import pytest

from encapsulation_linter.domain.entities import EncapsulatedNames, SourcePosition
from encapsulation_linter.domain.errors import (
    NameConflictError,
    NotAFieldDeclarationError,
    OverlappingFixError,
    ReservedNameError,
    UnsupportedDeclarationShapeError,
)
from encapsulation_linter.infrastructure.gateways.encapsulator import (
    build_property_declaration,
    encapsulate,
    encapsulate_all,
    locate_field_declaration,
)
from encapsulation_linter.infrastructure.gateways.syntax_tree import SyntaxTree

PLAYER = """\
class Player:
    score: int

    def reset(self):
        self.score = 0
"""

ENCAPSULATED_PLAYER = """\
class Player:
    _score: int

    @property
    def Score(self) -> int:
        return self._score

    @Score.setter
    def Score(self, value: int) -> None:
        self._score = value

    def reset(self):
        self.score = 0
"""


class TestEncapsulate:
    def test_field_becomes_private_field_and_property(self) -> None:
        tree = SyntaxTree.parse(PLAYER)
        new_tree = encapsulate(tree, SourcePosition(2, 4))
        assert new_tree.code == ENCAPSULATED_PLAYER

    def test_input_tree_is_unchanged(self) -> None:
        tree = SyntaxTree.parse(PLAYER)
        encapsulate(tree, SourcePosition(2, 4))
        assert tree.code == PLAYER

    def test_other_members_are_shared_by_identity(self) -> None:
        tree = SyntaxTree.parse(PLAYER)
        reset_method = tree.module.body[0].body.body[1]

        new_tree = encapsulate(tree, SourcePosition(2, 4))

        body = new_tree.module.body[0].body.body
        assert len(body) == 4
        assert body[3] is reset_method

    def test_replacement_shape(self) -> None:
        new_tree = encapsulate(SyntaxTree.parse(PLAYER), SourcePosition(2, 4))
        field_line, getter, setter, _ = new_tree.module.body[0].body.body

        assert isinstance(field_line, cst.SimpleStatementLine)
        assert field_line.body[0].target.value == "_score"
        assert getter.name.value == "Score"
        assert setter.name.value == "Score"
        assert getter.decorators[0].decorator.value == "property"
        assert setter.decorators[0].decorator.attr.value == "setter"

    def test_any_position_inside_declaration_works(self) -> None:
        tree = SyntaxTree.parse(PLAYER)
        # on the annotation rather than the name
        new_tree = encapsulate(tree, SourcePosition(2, 11))
        assert new_tree.code == ENCAPSULATED_PLAYER

    def test_initializer_is_preserved_by_default(self) -> None:
        tree = SyntaxTree.parse("class Counter:\n    count: int = 0\n")
        code = encapsulate(tree, SourcePosition(2, 4)).code
        assert "    _count: int = 0\n" in code
        assert "def Count(self) -> int:" in code

    def test_initializer_can_be_dropped(self) -> None:
        tree = SyntaxTree.parse("class Counter:\n    count: int = 0\n")
        code = encapsulate(tree, SourcePosition(2, 4), preserve_initializer=False).code
        assert "    _count: int\n" in code
        assert "= 0" not in code

    def test_unannotated_field_gets_untyped_property(self) -> None:
        tree = SyntaxTree.parse("class Box:\n    content = []\n")
        code = encapsulate(tree, SourcePosition(2, 4)).code
        assert "    _content = []\n" in code
        assert "def Content(self):" in code
        assert "def Content(self, value) -> None:" in code

    def test_unannotated_field_without_initializer_binds_none(self) -> None:
        tree = SyntaxTree.parse("class Box:\n    content = []\n")
        code = encapsulate(tree, SourcePosition(2, 4), preserve_initializer=False).code
        assert "    _content = None\n" in code

    def test_underscore_only_name_uses_fallback_names(self) -> None:
        tree = SyntaxTree.parse("class Weird:\n    _: int = 1\n")
        code = encapsulate(tree, SourcePosition(2, 4)).code
        assert "    _field: int = 1\n" in code
        assert "def Field(self) -> int:" in code

    def test_trailing_comment_is_kept(self) -> None:
        tree = SyntaxTree.parse("class Point:\n    x: float  # metres\n")
        code = encapsulate(tree, SourcePosition(2, 4)).code
        assert "    _x: float  # metres\n" in code

    def test_position_inside_method_is_not_a_field(self) -> None:
        tree = SyntaxTree.parse(PLAYER)
        with pytest.raises(NotAFieldDeclarationError) as excinfo:
            encapsulate(tree, SourcePosition(5, 8))
        assert excinfo.value.position == SourcePosition(5, 8)

    def test_module_level_assignment_is_not_a_field(self) -> None:
        tree = SyntaxTree.parse("limit = 10\n")
        with pytest.raises(NotAFieldDeclarationError):
            encapsulate(tree, SourcePosition(1, 0))

    def test_position_outside_any_statement_is_not_a_field(self) -> None:
        with pytest.raises(NotAFieldDeclarationError):
            encapsulate(SyntaxTree.parse(PLAYER), SourcePosition(40, 0))

    def test_position_in_indentation_finds_the_line(self) -> None:
        tree = SyntaxTree.parse(PLAYER)
        new_tree = encapsulate(tree, SourcePosition(2, 0))
        assert new_tree.code == ENCAPSULATED_PLAYER

    def test_position_past_end_of_line_finds_the_line(self) -> None:
        tree = SyntaxTree.parse(PLAYER)
        new_tree = encapsulate(tree, SourcePosition(2, 14))
        assert new_tree.code == ENCAPSULATED_PLAYER

    def test_blank_line_is_not_a_field(self) -> None:
        with pytest.raises(NotAFieldDeclarationError):
            encapsulate(SyntaxTree.parse(PLAYER), SourcePosition(3, 0))

    @pytest.mark.parametrize(("field", "reserved"), [("none", "None"), ("true", "True"), ("false", "False")])
    def test_property_named_after_keyword_is_rejected(self, field: str, reserved: str) -> None:
        tree = SyntaxTree.parse(f"class Flags:\n    {field}: int\n")
        with pytest.raises(ReservedNameError) as excinfo:
            encapsulate(tree, SourcePosition(2, 4))
        assert excinfo.value.name == reserved
        assert excinfo.value.position == SourcePosition(2, 4)

    def test_property_clashing_with_method_is_rejected(self) -> None:
        tree = SyntaxTree.parse(
            "class Player:\n    score: int\n\n    def Score(self):\n        return 1\n"
        )
        with pytest.raises(NameConflictError) as excinfo:
            encapsulate(tree, SourcePosition(2, 4))
        assert excinfo.value.name == "Score"

    def test_field_clashing_with_private_field_is_rejected(self) -> None:
        tree = SyntaxTree.parse("class Player:\n    score: int\n    _score: int = 0\n")
        with pytest.raises(NameConflictError) as excinfo:
            encapsulate(tree, SourcePosition(2, 4))
        assert excinfo.value.name == "_score"

    def test_names_in_other_classes_do_not_clash(self) -> None:
        tree = SyntaxTree.parse("class A:\n    score: int\n\nclass B:\n    _score: int\n")
        code = encapsulate(tree, SourcePosition(2, 4)).code
        assert "def Score(self) -> int:" in code

    def test_chained_assignment_is_unsupported(self) -> None:
        tree = SyntaxTree.parse("class Pair:\n    a = b = 0\n")
        with pytest.raises(UnsupportedDeclarationShapeError) as excinfo:
            encapsulate(tree, SourcePosition(2, 4))
        assert excinfo.value.declarator_count == 2

    def test_tuple_assignment_is_unsupported(self) -> None:
        tree = SyntaxTree.parse("class Pair:\n    a, b = 1, 2\n")
        with pytest.raises(UnsupportedDeclarationShapeError):
            encapsulate(tree, SourcePosition(2, 4))


class TestLocateFieldDeclaration:
    def test_collects_declarators(self) -> None:
        tree = SyntaxTree.parse("class Pair:\n    a = b = 0\n")
        declaration = locate_field_declaration(tree, SourcePosition(2, 8))
        assert [d.name for d in declaration.declarators] == ["a", "b"]

    def test_semicolon_separated_declarations_count_as_one_line(self) -> None:
        tree = SyntaxTree.parse("class Pair:\n    a: int = 1; b: int = 2\n")
        declaration = locate_field_declaration(tree, SourcePosition(2, 4))
        assert len(declaration.declarators) == 2


class TestEncapsulateAll:
    SOURCE = 'class Config:\n    host: str = "localhost"\n    port: int = 8080\n'

    def test_two_fields_in_one_pass(self) -> None:
        tree = SyntaxTree.parse(self.SOURCE)
        code = encapsulate_all(tree, [SourcePosition(2, 4), SourcePosition(3, 4)]).code

        assert '    _host: str = "localhost"\n' in code
        assert "    _port: int = 8080\n" in code
        assert "def Host(self) -> str:" in code
        assert "def Port(self, value: int) -> None:" in code
        assert code.index("_host") < code.index("def Host") < code.index("_port") < code.index("def Port")

    def test_position_order_does_not_matter(self) -> None:
        tree = SyntaxTree.parse(self.SOURCE)
        forward = encapsulate_all(tree, [SourcePosition(2, 4), SourcePosition(3, 4)]).code
        backward = encapsulate_all(tree, [SourcePosition(3, 4), SourcePosition(2, 4)]).code
        assert forward == backward

    def test_same_declaration_twice_overlaps(self) -> None:
        tree = SyntaxTree.parse(self.SOURCE)
        with pytest.raises(OverlappingFixError):
            encapsulate_all(tree, [SourcePosition(2, 4), SourcePosition(2, 6)])

    def test_one_bad_position_fails_whole_batch(self) -> None:
        tree = SyntaxTree.parse(self.SOURCE)
        with pytest.raises(NotAFieldDeclarationError):
            encapsulate_all(tree, [SourcePosition(2, 4), SourcePosition(30, 0)])

    def test_fields_deriving_the_same_names_fail_the_batch(self) -> None:
        tree = SyntaxTree.parse("class Player:\n    score: int = 1\n    Score: int = 2\n")
        with pytest.raises(NameConflictError) as excinfo:
            encapsulate_all(tree, [SourcePosition(3, 4), SourcePosition(2, 4)])
        assert excinfo.value.position == SourcePosition(3, 4)

    def test_empty_batch_returns_same_code(self) -> None:
        tree = SyntaxTree.parse(self.SOURCE)
        assert encapsulate_all(tree, []).code == self.SOURCE


class TestBuildPropertyDeclaration:
    def test_annotation_is_cloned_for_getter_and_setter(self) -> None:
        annotation = cst.Annotation(annotation=cst.Name("int"))
        prop = build_property_declaration(EncapsulatedNames("_x", "X"), annotation)

        getter_type = prop.getter.returns.annotation
        setter_type = prop.setter.params.params[1].annotation.annotation
        assert getter_type is not annotation.annotation
        assert setter_type is not getter_type
        assert getter_type.deep_equals(setter_type)
