"""Public field checks (W9701)."""

from typing import TYPE_CHECKING, Optional

import astroid  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from pylint.checkers import BaseChecker

from encapsulation_linter.domain.protocols import AstroidProtocol
from encapsulation_linter.domain.rules.public_fields import PublicFieldRule
from encapsulation_linter.infrastructure.gateways.astroid_gateway import AstroidGateway


class PublicFieldChecker(BaseChecker):
    """W9701: public mutable fields. Thin: delegates to PublicFieldRule."""

    name: str = "encapsulation-public-field"
    msgs = {
        "W9701": (
            "Field '%s' is public",
            "public-field",
            "Mutable instance fields should be private and exposed through a property. "
            "Run 'encapsulation-linter fix' to encapsulate them.",
        ),
    }

    def __init__(
        self,
        linter: "PyLinter",
        ast_gateway: Optional[AstroidProtocol] = None,
        rule: Optional[PublicFieldRule] = None,
    ) -> None:
        super().__init__(linter)
        self._ast_gateway = ast_gateway or AstroidGateway()
        self._rule = rule or PublicFieldRule()

    def visit_classdef(self, node: astroid.nodes.ClassDef) -> None:
        """Report every public field bound directly in this class body."""
        for member, assign_name in self._ast_gateway.iter_class_fields(node):
            violation = self._rule.check(member)
            if violation is None:
                continue
            self.add_message(
                violation.symbol,
                node=assign_name,
                args=(violation.name,),
            )
