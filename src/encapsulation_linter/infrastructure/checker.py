"""
Pylint plugin entry point - composition root for the checker plugin.
Lives in infrastructure as it creates the container and wires dependencies.
"""

from pylint.lint import PyLinter

from encapsulation_linter.infrastructure.di.container import EncapsulationContainer
from encapsulation_linter.use_cases.checks.public_fields import PublicFieldChecker


def register(linter: PyLinter) -> None:
    """Register checkers."""
    container = EncapsulationContainer.get_instance()
    linter.register_checker(
        PublicFieldChecker(
            linter,
            ast_gateway=container.get_astroid_gateway(),
            rule=container.get_rule(),
        )
    )
