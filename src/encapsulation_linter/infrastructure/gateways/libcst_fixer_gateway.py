"""LibCST based Fixer Gateway."""

import logging
from typing import Optional

from encapsulation_linter.domain.entities import (
    SourcePosition,
    TransformationPlan,
    TransformationType,
)
from encapsulation_linter.domain.errors import EncapsulationError
from encapsulation_linter.domain.protocols import FileSystemProtocol, FixerGatewayProtocol
from encapsulation_linter.infrastructure.gateways.encapsulator import encapsulate_all
from encapsulation_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from encapsulation_linter.infrastructure.gateways.syntax_tree import SyntaxTree

logger = logging.getLogger(__name__)


class LibCSTFixerGateway(FixerGatewayProtocol):
    """Gateway for applying safe code modifications using LibCST."""

    def __init__(self, filesystem: Optional[FileSystemProtocol] = None) -> None:
        self.filesystem = filesystem or FileSystemGateway()

    def transform(self, source: str, fixes: list[TransformationPlan]) -> str:
        """
        Apply every plan to `source` as one batch and return the new source.

        Raises libcst.ParserSyntaxError for unparsable source and
        EncapsulationError subclasses when the batch cannot be applied.
        """
        positions, preserve_initializer = self._plan_positions(fixes)
        if not positions:
            return source
        tree = SyntaxTree.parse(source)
        try:
            return encapsulate_all(tree, positions, preserve_initializer).code
        except EncapsulationError as exc:
            logger.info("Fix batch rejected: %s", exc)
            raise

    def preview(self, file_path: str, fixes: list[TransformationPlan]) -> str:
        """Return the source `file_path` would have after the fixes, without writing it."""
        return self.transform(self.filesystem.read_text(file_path), fixes)

    def apply_fixes(self, file_path: str, fixes: list[TransformationPlan]) -> bool:
        """
        Apply a list of fixes to a file.

        Args:
            file_path: Path to the file to modify
            fixes: TransformationPlans to apply, all in one batch

        Returns:
            True if the file was modified, False otherwise
        """
        source = self.filesystem.read_text(file_path)
        new_source = self.transform(source, fixes)

        # Only write if code changed
        if new_source == source:
            return False
        self.filesystem.write_text(file_path, new_source)
        logger.info("Applied %d fix(es) to %s", len(fixes), file_path)
        return True

    def _plan_positions(self, fixes: list[TransformationPlan]) -> tuple[list[SourcePosition], bool]:
        """Collect the target positions of the plans; all plans must agree on initializers."""
        positions: list[SourcePosition] = []
        flags: set[bool] = set()
        for plan in fixes:
            if plan.transformation_type != TransformationType.ENCAPSULATE_FIELD:
                raise ValueError(f"Unknown transformation type: {plan.transformation_type}")
            positions.append(plan.params["position"])
            flags.add(bool(plan.params.get("preserve_initializer", True)))
        if len(flags) > 1:
            raise ValueError("Plans in one batch must agree on preserve_initializer")
        return positions, flags.pop() if flags else True
