"""Use Case: find public fields in source files."""

from typing import Optional

from encapsulation_linter.domain.config import ConfigurationLoader
from encapsulation_linter.domain.entities import Violation
from encapsulation_linter.domain.protocols import AstroidProtocol, FileSystemProtocol, TelemetryPort
from encapsulation_linter.domain.rules import BaseRule
from encapsulation_linter.domain.rules.public_fields import PublicFieldRule


class CheckFieldsUseCase:
    """Run the public-field rule over every class body under a path."""

    def __init__(
        self,
        astroid_gateway: AstroidProtocol,
        filesystem: FileSystemProtocol,
        config_loader: ConfigurationLoader,
        telemetry: Optional[TelemetryPort] = None,
        rule: Optional[BaseRule] = None,
    ) -> None:
        self.astroid_gateway = astroid_gateway
        self.filesystem = filesystem
        self.config_loader = config_loader
        self.telemetry = telemetry
        self.rule: BaseRule = rule or PublicFieldRule(config_loader.preserve_initializer)

    def source_files(self, target_path: str) -> list[str]:
        """Files under `target_path` that are not excluded by configuration."""
        return [
            path for path in self.filesystem.glob_python_files(target_path)
            if not self.config_loader.is_excluded(path)
        ]

    def execute(self, target_path: str) -> list[Violation]:
        """Violations for all files, files in sorted order and violations in source order."""
        files = self.source_files(target_path)
        if self.telemetry:
            self.telemetry.step(f"🔍 Checking {len(files)} file(s) under {target_path}")

        violations: list[Violation] = []
        for file_path in files:
            violations.extend(self.check_file(file_path))
        return violations

    def check_file(self, file_path: str) -> list[Violation]:
        """Violations in one file; an unparsable file yields none and is reported."""
        module = self.astroid_gateway.parse_file(file_path)
        if module is None:
            if self.telemetry:
                self.telemetry.error(f"file={file_path} status=skipped reason=unparsable")
            return []

        violations = []
        for member, _node in self.astroid_gateway.iter_class_fields(module):
            violation = self.rule.check(member)
            if violation is not None:
                violations.append(violation)
        return violations
