"""Use Case: Apply Fixes to Source Code."""

import difflib
from collections.abc import Callable
from pathlib import Path
from typing import Optional

import libcst as cst

from encapsulation_linter.domain.entities import (
    FixFailure,
    FixReport,
    SourceLocation,
    TransformationPlan,
)
from encapsulation_linter.domain.errors import EncapsulationError
from encapsulation_linter.domain.protocols import (
    FileSystemProtocol,
    FixerGatewayProtocol,
    TelemetryPort,
)
from encapsulation_linter.use_cases.check_fields import CheckFieldsUseCase

ConfirmCallback = Callable[[str, list[TransformationPlan]], bool]


class ApplyFixesUseCase:
    """Encapsulate every public field found under a path, one batch per file."""

    def __init__(
        self,
        fixer_gateway: FixerGatewayProtocol,
        filesystem: FileSystemProtocol,
        check_use_case: CheckFieldsUseCase,
        telemetry: Optional[TelemetryPort] = None,
        create_backups: bool = True,
        cleanup_backups: bool = False,
        dry_run: bool = False,
        confirm: Optional[ConfirmCallback] = None,
        diff_sink: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.fixer_gateway = fixer_gateway
        self.filesystem = filesystem
        self.check_use_case = check_use_case
        self.telemetry = telemetry
        self.create_backups = create_backups
        self.cleanup_backups = cleanup_backups
        self.dry_run = dry_run
        self.confirm = confirm
        self.diff_sink = diff_sink

    def execute(self, target_path: str) -> FixReport:
        """Apply fixes to all files in target path. Failures are recorded, never raised."""
        if self.telemetry:
            self.telemetry.step(f"🔧 Starting Fix Logic on {target_path}")

        files = self.check_use_case.source_files(target_path)
        modified_count = 0
        encapsulated_count = 0
        failures: list[FixFailure] = []

        for file_path in files:
            applied, file_failures = self._execute_one_file(file_path)
            failures.extend(file_failures)
            if applied:
                modified_count += 1
                encapsulated_count += applied

        if self.telemetry:
            status = "previewed" if self.dry_run else "complete"
            self.telemetry.step(f"🛠️ Fix Suite {status}. Files repaired: {modified_count}")
            for failure in failures:
                self.telemetry.error(f"  {failure.location or failure.path}: {failure.reason}")

        return FixReport(
            files_scanned=len(files),
            files_modified=modified_count,
            fields_encapsulated=encapsulated_count,
            failures=tuple(failures),
        )

    def _execute_one_file(self, file_path: str) -> tuple[int, list[FixFailure]]:
        """Process one file. Returns (fields encapsulated, failures)."""
        violations = self.check_use_case.check_file(file_path)
        rule = self.check_use_case.rule
        plans: list[TransformationPlan] = []
        locations: dict[object, SourceLocation] = {}
        for violation in violations:
            plan = rule.fix(violation)
            if plan is not None:
                plans.append(plan)
                locations[plan.params["position"]] = violation.location

        if not plans:
            if self.telemetry:
                self.telemetry.step(f"file={self._rel_path(file_path)} status=skipped reason=no_fixable_violations")
            return (0, [])

        try:
            source = self.filesystem.read_text(file_path)
            plans, failures, new_source = self._resolve_batch(file_path, plans, locations)
        except (OSError, UnicodeDecodeError, cst.ParserSyntaxError) as exc:
            return (0, [FixFailure(file_path, f"could not parse: {exc}")])

        if new_source is None or new_source == source:
            return (0, failures)

        if self.dry_run:
            self._emit_diff(file_path, source, new_source)
            return (len(plans), failures)

        if self.confirm is not None and not self.confirm(file_path, plans):
            if self.telemetry:
                self.telemetry.warning(f"file={self._rel_path(file_path)} status=skipped reason=user_declined")
            return (0, failures)

        backup_path = self._create_backup(file_path) if self.create_backups else None
        if not self.fixer_gateway.apply_fixes(file_path, plans):
            self._cleanup_backup(backup_path)
            return (0, failures)

        if self.telemetry:
            self.telemetry.step(f"✅ Auto-repaired: {self._rel_path(file_path)} ({len(plans)} field(s))")
        if self.cleanup_backups:
            self._cleanup_backup(backup_path)
        return (len(plans), failures)

    def _resolve_batch(
        self,
        file_path: str,
        plans: list[TransformationPlan],
        locations: dict[object, SourceLocation],
    ) -> tuple[list[TransformationPlan], list[FixFailure], Optional[str]]:
        """
        Drop plans the engine rejects until the rest apply as one batch.

        Returns (applicable plans, failures, resulting source or None).
        """
        remaining = list(plans)
        failures: list[FixFailure] = []
        while remaining:
            try:
                return (remaining, failures, self.fixer_gateway.preview(file_path, remaining))
            except EncapsulationError as exc:
                failed = next((p for p in remaining if p.params["position"] == exc.position), None)
                failures.append(FixFailure(file_path, str(exc), locations.get(exc.position)))
                if failed is None:
                    break
                remaining.remove(failed)
        return ([], failures, None)

    def _emit_diff(self, file_path: str, before: str, after: str) -> None:
        if self.diff_sink is None:
            return
        diff = difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=file_path,
            tofile=file_path,
        )
        self.diff_sink("".join(diff))

    def _rel_path(self, file_path_str: str) -> str:
        """Return path relative to cwd for logging; fallback to absolute."""
        try:
            return str(Path(file_path_str).relative_to(Path.cwd()))
        except ValueError:
            return file_path_str

    def _create_backup(self, file_path_str: str) -> str:
        """Create a .bak backup of the file. Returns backup path string."""
        file_path = Path(file_path_str)
        backup_path = str(file_path.with_suffix(file_path.suffix + ".bak"))
        self.filesystem.copy_file(file_path_str, backup_path)
        return backup_path

    def _cleanup_backup(self, backup_path_str: Optional[str]) -> None:
        if backup_path_str:
            self.filesystem.remove_file(backup_path_str)

