"""Interface for violation and fix reporting."""

import json
from collections.abc import Sequence
from typing import Optional, Protocol

from rich.console import Console
from rich.table import Table

from encapsulation_linter.domain.entities import FixReport, Violation


class ViolationReporter(Protocol):
    """Protocol for reporting results to the user."""

    def report_violations(self, violations: Sequence[Violation]) -> None:
        ...

    def report_fixes(self, report: FixReport) -> None:
        ...


class TerminalReporter:
    """Terminal reporter rendering Rich tables."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def report_violations(self, violations: Sequence[Violation]) -> None:
        """Print one row per violation, in the order they were found."""
        if not violations:
            self.console.print("\n✅ No public fields detected.")
            return

        table = Table(title="[W9701] Public Field Audit", header_style="bold #007BFF")
        table.add_column("Code", style="#00EEFF")
        table.add_column("Location")
        table.add_column("Field", style="bold")
        table.add_column("Message")
        for violation in violations:
            table.add_row(violation.code, str(violation.location), violation.name, violation.message)
        self.console.print(table)
        self.console.print(f"{len(violations)} public field(s) found. Run 'encapsulation-linter fix' to encapsulate them.")

    def report_fixes(self, report: FixReport) -> None:
        """Print the fix summary and every failure."""
        self.console.print(
            f"\n🛠️  Files scanned: {report.files_scanned}  "
            f"Files modified: {report.files_modified}  "
            f"Fields encapsulated: {report.fields_encapsulated}"
        )
        if not report.failures:
            return

        table = Table(title="Fixes Not Applied", header_style="bold red")
        table.add_column("File")
        table.add_column("Location")
        table.add_column("Reason")
        for failure in report.failures:
            table.add_row(failure.path, str(failure.location) if failure.location else "N/A", failure.reason)
        self.console.print(table)


class JsonReporter:
    """Machine-readable reporter; writes one JSON document per report."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def report_violations(self, violations: Sequence[Violation]) -> None:
        self.console.print_json(json.dumps([v.to_dict() for v in violations]))

    def report_fixes(self, report: FixReport) -> None:
        self.console.print_json(json.dumps(report.to_dict()))
