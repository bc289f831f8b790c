"""Unit tests for interface/reporters.py."""

import io
import json

from rich.console import Console

from encapsulation_linter.domain.entities import FixFailure, FixReport, SourceLocation, Violation
from encapsulation_linter.interface.reporters import JsonReporter, TerminalReporter


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200), buffer


class TestTerminalReporter:
    def test_no_violations_prints_success(self) -> None:
        console, buffer = _console()
        TerminalReporter(console).report_violations([])
        assert "No public fields detected" in buffer.getvalue()

    def test_violations_table_lists_each_field(self) -> None:
        console, buffer = _console()
        violations = [
            Violation("score", SourceLocation("game.py", 2, 4)),
            Violation("lives", SourceLocation("game.py", 3, 4)),
        ]

        TerminalReporter(console).report_violations(violations)

        output = buffer.getvalue()
        assert "game.py:2:4" in output
        assert "Field 'lives' is public" in output
        assert "2 public field(s) found" in output

    def test_fix_report_summary_and_failures(self) -> None:
        console, buffer = _console()
        report = FixReport(
            files_scanned=3,
            files_modified=1,
            fields_encapsulated=2,
            failures=(FixFailure("pair.py", "declares 2 names", SourceLocation("pair.py", 2, 4)),),
        )

        TerminalReporter(console).report_fixes(report)

        output = buffer.getvalue()
        assert "Files scanned: 3" in output
        assert "Fields encapsulated: 2" in output
        assert "Fixes Not Applied" in output
        assert "declares 2 names" in output

    def test_fix_report_without_failures_has_no_table(self) -> None:
        console, buffer = _console()
        TerminalReporter(console).report_fixes(FixReport(files_scanned=1))
        assert "Fixes Not Applied" not in buffer.getvalue()


class TestJsonReporter:
    def test_violations_as_json(self) -> None:
        console, buffer = _console()
        JsonReporter(console).report_violations([Violation("score", SourceLocation("g.py", 2, 4))])
        data = json.loads(buffer.getvalue())
        assert data == [
            {
                "code": "W9701",
                "symbol": "public-field",
                "name": "score",
                "message": "Field 'score' is public",
                "location": "g.py:2:4",
            }
        ]

    def test_fix_report_as_json(self) -> None:
        console, buffer = _console()
        JsonReporter(console).report_fixes(FixReport(files_scanned=2, files_modified=1, fields_encapsulated=1))
        data = json.loads(buffer.getvalue())
        assert data["files_modified"] == 1
        assert data["failures"] == []
