"""CLI entry points for encapsulation-linter - Thin Controller using Typer."""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from encapsulation_linter.domain.config import ConfigurationLoader
from encapsulation_linter.domain.entities import TransformationPlan
from encapsulation_linter.domain.protocols import (
    AstroidProtocol,
    FileSystemProtocol,
    FixerGatewayProtocol,
    TelemetryPort,
)
from encapsulation_linter.domain.rules.public_fields import PublicFieldRule
from encapsulation_linter.interface.reporters import JsonReporter, ViolationReporter
from encapsulation_linter.use_cases.apply_fixes import ApplyFixesUseCase
from encapsulation_linter.use_cases.check_fields import CheckFieldsUseCase

OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    telemetry: TelemetryPort
    astroid_gateway: AstroidProtocol
    filesystem: FileSystemProtocol
    fixer_gateway: FixerGatewayProtocol
    reporter: ViolationReporter


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def resolve_target_path(path: Optional[Path]) -> str:
        """Resolve target path: explicit path, else src/ if exists, else '.' (public API)."""
        if path and str(path) != ".":
            return str(path)
        cwd = Path.cwd()
        src_dir = cwd / "src"
        if src_dir.exists() and src_dir.is_dir():
            return "src"
        return "."

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name="encapsulation-linter",
            help="Find public fields and turn them into private fields behind properties. "
            "Run 'encapsulation-linter check' to audit; 'encapsulation-linter fix' to rewrite.",
            add_completion=False,
        )

        def _reporter(output_format: str) -> ViolationReporter:
            if output_format not in OUTPUT_FORMATS:
                print(f"Unknown format '{output_format}'. Use one of: {', '.join(OUTPUT_FORMATS)}",
                      file=sys.stderr)
                sys.exit(2)
            return JsonReporter() if output_format == "json" else deps.reporter

        def _check_use_case(preserve_initializer: bool) -> CheckFieldsUseCase:
            return CheckFieldsUseCase(
                astroid_gateway=deps.astroid_gateway,
                filesystem=deps.filesystem,
                config_loader=deps.config_loader,
                telemetry=deps.telemetry,
                rule=PublicFieldRule(preserve_initializer),
            )

        @app.command()
        def check(
            path: Optional[Path] = typer.Argument(None, help="Path to audit (default: src/ if present, else .)"),  # noqa: B008
            output_format: str = typer.Option("text", "--format", help="Output format: text or json"),
            instructions: bool = typer.Option(
                False, "--instructions", help="Print manual fix instructions for each violation"),
        ) -> None:
            """Report every public field. Exits 1 when any are found."""
            reporter = _reporter(output_format)
            if output_format == "text":
                deps.telemetry.handshake()
            target_path = CLIAppFactory.resolve_target_path(path)
            use_case = _check_use_case(deps.config_loader.preserve_initializer)
            violations = use_case.execute(target_path)
            reporter.report_violations(violations)
            if instructions:
                for violation in violations:
                    print(f"{violation.location}: {use_case.rule.get_fix_instructions(violation)}")
            if violations:
                sys.exit(1)

        @app.command()
        def fix(
            path: Optional[Path] = typer.Argument(None, help="Path to fix (default: src/ if present, else .)"),  # noqa: B008
            confirm: bool = typer.Option(
                False, "--confirm", help="Require confirmation before each file is rewritten"),
            no_backup: bool = typer.Option(
                False, "--no-backup", help="Skip creating .bak backup files"),
            cleanup_backups: bool = typer.Option(
                False, "--cleanup-backups", help="Remove .bak files after successful fixes"),
            dry_run: bool = typer.Option(
                False, "--dry-run", "--diff", help="Print a unified diff instead of writing files"),
            drop_initializer: bool = typer.Option(
                False, "--drop-initializer", help="Do not keep field initializers on the private field"),
            output_format: str = typer.Option("text", "--format", help="Output format: text or json"),
        ) -> None:
            """Encapsulate every public field. Exits 1 when any fix could not be applied."""
            reporter = _reporter(output_format)
            if output_format == "text":
                deps.telemetry.handshake()
            target_path = CLIAppFactory.resolve_target_path(path)
            preserve_initializer = deps.config_loader.preserve_initializer and not drop_initializer

            def _confirm(file_path: str, plans: list[TransformationPlan]) -> bool:
                return typer.confirm(f"Encapsulate {len(plans)} field(s) in {file_path}?", default=True)

            use_case = ApplyFixesUseCase(
                fixer_gateway=deps.fixer_gateway,
                filesystem=deps.filesystem,
                check_use_case=_check_use_case(preserve_initializer),
                telemetry=deps.telemetry,
                create_backups=deps.config_loader.backup and not no_backup,
                cleanup_backups=cleanup_backups,
                dry_run=dry_run,
                confirm=_confirm if confirm else None,
                diff_sink=typer.echo,
            )
            report = use_case.execute(target_path)
            reporter.report_fixes(report)
            if report.has_failures():
                sys.exit(1)

        return app
