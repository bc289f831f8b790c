"""Unit tests for CheckFieldsUseCase."""

from pathlib import Path
from unittest.mock import MagicMock

from encapsulation_linter.domain.config import ConfigurationLoader
from encapsulation_linter.domain.entities import SourceLocation, Violation
from encapsulation_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from encapsulation_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from encapsulation_linter.use_cases.check_fields import CheckFieldsUseCase


def _use_case(config_loader: ConfigurationLoader, telemetry=None) -> CheckFieldsUseCase:
    return CheckFieldsUseCase(
        astroid_gateway=AstroidGateway(),
        filesystem=FileSystemGateway(),
        config_loader=config_loader,
        telemetry=telemetry,
    )


class TestCheckFieldsUseCase:
    def test_collects_violations_in_file_and_source_order(self, tmp_path: Path, config_loader) -> None:
        (tmp_path / "b.py").write_text("class B:\n    second: int\n    first: int\n")
        (tmp_path / "a.py").write_text("class A:\n    only: str\n    _hidden: str\n")

        violations = _use_case(config_loader).execute(str(tmp_path))

        assert [v.name for v in violations] == ["only", "second", "first"]
        assert violations[0].location == SourceLocation(str((tmp_path / "a.py").resolve()), 2, 4)

    def test_excluded_files_are_skipped(self, tmp_path: Path) -> None:
        generated = tmp_path / "generated"
        generated.mkdir()
        (generated / "models.py").write_text("class M:\n    x: int\n")
        (tmp_path / "app.py").write_text("class A:\n    y: int\n")
        config_loader = ConfigurationLoader({"exclude": ["*/generated/*"]})

        violations = _use_case(config_loader).execute(str(tmp_path))

        assert [v.name for v in violations] == ["y"]

    def test_unparsable_file_is_reported_and_skipped(self, tmp_path: Path, config_loader) -> None:
        (tmp_path / "broken.py").write_text("class :\n")
        (tmp_path / "ok.py").write_text("class A:\n    y: int\n")
        telemetry = MagicMock()

        violations = _use_case(config_loader, telemetry).execute(str(tmp_path))

        assert [v.name for v in violations] == ["y"]
        telemetry.error.assert_called_once()
        assert "broken.py" in telemetry.error.call_args[0][0]

    def test_uses_injected_rule(self, config_loader) -> None:
        gateway = MagicMock()
        gateway.parse_file.return_value = MagicMock()
        gateway.iter_class_fields.return_value = [("member", MagicMock())]
        rule = MagicMock()
        rule.check.return_value = Violation("x", SourceLocation("m.py", 1, 0))

        use_case = CheckFieldsUseCase(gateway, MagicMock(), config_loader, rule=rule)

        assert use_case.check_file("m.py") == [Violation("x", SourceLocation("m.py", 1, 0))]
        rule.check.assert_called_once_with("member")
