from typing import TYPE_CHECKING, Any, Optional, cast

from encapsulation_linter.domain.config import ConfigurationLoader
from encapsulation_linter.domain.rules.public_fields import PublicFieldRule
from encapsulation_linter.infrastructure.config_file_loader import ConfigFileLoader
from encapsulation_linter.infrastructure.gateways.astroid_gateway import AstroidGateway
from encapsulation_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from encapsulation_linter.infrastructure.gateways.libcst_fixer_gateway import LibCSTFixerGateway
from encapsulation_linter.interface.reporters import TerminalReporter
from encapsulation_linter.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from encapsulation_linter.domain.protocols import (
        AstroidProtocol,
        FileSystemProtocol,
        FixerGatewayProtocol,
        TelemetryPort,
    )
    from encapsulation_linter.interface.reporters import ViolationReporter


class EncapsulationContainer:
    """Dependency Injection Container for the encapsulation linter."""

    _instance: Optional["EncapsulationContainer"] = None

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        config_loader = ConfigurationLoader(ConfigFileLoader.load_config_from_fs())
        self.register_singleton("ConfigurationLoader", config_loader)

        telemetry = ProjectTelemetry(
            "ENCAPSULATION-LINTER", "cyan", "Public fields under review")
        self.register_singleton("TelemetryPort", telemetry)
        self.register_singleton("AstroidGateway", AstroidGateway())
        self.register_singleton(
            "PublicFieldRule", PublicFieldRule(config_loader.preserve_initializer))

        filesystem = FileSystemGateway()
        self.register_singleton("FileSystemGateway", filesystem)
        self.register_singleton(
            "LibCSTFixerGateway", LibCSTFixerGateway(filesystem=filesystem))

        # Interface
        self.register_singleton("ViolationReporter", TerminalReporter())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        """Return the configuration loader (created at composition root)."""
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_astroid_gateway(self) -> "AstroidProtocol":
        """Return the Astroid gateway."""
        return cast("AstroidProtocol", self.get("AstroidGateway"))

    def get_rule(self) -> PublicFieldRule:
        """Return the public-field rule, configured from pyproject.toml."""
        return cast(PublicFieldRule, self.get("PublicFieldRule"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_fixer_gateway(self) -> "FixerGatewayProtocol":
        """Return the LibCST fixer gateway."""
        return cast("FixerGatewayProtocol", self.get("LibCSTFixerGateway"))

    def get_reporter(self) -> "ViolationReporter":
        return cast("ViolationReporter", self.get("ViolationReporter"))

    @classmethod
    def get_instance(cls) -> "EncapsulationContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = EncapsulationContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
