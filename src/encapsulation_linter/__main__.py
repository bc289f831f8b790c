"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from encapsulation_linter.infrastructure.di.container import EncapsulationContainer
from encapsulation_linter.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = EncapsulationContainer.get_instance()

    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        astroid_gateway=container.get_astroid_gateway(),
        filesystem=container.get_filesystem_gateway(),
        fixer_gateway=container.get_fixer_gateway(),
        reporter=container.get_reporter(),
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
