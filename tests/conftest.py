"""Pytest configuration.

Run pytest from this project's root; pythonpath in pyproject.toml puts
src/ and the project root on sys.path so `tests.*` helpers import.
"""

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from encapsulation_linter.domain.config import ConfigurationLoader
from encapsulation_linter.infrastructure.di.container import EncapsulationContainer


def apply_fixes_required_deps(**overrides: object) -> dict[str, object]:
    """Return required dependency mocks for ApplyFixesUseCase. Pass overrides to customize."""
    base = {
        "fixer_gateway": MagicMock(),
        "filesystem": MagicMock(),
        "check_use_case": MagicMock(),
        "telemetry": MagicMock(),
    }
    base.update(overrides)
    return base


@pytest.fixture
def config_loader() -> ConfigurationLoader:
    return ConfigurationLoader({})


@pytest.fixture(autouse=True)
def _reset_container() -> Iterator[None]:
    EncapsulationContainer.reset()
    yield
    EncapsulationContainer.reset()
