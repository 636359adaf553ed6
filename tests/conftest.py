"""
Shared fixtures for the mockseam test suite.

The ``stubs`` fixture comes from mockseam.pytest_plugin (registered in the
top-level conftest.py).
"""

from typing import Iterator, List

import pytest

from mockseam.core.registry import StubRegistry
from mockseam.configuration import MockseamSettings
from mockseam.infrastructure.di import get_container
from mockseam.infrastructure.observability.logging import (
    LogLevel, MemoryLogHandler, get_logger, reset_logging
)
from mockseam.seams import platform

from tests.support.dictionary import Dictionary


@pytest.fixture(autouse=True)
def isolate_process_state() -> Iterator[None]:
    """Keep loggers, the capability container and platform properties per test."""
    properties = dict(platform._properties)
    reset_logging()
    yield
    reset_logging()
    get_container().clear()
    platform._properties.clear()
    platform._properties.update(properties)


@pytest.fixture
def memory_log() -> MemoryLogHandler:
    """Capture every record of loggers created after this fixture runs."""
    handler = MemoryLogHandler()
    root = get_logger("mockseam", LogLevel.DEBUG)
    root.add_handler(handler)
    return handler


@pytest.fixture
def registry(memory_log) -> Iterator[StubRegistry]:
    """A registry with default settings whose log output lands in ``memory_log``."""
    with StubRegistry(MockseamSettings(), name="unit") as stub_registry:
        yield stub_registry


@pytest.fixture
def make_registry() -> Iterator:
    """Factory for registries with custom settings; all are torn down afterwards."""
    created: List[StubRegistry] = []

    def factory(**overrides) -> StubRegistry:
        settings = MockseamSettings.model_validate(overrides)
        stub_registry = StubRegistry(settings, name=f"custom-{len(created)}")
        created.append(stub_registry)
        return stub_registry

    yield factory
    for stub_registry in reversed(created):
        stub_registry.teardown()


@pytest.fixture
def dictionary(registry):
    return registry.mock(Dictionary)
