"""
pytest integration.

Enable it from a conftest.py with ``pytest_plugins = ["mockseam.pytest_plugin"]``.

    def test_lookup(stubs):
        dictionary = stubs.mock(Dictionary)
        stubs.when(dictionary).get_meaning("word").then_return("meaning")

    @pytest.mark.mockseam(mode="strict")
    def test_only_expected_calls(stubs):
        ...

Settings come from the ``mockseam_config`` ini option (a YAML file relative
to the rootdir), ``MOCKSEAM_*`` environment variables and the marker, in
increasing priority.
"""

from typing import Any, Dict, Iterator

import pytest

from .configuration import MockseamSettings, load_settings
from .core.registry import StubRegistry
from .infrastructure.observability.logging import configure_from_settings, test_context


def pytest_addoption(parser):
    parser.addini(
        "mockseam_config",
        help="YAML file with mockseam settings, relative to the rootdir",
        default=""
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "mockseam(mode=None, settings=None): default mock mode and settings overrides for the stubs fixture"
    )


def _marker_overrides(request) -> Dict[str, Any]:
    marker = request.node.get_closest_marker("mockseam")
    if marker is None:
        return {}

    overrides: Dict[str, Any] = dict(marker.kwargs.get("settings") or {})
    mode = marker.kwargs.get("mode", marker.args[0] if marker.args else None)
    if mode is not None:
        mocks = dict(overrides.get("mocks") or {})
        mocks["default_mode"] = getattr(mode, "value", mode)
        overrides["mocks"] = mocks
    return overrides


@pytest.fixture
def mockseam_settings(request) -> MockseamSettings:
    """Settings for the current test's registry."""
    config_file = request.config.getini("mockseam_config")
    path = request.config.rootpath / config_file if config_file else None
    return load_settings(path, overrides=_marker_overrides(request))


@pytest.fixture
def stubs(request, mockseam_settings: MockseamSettings) -> Iterator[StubRegistry]:
    """A fresh StubRegistry, torn down after the test even when it fails."""
    configure_from_settings(mockseam_settings.logging)
    with test_context(request.node.nodeid):
        with StubRegistry(mockseam_settings, name=request.node.nodeid) as registry:
            yield registry
