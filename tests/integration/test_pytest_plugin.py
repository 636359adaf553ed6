"""
Tests for the pytest plugin: the stubs fixture, the marker and the ini option.
"""

import pytest

from mockseam.core.handle import MockMode, handle_of
from mockseam.core.registry import StubRegistry
from mockseam.infrastructure.exceptions import UnstubbedCallError
from mockseam.infrastructure.observability.logging import get_test_id

from tests.support.dictionary import Dictionary


def test_stubs_fixture_provides_registry(stubs):
    assert isinstance(stubs, StubRegistry)
    assert handle_of(stubs.mock(Dictionary)).mode is MockMode.LENIENT


def test_stubs_fixture_sets_test_context(stubs, request):
    assert get_test_id() == request.node.nodeid


@pytest.mark.mockseam(mode="strict")
def test_marker_sets_default_mode(stubs):
    dictionary = stubs.mock(Dictionary)
    with pytest.raises(UnstubbedCallError):
        dictionary.get_meaning("word")


@pytest.mark.mockseam(settings={"mocks": {"type_checking": False}})
def test_marker_settings_overrides(stubs, mockseam_settings):
    assert mockseam_settings.mocks.type_checking is False
    dictionary = stubs.mock(Dictionary)
    stubs.when(dictionary).get_meaning("word").then_return(1)
    assert dictionary.get_meaning("word") == 1


class TestPluginInIsolation:
    """Run small test files through a nested pytest session."""

    @pytest.fixture(autouse=True)
    def plugin_conftest(self, pytester):
        pytester.makeconftest('pytest_plugins = ["mockseam.pytest_plugin"]')

    def test_teardown_runs_after_failing_test(self, pytester):
        pytester.makepyfile(
            """
            import json

            def test_fails(stubs):
                stubs.mock_static(json)
                assert False

            def test_restored():
                assert json.dumps([1]) == "[1]"
            """
        )
        result = pytester.runpytest()
        result.assert_outcomes(passed=1, failed=1)

    def test_ini_option_names_settings_file(self, pytester):
        pytester.makeini(
            """
            [pytest]
            mockseam_config = mockseam.yaml
            """
        )
        (pytester.path / "mockseam.yaml").write_text("mocks:\n  default_mode: strict\n", encoding="utf-8")
        pytester.makepyfile(
            """
            def test_mode(stubs):
                assert stubs.settings.mocks.default_mode == "strict"
            """
        )
        result = pytester.runpytest()
        result.assert_outcomes(passed=1)

    def test_marker_is_registered(self, pytester):
        result = pytester.runpytest("--markers")
        result.stdout.fnmatch_lines(["*mockseam(mode=None, settings=None)*"])
