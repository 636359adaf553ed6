"""
Tests for invocation records and verification.
"""

import pytest
from hypothesis import given, settings, strategies as st

from mockseam.core.invocation import (
    VerificationMode, as_mode, at_least, at_least_once, at_most, never, times
)
from mockseam.core.matchers import any_string
from mockseam.core.registry import StubRegistry
from mockseam.infrastructure.exceptions import ConfigurationError, VerificationError

from tests.support.dictionary import Dictionary


class TestVerificationModes:
    """Test verification mode bounds."""

    @pytest.mark.parametrize("mode, accepted, rejected", [
        (times(2), [2], [1, 3]),
        (never(), [0], [1]),
        (at_least(2), [2, 5], [1]),
        (at_least_once(), [1, 9], [0]),
        (at_most(1), [0, 1], [2]),
    ])
    def test_accepts(self, mode, accepted, rejected):
        assert all(mode.accepts(n) for n in accepted)
        assert not any(mode.accepts(n) for n in rejected)

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            VerificationMode(3, 1, "broken")

    def test_as_mode(self):
        assert repr(as_mode(3)) == "times(3)"
        mode = at_least(1)
        assert as_mode(mode) is mode
        with pytest.raises(TypeError):
            as_mode(True)


class TestVerifyCallCount:
    """Test counting matching invocations."""

    def test_counts_matching_calls(self, registry, dictionary):
        dictionary.get_meaning("a")
        dictionary.get_meaning("a")
        dictionary.get_meaning("b")

        assert registry.verify_call_count(dictionary, "get_meaning", ["a"], 2) == 2
        assert registry.verify_call_count(dictionary, "get_meaning", [any_string()], 3) == 3
        registry.verify_call_count(dictionary, "add", None, never())

    def test_mismatch_raises_with_recorded_calls(self, registry):
        dictionary = registry.mock(Dictionary, name="words")
        dictionary.get_meaning("b")

        with pytest.raises(VerificationError) as excinfo:
            registry.verify_call_count(dictionary, "get_meaning", ["a"], 1)

        message = str(excinfo.value)
        assert "Wanted times(1) of words.get_meaning('a') but was 0" in message
        assert "words.get_meaning('b')" in message
        assert excinfo.value.actual == 0

    def test_report_lists_stubbed_rules(self, registry):
        dictionary = registry.mock(Dictionary, name="words")
        registry.when(dictionary).get_meaning("a").then_return("x")

        with pytest.raises(VerificationError) as excinfo:
            registry.verify(dictionary).get_meaning("a")

        assert "Stubbed rules:\n  words.get_meaning('a') -> return 'x'" in str(excinfo.value)

    def test_unknown_method_is_rejected(self, registry, dictionary):
        with pytest.raises(ConfigurationError, match="get_meanign"):
            registry.verify(dictionary, never()).get_meanign("word")
        with pytest.raises(ConfigurationError):
            registry.verify_call_count(dictionary, "translate", None, 0)

    def test_report_can_omit_invocations(self, make_registry):
        quiet = make_registry(verification={"report_invocations": False})
        dictionary = quiet.mock(Dictionary, name="words")
        dictionary.get_meaning("b")
        with pytest.raises(VerificationError) as excinfo:
            quiet.verify_call_count(dictionary, "get_meaning", ["a"], 1)
        assert "Recorded invocations" not in str(excinfo.value)

    def test_verification_error_is_an_assertion_error(self, registry, dictionary):
        with pytest.raises(AssertionError):
            registry.verify(dictionary).get_meaning("never called")

    def test_verify_dsl_with_modes(self, registry, dictionary):
        dictionary.add("w", "m")
        dictionary.add("w", "m")

        registry.verify(dictionary, times(2)).add("w", "m")
        registry.verify(dictionary, 2).add(word="w", meaning="m")
        registry.verify(dictionary, at_least_once()).add(any_string(), "m")
        registry.verify(dictionary, never()).add("x", "m")

    def test_verify_no_more_interactions(self, registry, dictionary):
        dictionary.get_meaning("a")
        dictionary.add("b", "c")

        registry.verify(dictionary).get_meaning("a")
        with pytest.raises(VerificationError, match=r"add\('b', 'c'\)"):
            registry.verify_no_more_interactions(dictionary)

        registry.verify(dictionary).add("b", "c")
        registry.verify_no_more_interactions(dictionary)


@settings(max_examples=20)
@given(st.integers(min_value=0, max_value=15), st.integers(min_value=0, max_value=5))
def test_verify_reports_exactly_the_number_of_matching_calls(matching, other):
    with StubRegistry() as stubs:
        dictionary = stubs.mock(Dictionary)
        for _ in range(matching):
            dictionary.get_meaning("word")
        for _ in range(other):
            dictionary.get_meaning("other")

        assert stubs.verify_call_count(dictionary, "get_meaning", ["word"], matching) == matching
        with pytest.raises(VerificationError):
            stubs.verify_call_count(dictionary, "get_meaning", ["word"], matching + 1)
