"""
Configuring mocks to raise, for value-returning and void methods.
"""

import pytest

from mockseam import any_string

from tests.support.dictionary import Dictionary


def test_non_void_method_configured_to_raise(stubs):
    dictionary = stubs.mock(Dictionary)
    stubs.when(dictionary).get_meaning(any_string()).then_raise(AttributeError)

    with pytest.raises(AttributeError):
        dictionary.get_meaning("word")


def test_void_method_configured_to_raise(stubs):
    dictionary = stubs.mock(Dictionary)
    stubs.do_raise(RuntimeError).when(dictionary).add(any_string(), any_string())

    with pytest.raises(RuntimeError):
        dictionary.add("word", "meaning")


@pytest.mark.mockseam(mode="strict")
def test_strict_mock_rejects_unexpected_void_call(stubs):
    from mockseam import UnstubbedCallError

    dictionary = stubs.mock(Dictionary)
    stubs.do_nothing().when(dictionary).add("word", "meaning")

    dictionary.add("word", "meaning")
    with pytest.raises(UnstubbedCallError):
        dictionary.add("other", "meaning")
