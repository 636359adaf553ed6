"""
Tests for argument matchers and whole-call matching.
"""

import pytest
from hypothesis import given, strategies as st

from mockseam.core.matchers import (
    ANY_ARGS, ArgumentsMatcher, Eq, all_of, any_, any_float, any_int, any_number,
    any_of, any_of_type, any_string, as_matcher, contains, eq, is_none, not_,
    not_none, predicate, same
)


class Unequal:
    """Raises from __eq__, like some numpy-style containers do."""

    def __eq__(self, other):
        raise ValueError("ambiguous comparison")

    __hash__ = object.__hash__


class TestSingleValueMatchers:
    """Test matchers over one argument."""

    def test_eq_matches_equal_values(self):
        assert eq("word").matches("word")
        assert not eq("word").matches("other")

    def test_eq_matches_identical_object_without_calling_eq(self):
        value = Unequal()
        assert eq(value).matches(value)

    def test_eq_treats_failing_comparison_as_no_match(self):
        assert not eq(Unequal()).matches(Unequal())

    def test_same_requires_identity(self):
        first, second = [1], [1]
        assert same(first).matches(first)
        assert not same(first).matches(second)

    def test_any_matches_everything(self):
        for value in (None, 0, "", object()):
            assert any_().matches(value)

    def test_any_string(self):
        assert any_string().matches("")
        assert not any_string().matches(b"bytes")

    def test_any_int_rejects_bool(self):
        assert any_int().matches(3)
        assert not any_int().matches(True)
        assert not any_int().matches(3.0)

    def test_any_float_and_any_number(self):
        assert any_float().matches(1.5)
        assert not any_float().matches(1)
        assert any_number().matches(1)
        assert any_number().matches(1.5)

    def test_any_of_type_accepts_several_types(self):
        matcher = any_of_type(list, tuple)
        assert matcher.matches([])
        assert matcher.matches(())
        assert not matcher.matches({})

    def test_none_matchers(self):
        assert is_none().matches(None)
        assert not is_none().matches(0)
        assert not_none().matches(0)
        assert not not_none().matches(None)

    def test_predicate(self):
        matcher = predicate(lambda v: v > 10, "greater than ten")
        assert matcher.matches(11)
        assert not matcher.matches(10)
        assert matcher.describe() == "<greater than ten>"

    def test_contains(self):
        assert contains("or").matches("word")
        assert contains(2).matches([1, 2])
        assert not contains(2).matches(5)


class TestMatcherComposition:
    """Test combining matchers."""

    def test_and_or_not_operators(self):
        matcher = any_string() & contains("a")
        assert matcher.matches("cat")
        assert not matcher.matches("dog")

        either = eq(1) | eq(2)
        assert either.matches(2)
        assert not either.matches(3)

        assert (~eq(1)).matches(2)

    def test_factories_accept_raw_values(self):
        assert all_of(any_int(), 5).matches(5)
        assert any_of("a", "b").matches("b")
        assert not_("a").matches("b")

    def test_as_matcher_wraps_literals(self):
        assert isinstance(as_matcher(5), Eq)
        matcher = any_()
        assert as_matcher(matcher) is matcher

    def test_describe(self):
        assert eq("x").describe() == "'x'"
        assert any_string().describe() == "any_string()"
        assert (eq(1) | eq(2)).describe() == "1 | 2"
        assert (~any_int()).describe() == "not(any_int())"


class TestArgumentsMatcher:
    """Test whole-call matching."""

    def test_exact_arguments(self):
        matcher = ArgumentsMatcher.from_call(("word", 1))
        assert matcher.matches(("word", 1), {})
        assert not matcher.matches(("word",), {})
        assert not matcher.matches(("word", 1, 2), {})

    def test_keyword_names_must_agree(self):
        matcher = ArgumentsMatcher.from_call((), {"word": "x"})
        assert matcher.matches((), {"word": "x"})
        assert not matcher.matches((), {"other": "x"})
        assert not matcher.matches(("x",), {})

    def test_any_args_sentinel(self):
        matcher = ArgumentsMatcher.from_call((ANY_ARGS,))
        assert matcher.match_any
        assert matcher.matches((1, 2, 3), {"a": 1})
        assert matcher.describe() == "(ANY_ARGS)"

    def test_describe_mixes_literals_and_matchers(self):
        matcher = ArgumentsMatcher.from_call(("word", any_int()), {"flag": True})
        assert matcher.describe() == "('word', any_int(), flag=True)"

    @given(st.lists(st.one_of(st.integers(), st.text(), st.none()), max_size=5))
    def test_exact_rule_matches_exactly_its_arguments(self, values):
        matcher = ArgumentsMatcher.from_call(tuple(values))
        assert matcher.matches(tuple(values), {})
        assert not matcher.matches(tuple(values) + ("extra",), {})

    @given(
        st.lists(st.integers(), min_size=1, max_size=4),
        st.lists(st.integers(), min_size=1, max_size=4)
    )
    def test_exact_rule_rejects_different_arguments(self, expected, actual):
        matcher = ArgumentsMatcher.from_call(tuple(expected))
        assert matcher.matches(tuple(actual), {}) == (expected == actual)

    @given(st.lists(st.text(), max_size=4))
    def test_any_string_per_position(self, words):
        matcher = ArgumentsMatcher.from_call(tuple(any_string() for _ in words))
        assert matcher.matches(tuple(words), {})


@pytest.mark.parametrize("value", [0, "", [], None])
def test_falsy_values_still_match_by_equality(value):
    assert eq(value).matches(value)
