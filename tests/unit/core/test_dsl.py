"""
Tests for the fluent stubbing and verification API.
"""

import pytest

from mockseam.core.dsl import Stubber, WhenProxy
from mockseam.core.matchers import any_string
from mockseam.core.rules import StubRuleBuilder
from mockseam.infrastructure.exceptions import ConfigurationError


class TestWhen:
    """Test when(...) and given(...)."""

    def test_when_returns_rule_builder(self, registry, dictionary):
        proxy = registry.when(dictionary)
        assert isinstance(proxy, WhenProxy)
        builder = proxy.get_meaning("word")
        assert isinstance(builder, StubRuleBuilder)
        assert builder.rule.method == "get_meaning"

    def test_given_will_spelling(self, registry, dictionary):
        registry.given(dictionary).get_meaning("word").will_return("meaning")
        registry.given(dictionary).lookup(any_string()).will_raise(KeyError)

        assert dictionary.get_meaning("word") == "meaning"
        with pytest.raises(KeyError):
            dictionary.lookup("missing")

    def test_when_proxy_is_read_only(self, registry, dictionary):
        with pytest.raises(AttributeError):
            registry.when(dictionary).get_meaning = "x"

    def test_when_on_undefined_method(self, registry, dictionary):
        with pytest.raises(ConfigurationError):
            registry.when(dictionary).translate("word")

    def test_builder_repr(self, registry):
        dictionary = registry.mock(name="words")
        builder = registry.when(dictionary).lookup("a").then_return("b")
        assert repr(builder) == "<StubRuleBuilder words.lookup('a') -> return 'b'>"


class TestStubber:
    """Test do_*(...).when(target).method(...)."""

    def test_do_raise_for_void_method(self, registry, dictionary):
        registry.do_raise(RuntimeError).when(dictionary).add(any_string(), any_string())
        with pytest.raises(RuntimeError):
            dictionary.add("word", "meaning")

    def test_actions_apply_in_order(self, registry, dictionary):
        stubber = registry.do_return("first").do_raise(KeyError)
        assert isinstance(stubber, Stubber)
        stubber.when(dictionary).get_meaning("word")

        assert dictionary.get_meaning("word") == "first"
        with pytest.raises(KeyError):
            dictionary.get_meaning("word")

    def test_do_answer(self, registry, dictionary):
        registry.do_answer(lambda call: call.args[0] * 2).when(dictionary).get_meaning(any_string())
        assert dictionary.get_meaning("ab") == "abab"

    def test_do_call_real_method(self, registry):
        from tests.support.dictionary import Dictionary

        dictionary = registry.mock(Dictionary)
        registry.do_call_real_method().when(dictionary).normalise(any_string())
        assert dictionary.normalise("  Word ") == "word"

    def test_do_nothing_on_spy(self, registry):
        from tests.support.dictionary import Dictionary

        real = Dictionary()
        spy = registry.spy(real)
        registry.do_nothing().when(spy).add("a", "b")
        spy.add("a", "b")
        spy.add("c", "d")
        assert real.words() == ["c"]


class TestVerifyProxy:
    """Test verify(...).method(...)."""

    def test_returns_actual_count(self, registry, dictionary):
        dictionary.get_meaning("word")
        assert registry.verify(dictionary).get_meaning("word") == 1
