"""
Argument Matchers

A matcher decides whether a single argument satisfies a stub rule or a
verification. Matchers compose with ``&``, ``|`` and ``~`` so that a rule can
say "any string that contains 'word'" without a custom predicate.
"""

import numbers
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple


class Matcher(ABC):
    """Predicate over a single argument value."""

    @abstractmethod
    def matches(self, value: Any) -> bool:
        pass

    @abstractmethod
    def describe(self) -> str:
        pass

    def __and__(self, other: Any) -> 'Matcher':
        return AllOf([self, as_matcher(other)])

    def __or__(self, other: Any) -> 'Matcher':
        return AnyOf([self, as_matcher(other)])

    def __invert__(self) -> 'Matcher':
        return Not(self)

    def __repr__(self) -> str:
        return self.describe()


class Eq(Matcher):
    def __init__(self, expected: Any):
        self.expected = expected

    def matches(self, value: Any) -> bool:
        if value is self.expected:
            return True
        try:
            return bool(value == self.expected)
        except Exception:
            # Objects whose __eq__ refuses foreign operands simply do not match
            return False

    def describe(self) -> str:
        return repr(self.expected)


class Same(Matcher):
    def __init__(self, expected: Any):
        self.expected = expected

    def matches(self, value: Any) -> bool:
        return value is self.expected

    def describe(self) -> str:
        return f"same({self.expected!r})"


class AnyValue(Matcher):
    def matches(self, value: Any) -> bool:
        return True

    def describe(self) -> str:
        return "any()"


class InstanceOf(Matcher):
    def __init__(self, types: Tuple[type, ...], label: Optional[str] = None):
        self.types = types
        self.label = label

    def matches(self, value: Any) -> bool:
        # bool is an int subclass, but any_int() should not accept True
        if isinstance(value, bool) and bool not in self.types and numbers.Number not in self.types:
            return False
        return isinstance(value, self.types)

    def describe(self) -> str:
        if self.label:
            return f"{self.label}()"
        return f"any_of_type({', '.join(t.__name__ for t in self.types)})"


class Predicate(Matcher):
    def __init__(self, fn: Callable[[Any], bool], description: Optional[str] = None):
        self.fn = fn
        self.description = description or getattr(fn, '__name__', 'predicate')

    def matches(self, value: Any) -> bool:
        return bool(self.fn(value))

    def describe(self) -> str:
        return f"<{self.description}>"


class Contains(Matcher):
    def __init__(self, item: Any):
        self.item = item

    def matches(self, value: Any) -> bool:
        try:
            return self.item in value
        except TypeError:
            return False

    def describe(self) -> str:
        return f"contains({self.item!r})"


class AllOf(Matcher):
    def __init__(self, matchers: Iterable[Matcher]):
        self.matchers = list(matchers)

    def matches(self, value: Any) -> bool:
        return all(m.matches(value) for m in self.matchers)

    def describe(self) -> str:
        return " & ".join(m.describe() for m in self.matchers)


class AnyOf(Matcher):
    def __init__(self, matchers: Iterable[Matcher]):
        self.matchers = list(matchers)

    def matches(self, value: Any) -> bool:
        return any(m.matches(value) for m in self.matchers)

    def describe(self) -> str:
        return " | ".join(m.describe() for m in self.matchers)


class Not(Matcher):
    def __init__(self, matcher: Matcher):
        self.matcher = matcher

    def matches(self, value: Any) -> bool:
        return not self.matcher.matches(value)

    def describe(self) -> str:
        return f"not({self.matcher.describe()})"


def as_matcher(value: Any) -> Matcher:
    """Wrap raw values in ``eq`` so rules can mix literals and matchers."""
    if isinstance(value, Matcher):
        return value
    return Eq(value)


# Factory functions used by test code

def eq(value: Any) -> Matcher:
    return Eq(value)


def same(value: Any) -> Matcher:
    return Same(value)


def any_() -> Matcher:
    return AnyValue()


def any_of_type(*types: type) -> Matcher:
    return InstanceOf(tuple(types))


def any_string() -> Matcher:
    return InstanceOf((str,), "any_string")


def any_int() -> Matcher:
    return InstanceOf((int,), "any_int")


def any_float() -> Matcher:
    return InstanceOf((float,), "any_float")


def any_number() -> Matcher:
    return InstanceOf((numbers.Number,), "any_number")


def is_none() -> Matcher:
    return Predicate(lambda v: v is None, "is_none")


def not_none() -> Matcher:
    return Predicate(lambda v: v is not None, "not_none")


def predicate(fn: Callable[[Any], bool], description: Optional[str] = None) -> Matcher:
    return Predicate(fn, description)


def contains(item: Any) -> Matcher:
    return Contains(item)


def all_of(*matchers: Any) -> Matcher:
    return AllOf(as_matcher(m) for m in matchers)


def any_of(*matchers: Any) -> Matcher:
    return AnyOf(as_matcher(m) for m in matchers)


def not_(matcher: Any) -> Matcher:
    return Not(as_matcher(matcher))


class _AnyArgs:
    """Sentinel accepted in place of a whole argument list."""

    def __repr__(self) -> str:
        return "ANY_ARGS"


ANY_ARGS = _AnyArgs()


class ArgumentsMatcher:
    """Matches a complete call: positional arguments plus keyword arguments."""

    def __init__(
        self,
        args: Sequence[Any] = (),
        kwargs: Optional[Dict[str, Any]] = None,
        match_any: bool = False
    ):
        self.match_any = match_any
        self.args: Tuple[Matcher, ...] = tuple(as_matcher(a) for a in args)
        self.kwargs: Dict[str, Matcher] = {k: as_matcher(v) for k, v in (kwargs or {}).items()}

    @classmethod
    def from_call(cls, args: Sequence[Any], kwargs: Optional[Dict[str, Any]] = None) -> 'ArgumentsMatcher':
        """Build a matcher from the arguments of a stubbing or verification call."""
        if len(args) == 1 and args[0] is ANY_ARGS and not kwargs:
            return cls(match_any=True)
        return cls(args, kwargs)

    @classmethod
    def any_arguments(cls) -> 'ArgumentsMatcher':
        return cls(match_any=True)

    def matches(self, args: Sequence[Any], kwargs: Optional[Dict[str, Any]] = None) -> bool:
        if self.match_any:
            return True
        kwargs = kwargs or {}
        if len(args) != len(self.args) or set(kwargs) != set(self.kwargs):
            return False
        if not all(m.matches(a) for m, a in zip(self.args, args)):
            return False
        return all(self.kwargs[k].matches(v) for k, v in kwargs.items())

    def describe(self) -> str:
        if self.match_any:
            return "(ANY_ARGS)"
        parts = [m.describe() for m in self.args]
        parts.extend(f"{k}={m.describe()}" for k, m in self.kwargs.items())
        return f"({', '.join(parts)})"

    def __repr__(self) -> str:
        return f"ArgumentsMatcher{self.describe()}"
