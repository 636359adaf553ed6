"""
Stub Rules

A StubRule ties a (handle, method, arguments matcher) triple to an ordered list
of actions. The builder returned by ``StubRegistry.stub`` attaches those
actions; every ``then_*`` call appends one so consecutive calls can answer
differently.
"""

import inspect
import types
import typing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Union

from .actions import Action
from .matchers import ArgumentsMatcher

if TYPE_CHECKING:
    from .handle import MockHandle
    from .invocation import Invocation
    from .registry import StubRegistry


@dataclass
class StubRule:
    """Programmed response for matching calls of one method."""
    handle: 'MockHandle'
    method: str
    matcher: ArgumentsMatcher
    sequence: int
    actions: List[Action] = field(default_factory=list)
    _cursor: int = 0

    @property
    def is_configured(self) -> bool:
        return bool(self.actions)

    def applies_to(self, method: str, args: tuple, kwargs: dict) -> bool:
        return self.is_configured and method == self.method and self.matcher.matches(args, kwargs)

    def next_action(self) -> Action:
        """Answer with the next action; the last one repeats once the list runs out."""
        action = self.actions[min(self._cursor, len(self.actions) - 1)]
        if self._cursor < len(self.actions):
            self._cursor += 1
        return action

    def describe(self) -> str:
        actions = ", then ".join(a.describe() for a in self.actions) or "<unfinished>"
        return f"{self.handle.name}.{self.method}{self.matcher.describe()} -> {actions}"


class StubRuleBuilder:
    """Fluent API for attaching actions to a freshly registered rule."""

    def __init__(self, registry: 'StubRegistry', rule: StubRule):
        self._registry = registry
        self.rule = rule

    def then_return(self, *values: Any) -> 'StubRuleBuilder':
        self._registry.configure_return(self.rule, *values)
        return self

    def then_raise(self, failure: Union[BaseException, type]) -> 'StubRuleBuilder':
        self._registry.configure_throw(self.rule, failure)
        return self

    def then_answer(self, callback: Callable[['Invocation'], Any]) -> 'StubRuleBuilder':
        self._registry.configure_answer(self.rule, callback)
        return self

    def then_call_real_method(self) -> 'StubRuleBuilder':
        self._registry.configure_call_real(self.rule)
        return self

    def then_do_nothing(self) -> 'StubRuleBuilder':
        self._registry.configure_do_nothing(self.rule)
        return self

    # BDD spelling: given(...).will_return(...)
    will_return = then_return
    will_raise = then_raise
    will_answer = then_answer
    will_call_real_method = then_call_real_method
    will_do_nothing = then_do_nothing

    def __repr__(self) -> str:
        return f"<StubRuleBuilder {self.rule.describe()}>"


_UNION_TYPE = getattr(types, "UnionType", None)


def conforms_to(value: Any, annotation: Any) -> bool:
    """Check ``value`` against a return annotation.

    Unknown or unenforceable annotations (Any, type variables, unresolved
    forward references, protocols that reject isinstance) always conform.
    """
    from .handle import is_mock, spec_of

    if annotation is inspect.Signature.empty or annotation is Any:
        return True
    if annotation is None or annotation is type(None):
        return value is None
    if isinstance(annotation, (typing.TypeVar, str, typing.ForwardRef)):
        return True

    origin = typing.get_origin(annotation)
    if origin is Union or (_UNION_TYPE is not None and origin is _UNION_TYPE):
        return any(conforms_to(value, arg) for arg in typing.get_args(annotation))
    if origin is typing.Literal:
        return value in typing.get_args(annotation)
    if origin is not None:
        annotation = origin

    if not inspect.isclass(annotation):
        return True

    if is_mock(value):
        # Mocks stand in for their spec; spec-less mocks fit anything
        spec = spec_of(value)
        return not inspect.isclass(spec) or _is_subclass(spec, annotation)

    try:
        if isinstance(value, annotation):
            return True
    except TypeError:
        return True

    # Numeric tower: an int is acceptable where a float is declared
    if annotation is float and isinstance(value, int) and not isinstance(value, bool):
        return True
    if annotation is complex and isinstance(value, (int, float)) and not isinstance(value, bool):
        return True
    return False


def _is_subclass(cls: type, annotation: type) -> bool:
    try:
        return issubclass(cls, annotation)
    except TypeError:
        return True


def describe_rules(rules: List[StubRule], method: Optional[str] = None) -> List[str]:
    return [r.describe() for r in rules if method is None or r.method == method]
