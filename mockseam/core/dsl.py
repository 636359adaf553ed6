"""
Fluent stubbing and verification DSL.

    stubs.when(dictionary).get_meaning("word").then_return("meaning")
    stubs.do_raise(KeyError).when(dictionary).add("word", any_())
    stubs.verify(dictionary, times(2)).get_meaning(any_string())
    stubs.when_new(Connection).with_arguments("db").then_return(fake)

The proxies only translate attribute access into registry calls; all the
checking happens in the registry.
"""

from typing import TYPE_CHECKING, Any, Callable, List, Union

from .handle import CONSTRUCTOR_METHOD
from .matchers import ArgumentsMatcher

if TYPE_CHECKING:
    from .handle import MockHandle
    from .invocation import Invocation, VerificationMode
    from .registry import StubRegistry
    from .rules import StubRule, StubRuleBuilder


class _MethodRecorder:
    """Attribute access on it names a method; calling it hands the call to ``on_call``."""

    __slots__ = ("_on_call",)

    def __init__(self, on_call: Callable[[str, tuple, dict], Any]):
        object.__setattr__(self, "_on_call", on_call)

    def __getattribute__(self, name: str) -> Any:
        on_call = object.__getattribute__(self, "_on_call")

        def record(*args: Any, **kwargs: Any) -> Any:
            return on_call(name, args, kwargs)

        record.__name__ = name
        return record

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Cannot set {name!r} while stubbing or verifying")


class WhenProxy(_MethodRecorder):
    """``when(target).method(args)`` registers a rule and returns its builder."""

    __slots__ = ()

    def __init__(self, registry: 'StubRegistry', target: Any):
        super().__init__(
            lambda method, args, kwargs: registry.stub(target, method, ArgumentsMatcher.from_call(args, kwargs))
        )


class VerifyProxy(_MethodRecorder):
    """``verify(target, mode).method(args)`` checks the recorded call count."""

    __slots__ = ()

    def __init__(self, registry: 'StubRegistry', target: Any, mode: 'VerificationMode'):
        super().__init__(
            lambda method, args, kwargs: registry.verify_call_count(
                target, method, ArgumentsMatcher.from_call(args, kwargs), mode
            )
        )


class Stubber:
    """Actions collected first and attached to a rule named afterwards.

    Used for methods whose call cannot appear inside ``when(...)``, typically
    ones returning nothing: ``do_nothing().when(mock).close()``.
    """

    def __init__(self, registry: 'StubRegistry'):
        self._registry = registry
        self._pending: List[Callable[['StubRule'], Any]] = []

    def do_return(self, *values: Any) -> 'Stubber':
        self._pending.append(lambda rule: self._registry.configure_return(rule, *values))
        return self

    def do_raise(self, failure: Union[BaseException, type]) -> 'Stubber':
        self._pending.append(lambda rule: self._registry.configure_throw(rule, failure))
        return self

    def do_answer(self, callback: Callable[['Invocation'], Any]) -> 'Stubber':
        self._pending.append(lambda rule: self._registry.configure_answer(rule, callback))
        return self

    def do_nothing(self) -> 'Stubber':
        self._pending.append(self._registry.configure_do_nothing)
        return self

    def do_call_real_method(self) -> 'Stubber':
        self._pending.append(self._registry.configure_call_real)
        return self

    def when(self, target: Any) -> _MethodRecorder:
        return _MethodRecorder(lambda method, args, kwargs: self._apply(target, method, args, kwargs))

    def _apply(self, target: Any, method: str, args: tuple, kwargs: dict) -> 'StubRuleBuilder':
        builder = self._registry.stub(target, method, ArgumentsMatcher.from_call(args, kwargs))
        for configure in self._pending:
            configure(builder.rule)
        return builder


class ConstructorStubbing:
    """Rules for ``construct(cls, ...)`` calls, returned by ``StubRegistry.when_new``."""

    def __init__(self, registry: 'StubRegistry', handle: 'MockHandle'):
        self._registry = registry
        self.handle = handle

    def with_arguments(self, *args: Any, **kwargs: Any) -> 'StubRuleBuilder':
        return self._registry.stub(self.handle, CONSTRUCTOR_METHOD, ArgumentsMatcher.from_call(args, kwargs))

    def with_no_arguments(self) -> 'StubRuleBuilder':
        return self._registry.stub(self.handle, CONSTRUCTOR_METHOD, ArgumentsMatcher())

    def with_any_arguments(self) -> 'StubRuleBuilder':
        return self._registry.stub(self.handle, CONSTRUCTOR_METHOD, ArgumentsMatcher.any_arguments())

    def verify(self, mode: Union[int, 'VerificationMode', None] = None) -> 'VerifyProxy':
        """``when_new(cls).verify(times(1)).new(args)``"""
        return self._registry.verify(self.handle, mode)

    def constructions(self) -> List['Invocation']:
        return self._registry.invocations(self.handle, CONSTRUCTOR_METHOD)

    def __repr__(self) -> str:
        return f"<ConstructorStubbing {self.handle.name}>"
