"""
Stub Registry

Creates test doubles, records stub rules against them, intercepts every call
made on them and verifies what was called. One registry belongs to one test:
``teardown()`` restores every class, module, constructor and capability the
registry touched and forgets all rules and invocations.

Matching policy: when several rules match a call, the most recently
registered one wins.
"""

import inspect
import itertools
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..configuration.models import MockseamSettings
from ..infrastructure.di import SeamContainer, get_container
from ..infrastructure.exceptions import (
    ConfigurationError, TypeMismatchError, UnstubbedCallError, VerificationError
)
from ..infrastructure.observability.logging import get_logger
from ..seams.construction import install_interceptor
from . import actions
from .dsl import ConstructorStubbing, Stubber, VerifyProxy, WhenProxy
from .handle import CONSTRUCTOR_METHOD, HandleKind, Mock, MockHandle, MockMode, handle_of
from .invocation import Invocation, VerificationMode, as_mode, times
from .matchers import ArgumentsMatcher
from .rules import StubRule, StubRuleBuilder, conforms_to, describe_rules
from .static import StaticPatcher

MatcherLike = Union[ArgumentsMatcher, Sequence[Any], None]


class StubRegistry:
    """Per-test registry of mocks, stub rules and invocation records."""

    def __init__(
        self,
        settings: Optional[MockseamSettings] = None,
        container: Optional[SeamContainer] = None,
        name: str = "registry"
    ):
        self.settings = settings or MockseamSettings()
        self.name = name
        self._container = container or get_container()
        self._logger = get_logger("mockseam.registry")
        self._sequence = itertools.count(1)
        self._handles: List[MockHandle] = []
        self._static_handles: Dict[int, MockHandle] = {}
        self._constructor_handles: Dict[type, MockHandle] = {}
        self._patcher = StaticPatcher()
        self._restorers: List[Callable[[], None]] = []
        self._mock_counter = itertools.count(1)

    # Context manager protocol

    def __enter__(self) -> 'StubRegistry':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()

    @property
    def default_mode(self) -> MockMode:
        return MockMode(self.settings.mocks.default_mode)

    # Creating test doubles

    def mock(self, spec: Any = None, mode: Optional[MockMode] = None, name: Optional[str] = None) -> Any:
        """Create a mock object; ``spec`` is the class it stands in for."""
        if spec is not None and not inspect.isclass(spec):
            hint = " (use mock_static for modules)" if inspect.ismodule(spec) else ""
            raise ConfigurationError(f"Cannot mock {spec!r}: expected a class{hint}", target=spec)

        label = name or f"{spec.__name__ if spec is not None else 'mock'}#{next(self._mock_counter)}"
        handle = MockHandle(self, HandleKind.INSTANCE, mode or self.default_mode, label, spec=spec)
        return self._register_proxy(handle)

    def spy(self, obj: Any, name: Optional[str] = None) -> Any:
        """Wrap a real object; unstubbed calls reach it.

        Spying on a class or module is the static variant, see ``spy_static``.
        """
        if inspect.isclass(obj) or inspect.ismodule(obj):
            return self.spy_static(obj)
        if handle_of(obj) is not None:
            raise ConfigurationError(f"{obj!r} is already a mock", target=obj)

        label = name or f"spy({type(obj).__name__})#{next(self._mock_counter)}"
        handle = MockHandle(self, HandleKind.INSTANCE, MockMode.PARTIAL, label, spec=type(obj), real=obj)
        return self._register_proxy(handle)

    def _register_proxy(self, handle: MockHandle) -> Any:
        proxy = Mock(handle)
        handle.subject = proxy
        self._handles.append(handle)
        self._logger.debug("Created mock", {"mock": handle.name, "mode": handle.mode.value})
        return proxy

    def mock_static(self, target: Any, mode: Optional[MockMode] = None) -> MockHandle:
        """Intercept every public function of a class or module until teardown."""
        if self._patcher.is_patched(target):
            raise ConfigurationError(f"{target!r} is already mocked statically", target=target)

        label = getattr(target, "__qualname__", None) or getattr(target, "__name__", repr(target))
        handle = MockHandle(self, HandleKind.STATIC, mode or self.default_mode, label, spec=target)
        handle.subject = target
        handle.originals = self._patcher.patch(handle)

        self._handles.append(handle)
        self._static_handles[id(target)] = handle
        self._logger.debug(
            "Patched static target",
            {"target": label, "mode": handle.mode.value, "methods": len(handle.originals)}
        )
        return handle

    def spy_static(self, target: Any) -> MockHandle:
        return self.mock_static(target, mode=MockMode.PARTIAL)

    def when_new(self, cls: type) -> ConstructorStubbing:
        """Stub ``construct(cls, ...)``; unmatched constructions build real objects."""
        if not inspect.isclass(cls):
            raise ConfigurationError(f"Cannot intercept construction of {cls!r}: expected a class", target=cls)

        handle = self._constructor_handles.get(cls)
        if handle is None:
            handle = MockHandle(self, HandleKind.CONSTRUCTOR, MockMode.PARTIAL, f"new {cls.__name__}", spec=cls, real=cls)
            handle.subject = cls
            self._restorers.append(
                install_interceptor(cls, lambda args, kwargs: self.intercept(handle, CONSTRUCTOR_METHOD, args, kwargs))
            )
            self._handles.append(handle)
            self._constructor_handles[cls] = handle
        return ConstructorStubbing(self, handle)

    def override(self, interface: type, replacement: Any) -> Any:
        """Make the capability container resolve ``interface`` to ``replacement`` until teardown."""
        self._restorers.append(self._container.override(interface, replacement))
        self._logger.debug("Overrode capability", {"interface": getattr(interface, "__name__", interface)})
        return replacement

    # Resolving targets

    def handle_for(self, target: Any) -> MockHandle:
        """Find the handle behind a mock proxy, a statically mocked target or a handle."""
        if isinstance(target, MockHandle):
            return target
        handle = handle_of(target)
        if handle is not None:
            return handle
        handle = self._static_handles.get(id(target))
        if handle is not None and handle.spec is target:
            return handle
        if inspect.isclass(target) and target in self._constructor_handles:
            return self._constructor_handles[target]
        raise ConfigurationError(
            f"{target!r} is not interceptable: create it with mock(), spy(), mock_static() or when_new() first",
            target=target
        )

    # Registration

    def stub(self, target: Any, method: str, matcher: MatcherLike = None) -> StubRuleBuilder:
        """Register intent to intercept ``method`` calls matching ``matcher``."""
        handle = self.handle_for(target)
        if not handle.method_exists(method):
            raise ConfigurationError(f"{handle.name} has no method {method!r} to stub", target=target)

        rule = StubRule(
            handle=handle,
            method=method,
            matcher=self._bind_matcher(handle, method, self._as_arguments_matcher(matcher)),
            sequence=next(self._sequence)
        )
        handle.rules.append(rule)
        self._logger.debug("Registered stub", {"rule": rule.describe(), "sequence": rule.sequence})
        return StubRuleBuilder(self, rule)

    def configure_return(self, rule: StubRule, *values: Any) -> StubRule:
        if not values:
            values = (None,)
        if self.settings.mocks.type_checking:
            declared = rule.handle.declared_return_type(rule.method)
            for value in values:
                if not conforms_to(value, declared):
                    raise TypeMismatchError(f"{rule.handle.name}.{rule.method}", declared, value)
        rule.actions.extend(actions.returning(v) for v in values)
        return rule

    def configure_throw(self, rule: StubRule, failure: Union[BaseException, type]) -> StubRule:
        rule.actions.append(actions.raising(failure))
        return rule

    def configure_answer(self, rule: StubRule, callback: Callable[[Invocation], Any]) -> StubRule:
        rule.actions.append(actions.answering(callback))
        return rule

    def configure_call_real(self, rule: StubRule) -> StubRule:
        if rule.handle.real_method(rule.method) is None:
            raise ConfigurationError(f"{rule.handle.name}.{rule.method} has no real implementation to call")
        rule.actions.append(actions.CALL_REAL)
        return rule

    def configure_do_nothing(self, rule: StubRule) -> StubRule:
        rule.actions.append(actions.DO_NOTHING)
        return rule

    def _as_arguments_matcher(self, matcher: MatcherLike) -> ArgumentsMatcher:
        if matcher is None:
            return ArgumentsMatcher.any_arguments()
        if isinstance(matcher, ArgumentsMatcher):
            return matcher
        return ArgumentsMatcher.from_call(tuple(matcher))

    def _bind_matcher(self, handle: MockHandle, method: str, matcher: ArgumentsMatcher) -> ArgumentsMatcher:
        if matcher.match_any or not self.settings.mocks.signature_checking:
            return matcher
        signature = handle.signature(method)
        if signature is None:
            return matcher
        try:
            bound = signature.bind(*matcher.args, **matcher.kwargs)
        except TypeError as e:
            raise ConfigurationError(
                f"Arguments {matcher.describe()} do not fit {handle.name}.{method}{signature}: {e}",
                target=handle.subject
            ) from e
        return ArgumentsMatcher(bound.args, bound.kwargs)

    # Interception

    def intercept(
        self,
        target: Any,
        method: str,
        args: Sequence[Any],
        kwargs: Optional[Dict[str, Any]] = None,
        receiver: Any = None
    ) -> Any:
        """Answer one call made on a test double.

        ``receiver`` is set when an instance method of a statically mocked
        class was called on an instance; it is not part of the arguments.
        """
        handle = self.handle_for(target)
        args, kwargs = tuple(args), dict(kwargs or {})
        if self.settings.mocks.signature_checking:
            args, kwargs = handle.normalise(method, args, kwargs)

        invocation = Invocation(
            handle=handle,
            method=method,
            args=args,
            kwargs=kwargs,
            sequence=next(self._sequence),
            real=handle.real_method(method, receiver),
            receiver=receiver
        )
        handle.log.record(invocation)

        rule = self._find_rule(handle, method, args, kwargs)
        if rule is not None:
            action = rule.next_action()
            self._logger.debug(
                "Intercepted call",
                {"call": invocation.describe(), "rule": rule.sequence, "action": action.kind.value}
            )
            return action.perform(invocation)

        return self._unmatched(handle, invocation)

    def _find_rule(self, handle: MockHandle, method: str, args: tuple, kwargs: dict) -> Optional[StubRule]:
        for rule in reversed(handle.rules):
            if rule.applies_to(method, args, kwargs):
                return rule
        return None

    def _unmatched(self, handle: MockHandle, invocation: Invocation) -> Any:
        if handle.mode is MockMode.PARTIAL and invocation.real is not None:
            self._logger.debug("Delegating to real method", {"call": invocation.describe()})
            return invocation.call_real_method()
        if invocation.method == "__str__":
            return repr(handle.subject)
        if handle.mode is MockMode.STRICT:
            self._logger.warning("Unstubbed call on strict mock", {"call": invocation.describe()})
            raise UnstubbedCallError(handle.name, invocation.method, invocation.args, invocation.kwargs)
        return handle.default_value(invocation.method)

    # Verification

    def verify_call_count(
        self,
        target: Any,
        method: str,
        matcher: MatcherLike = None,
        expected: Union[int, VerificationMode] = 1
    ) -> int:
        """Check how many recorded calls match; returns the actual count."""
        handle = self.handle_for(target)
        if not handle.method_exists(method):
            raise ConfigurationError(f"{handle.name} has no method {method!r} to verify", target=target)
        mode = as_mode(expected)
        arguments = self._bind_matcher(handle, method, self._as_arguments_matcher(matcher))

        matching = handle.log.matching(method, arguments)
        for invocation in matching:
            invocation.verified = True

        if not mode.accepts(len(matching)):
            message = (
                f"Wanted {mode} of {handle.name}.{method}{arguments.describe()} "
                f"but was {len(matching)}"
            )
            if self.settings.verification.report_invocations:
                recorded = handle.log.all()
                details = "\n".join(f"  {i.describe()}" for i in recorded) or "  <none>"
                message += f"\nRecorded invocations on {handle.name}:\n{details}"
                stubbed = describe_rules(handle.rules, method)
                if stubbed:
                    message += "\nStubbed rules:\n" + "\n".join(f"  {r}" for r in stubbed)
            self._logger.warning("Verification failed", {"mock": handle.name, "method": method})
            raise VerificationError(message, expected=mode, actual=len(matching))
        return len(matching)

    def verify_no_more_interactions(self, *targets: Any) -> None:
        for target in targets:
            handle = self.handle_for(target)
            unverified = [i for i in handle.log.all() if not i.verified]
            if unverified:
                details = "\n".join(f"  {i.describe()}" for i in unverified)
                raise VerificationError(
                    f"No more interactions wanted on {handle.name}, but found:\n{details}",
                    expected=0,
                    actual=len(unverified)
                )

    def invocations(self, target: Any, method: Optional[str] = None) -> List[Invocation]:
        handle = self.handle_for(target)
        if method is None:
            return handle.log.all()
        record = handle.log.get(method)
        return list(record.invocations) if record else []

    def rules(self, target: Any, method: Optional[str] = None) -> List[StubRule]:
        handle = self.handle_for(target)
        return [r for r in handle.rules if method is None or r.method == method]

    # Fluent API

    def when(self, target: Any) -> WhenProxy:
        """``when(mock).method(args).then_return(value)``"""
        return WhenProxy(self, target)

    given = when

    def do_return(self, *values: Any) -> Stubber:
        return Stubber(self).do_return(*values)

    def do_raise(self, failure: Union[BaseException, type]) -> Stubber:
        return Stubber(self).do_raise(failure)

    def do_answer(self, callback: Callable[[Invocation], Any]) -> Stubber:
        return Stubber(self).do_answer(callback)

    def do_nothing(self) -> Stubber:
        return Stubber(self).do_nothing()

    def do_call_real_method(self) -> Stubber:
        return Stubber(self).do_call_real_method()

    def verify(self, target: Any, mode: Union[int, VerificationMode, None] = None) -> VerifyProxy:
        """``verify(mock, times(2)).method(args)``"""
        return VerifyProxy(self, target, times(1) if mode is None else as_mode(mode))

    verify_static = verify

    # Lifecycle

    def reset(self, *targets: Any) -> None:
        """Forget rules and invocations of the given doubles, keeping them installed."""
        for target in targets:
            handle = self.handle_for(target)
            handle.rules.clear()
            handle.log.clear()

    def teardown(self) -> None:
        """Restore every intercepted target and drop all state. Safe to call twice."""
        try:
            self._patcher.restore()
        finally:
            restorers, self._restorers = self._restorers, []
            for restore in reversed(restorers):
                restore()
            for handle in self._handles:
                handle.rules.clear()
                handle.log.clear()
            released = len(self._handles)
            self._handles = []
            self._static_handles.clear()
            self._constructor_handles.clear()
            if released:
                self._logger.debug("Registry torn down", {"registry": self.name, "handles": released})
