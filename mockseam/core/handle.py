"""
Mock Handles and Proxies

A MockHandle is the identity behind every test double. It owns the stub rules
and invocation records of one mocked object, class, module or constructor and
knows how to reach the real implementation. The Mock proxy is the object code
under test actually talks to; every method call on it is routed to the
registry's ``intercept``.
"""

import inspect
import types
import typing
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Set, Tuple

from .invocation import InvocationLog

if TYPE_CHECKING:
    from .registry import StubRegistry
    from .rules import StubRule


class MockMode(Enum):
    """What happens to a call that no rule matches."""
    STRICT = "strict"
    LENIENT = "lenient"
    PARTIAL = "partial"


class HandleKind(Enum):
    INSTANCE = "instance"
    STATIC = "static"
    CONSTRUCTOR = "constructor"


CONSTRUCTOR_METHOD = "new"

_DUNDER_DEFAULTS: Dict[str, Callable[[], Any]] = {
    "__len__": lambda: 0,
    "__iter__": lambda: iter(()),
    "__contains__": lambda: False,
}

_EMPTY_DEFAULTS: Dict[type, Callable[[], Any]] = {
    bool: lambda: False,
    int: lambda: 0,
    float: lambda: 0.0,
    complex: lambda: 0j,
    str: lambda: "",
    bytes: lambda: b"",
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
}


class MockHandle:
    """Identity, rules and invocation records of one test double."""

    def __init__(
        self,
        registry: 'StubRegistry',
        kind: HandleKind,
        mode: MockMode,
        name: str,
        spec: Any = None,
        real: Any = None
    ):
        self.registry = registry
        self.kind = kind
        self.mode = mode
        self.name = name
        self.spec = spec
        self.real = real
        self.rules: List['StubRule'] = []
        self.log = InvocationLog()
        self.originals: Dict[str, Any] = {}
        self.instance_methods: Set[str] = set()
        self.attributes: Dict[str, Any] = {}
        self.subject: Any = None
        self._methods: Dict[str, 'MockMethod'] = {}
        self._signatures: Dict[str, Optional[inspect.Signature]] = {}

    def __repr__(self) -> str:
        return f"<MockHandle {self.name} kind={self.kind.value} mode={self.mode.value}>"

    # Introspection of the spec

    def method_exists(self, method: str) -> bool:
        if self.kind is HandleKind.CONSTRUCTOR:
            return method == CONSTRUCTOR_METHOD
        if self.kind is HandleKind.STATIC:
            return method in self.originals
        if method in self.attributes:
            return True
        if self.real is not None and hasattr(self.real, method):
            return True
        if self.spec is None:
            return True
        return hasattr(self.spec, method)

    def _raw_attribute(self, method: str) -> Any:
        if self.spec is None:
            return None
        try:
            return inspect.getattr_static(self.spec, method)
        except AttributeError:
            return None

    def real_method(self, method: str, receiver: Any = None) -> Optional[Callable[..., Any]]:
        """The callable a CALL_REAL action or a partial mock delegates to.

        ``receiver`` is the instance an intercepted instance method of a
        statically mocked class was called on.
        """
        if self.kind is HandleKind.CONSTRUCTOR:
            return self.real
        if self.kind is HandleKind.STATIC:
            original = self.originals.get(method)
            if original is not None and receiver is not None and method in self.instance_methods:
                return types.MethodType(original, receiver)
            return original
        if self.real is not None:
            return getattr(self.real, method, None)

        raw = self._raw_attribute(method)
        if isinstance(raw, staticmethod):
            return raw.__func__
        if isinstance(raw, classmethod):
            return getattr(self.spec, method)
        if inspect.isfunction(raw):
            # Bound to the proxy so calls to other methods stay intercepted
            return types.MethodType(raw, self.subject)
        if isinstance(raw, property) and raw.fget is not None:
            return types.MethodType(raw.fget, self.subject)
        return None

    def signature(self, method: str) -> Optional[inspect.Signature]:
        if method not in self._signatures:
            self._signatures[method] = self._compute_signature(method)
        return self._signatures[method]

    def _compute_signature(self, method: str) -> Optional[inspect.Signature]:
        try:
            if self.kind is HandleKind.CONSTRUCTOR:
                return inspect.signature(self.real)
            if self.kind is HandleKind.STATIC:
                original = self.originals.get(method)
                if original is None:
                    return None
                signature = inspect.signature(original)
                if method in self.instance_methods:
                    return _drop_first_parameter(signature)
                return signature
            if self.real is not None:
                attribute = getattr(self.real, method, None)
                return inspect.signature(attribute) if callable(attribute) else None

            raw = self._raw_attribute(method)
            if isinstance(raw, staticmethod):
                return inspect.signature(raw.__func__)
            if isinstance(raw, classmethod):
                return inspect.signature(getattr(self.spec, method))
            if inspect.isfunction(raw):
                return _drop_first_parameter(inspect.signature(raw))
            if inspect.isdatadescriptor(raw):
                return inspect.Signature()
            if raw is not None and callable(raw):
                # Builtin methods of C types, e.g. list.append
                return _drop_first_parameter(inspect.signature(raw))
        except (TypeError, ValueError):
            pass
        return None

    def _function(self, method: str) -> Optional[Callable[..., Any]]:
        if self.kind is HandleKind.CONSTRUCTOR:
            return None
        if self.kind is HandleKind.STATIC:
            original = self.originals.get(method)
            return getattr(original, "__func__", original)
        if self.real is not None and self.spec is None:
            attribute = getattr(self.real, method, None)
            return getattr(attribute, "__func__", attribute)
        raw = self._raw_attribute(method)
        if isinstance(raw, (staticmethod, classmethod)):
            return raw.__func__
        if isinstance(raw, property):
            return raw.fget
        return raw if callable(raw) else None

    def declared_return_type(self, method: str) -> Any:
        """Return annotation of ``method``, or ``inspect.Signature.empty`` when unknown."""
        if self.kind is HandleKind.CONSTRUCTOR:
            return self.real
        function = self._function(method)
        if function is None:
            return inspect.Signature.empty
        try:
            hints = typing.get_type_hints(function)
        except (NameError, TypeError, AttributeError, SyntaxError):
            # Unresolvable forward references or objects without annotations
            return inspect.Signature.empty
        return hints.get("return", inspect.Signature.empty)

    def default_value(self, method: str) -> Any:
        """Value a lenient mock answers for an unstubbed call."""
        if method in _DUNDER_DEFAULTS:
            return _DUNDER_DEFAULTS[method]()
        annotation = self.declared_return_type(method)
        origin = typing.get_origin(annotation) or annotation
        factory = _EMPTY_DEFAULTS.get(origin)
        return factory() if factory is not None else None

    # Argument normalisation

    def normalise(self, method: str, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Tuple[Tuple[Any, ...], Dict[str, Any]]:
        """Bind a call to the method signature so keyword and positional spellings agree.

        Raises TypeError, like the real method would, for arguments that do not fit.
        """
        signature = self.signature(method)
        if signature is None:
            return args, kwargs
        bound = signature.bind(*args, **kwargs)
        return tuple(bound.args), dict(bound.kwargs)

    # Proxy support

    def method_proxy(self, method: str) -> 'MockMethod':
        if method not in self._methods:
            self._methods[method] = MockMethod(self, method)
        return self._methods[method]

    def attribute(self, name: str) -> Any:
        if name in self.attributes:
            return self.attributes[name]
        if not self.method_exists(name):
            raise AttributeError(f"Mock {self.name} has no attribute {name!r}")

        if self.real is not None:
            value = getattr(self.real, name)
            if not callable(value):
                return value
            return self.method_proxy(name)

        raw = self._raw_attribute(name)
        if inspect.isdatadescriptor(raw):
            # Properties and slots behave like zero-argument methods
            return self.registry.intercept(self, name, (), {})
        if raw is not None and not callable(raw) and not isinstance(raw, (staticmethod, classmethod)):
            # Class constants read through unchanged
            return getattr(self.spec, name)
        return self.method_proxy(name)

    def dunder(self, name: str, args: Tuple[Any, ...], fallback: Callable[[], Any]) -> Any:
        defined = self.spec is None or self._raw_attribute(name) is not None
        if self.real is not None:
            defined = hasattr(type(self.real), name)
        if name == "__str__" or defined:
            return self.registry.intercept(self, name, args, {})
        return fallback()


class MockMethod:
    """Callable attribute of a mock; calling it is an intercepted invocation."""

    def __init__(self, handle: MockHandle, method: str):
        self._handle = handle
        self.__name__ = method

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._handle.registry.intercept(self._handle, self.__name__, args, kwargs)

    def __repr__(self) -> str:
        return f"<MockMethod {self._handle.name}.{self.__name__}>"


class Mock:
    """Proxy handed to code under test in place of a real object."""

    __slots__ = ("_mockseam_handle",)

    def __init__(self, handle: MockHandle):
        object.__setattr__(self, "_mockseam_handle", handle)

    @property
    def __class__(self):
        spec = object.__getattribute__(self, "_mockseam_handle").spec
        return spec if inspect.isclass(spec) else Mock

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return object.__getattribute__(self, "_mockseam_handle").attribute(name)

    def __setattr__(self, name: str, value: Any) -> None:
        object.__getattribute__(self, "_mockseam_handle").attributes[name] = value

    def __repr__(self) -> str:
        return f"<Mock {object.__getattribute__(self, '_mockseam_handle').name}>"

    def __bool__(self) -> bool:
        return True

    def __str__(self) -> str:
        return self._dispatch("__str__", ())

    def __len__(self) -> int:
        return self._dispatch("__len__", ())

    def __iter__(self):
        return iter(self._dispatch("__iter__", ()))

    def __contains__(self, item: Any) -> bool:
        return self._dispatch("__contains__", (item,))

    def __getitem__(self, key: Any) -> Any:
        return self._dispatch("__getitem__", (key,))

    def _dispatch(self, name: str, args: Tuple[Any, ...]) -> Any:
        handle = object.__getattribute__(self, "_mockseam_handle")

        def unsupported() -> Any:
            raise TypeError(f"{handle.name} does not support {name}")

        return handle.dunder(name, args, unsupported)

    __hash__ = object.__hash__


def handle_of(obj: Any) -> Optional[MockHandle]:
    """The handle behind a Mock proxy, or None for anything else."""
    if type(obj) is Mock:
        return object.__getattribute__(obj, "_mockseam_handle")
    return None


def is_mock(obj: Any) -> bool:
    return type(obj) is Mock


def spec_of(obj: Any) -> Any:
    handle = handle_of(obj)
    return handle.spec if handle is not None else None


def _drop_first_parameter(signature: inspect.Signature) -> inspect.Signature:
    parameters = list(signature.parameters.values())
    if parameters and parameters[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD
    ):
        parameters = parameters[1:]
    return signature.replace(parameters=parameters)
