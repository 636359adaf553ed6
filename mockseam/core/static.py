"""
Static Interception

Replaces the public callables of a class or module with interceptors. All
patches go through ``unittest.mock.patch.object`` on a shared ExitStack, so a
single ``restore()`` puts every original back in reverse order. A target is
patched by at most one live registry at a time.
"""

import functools
import inspect
from contextlib import ExitStack
from typing import Any, Callable, Dict, List
from unittest.mock import patch

from ..infrastructure.exceptions import ConfigurationError
from .handle import MockHandle


def interceptable_names(target: Any) -> List[str]:
    """Public functions and methods of a class or module."""
    if inspect.ismodule(target):
        candidates = vars(target).keys()
    else:
        candidates = dir(target)

    names = []
    for name in candidates:
        if name.startswith("_"):
            continue
        try:
            value = getattr(target, name)
        except AttributeError:
            continue
        if inspect.isroutine(value):
            names.append(name)
    return sorted(names)


def _make_interceptor(handle: MockHandle, name: str, original: Callable[..., Any]) -> Callable[..., Any]:
    def intercepted(*args: Any, **kwargs: Any) -> Any:
        return handle.registry.intercept(handle, name, args, kwargs)

    return _wrap(intercepted, name, original)


def _make_instance_interceptor(handle: MockHandle, name: str, original: Callable[..., Any]) -> Callable[..., Any]:
    def intercepted(receiver: Any, *args: Any, **kwargs: Any) -> Any:
        return handle.registry.intercept(handle, name, args, kwargs, receiver=receiver)

    return _wrap(intercepted, name, original)


def _wrap(intercepted: Callable[..., Any], name: str, original: Callable[..., Any]) -> Callable[..., Any]:
    try:
        functools.update_wrapper(intercepted, original)
    except (AttributeError, TypeError):
        intercepted.__name__ = name
    return intercepted


# Targets patched by any live registry, keyed by id
_active_targets: Dict[int, Any] = {}


def is_statically_patched(target: Any) -> bool:
    return id(target) in _active_targets


class StaticPatcher:
    """Patches classes and modules for the lifetime of a registry."""

    def __init__(self):
        self._stack = ExitStack()
        self._patched: List[Any] = []

    def is_patched(self, target: Any) -> bool:
        return any(t is target for t in self._patched)

    def patch(self, handle: MockHandle) -> Dict[str, Any]:
        """Install interceptors for every callable of ``handle.spec``.

        Plain functions defined on a class stay instance methods, so calls on
        instances still pass the receiver. Returns the original callables by
        name. On failure nothing stays patched.
        """
        target = handle.spec
        if not (inspect.isclass(target) or inspect.ismodule(target)):
            raise ConfigurationError(
                f"Cannot intercept {target!r}: only classes and modules can be mocked statically",
                target=target
            )
        if is_statically_patched(target):
            raise ConfigurationError(
                f"{target!r} is already mocked statically by another registry",
                target=target
            )

        names = interceptable_names(target)
        if not names:
            raise ConfigurationError(f"{target!r} has no public callables to intercept", target=target)

        originals: Dict[str, Any] = {}
        instance_methods = set()
        local = ExitStack()
        try:
            for name in names:
                original = getattr(target, name)
                replacement: Any
                if inspect.isclass(target) and inspect.isfunction(inspect.getattr_static(target, name)):
                    replacement = _make_instance_interceptor(handle, name, original)
                    instance_methods.add(name)
                elif inspect.isclass(target):
                    replacement = staticmethod(_make_interceptor(handle, name, original))
                else:
                    replacement = _make_interceptor(handle, name, original)
                local.enter_context(patch.object(target, name, replacement))
                originals[name] = original
        except (TypeError, AttributeError) as e:
            local.close()
            raise ConfigurationError(
                f"Cannot intercept {getattr(target, '__name__', target)}.{name}: {e}",
                target=target
            ) from e

        self._stack.enter_context(local)
        self._patched.append(target)
        _active_targets[id(target)] = target
        handle.instance_methods = instance_methods
        return originals

    def restore(self) -> None:
        """Undo every patch, newest first."""
        try:
            self._stack.close()
        finally:
            for target in self._patched:
                _active_targets.pop(id(target), None)
            self._stack = ExitStack()
            self._patched.clear()
