"""
Capability Container

Code under test asks the container for its collaborators (``inject(Platform)``)
instead of reaching for process-wide services directly. Tests replace those
collaborators with ``override`` and the registry undoes the override at
teardown.
"""

from abc import ABC
from typing import Any, Callable, Dict, List, Type, TypeVar, Union
import inspect

T = TypeVar('T')


class Injectable(ABC):
    """
    Base class for capability objects.
    Subclasses can be registered and resolved without explicit factories.
    """
    pass


class SeamContainer:
    """
    Dependency container for capability objects.

    Supports:
    - Singleton and transient lifetimes
    - Factory functions
    - Interface to implementation mapping
    - Automatic constructor injection
    - Circular dependency detection
    - Stacked overrides for tests
    """

    def __init__(self):
        self._services: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable] = {}
        self._singletons: Dict[Type, Any] = {}
        self._transients: set = set()
        self._overrides: Dict[Type, List[Any]] = {}
        self._resolution_stack: List[str] = []

    def register_singleton(self, interface: Type[T], implementation: Union[Type[T], T]) -> 'SeamContainer':
        """Register a service as singleton (one instance per container)."""
        if inspect.isclass(implementation):
            self._services[interface] = implementation
            self._singletons.pop(interface, None)
        else:
            self._singletons[interface] = implementation
        return self

    def register_transient(self, interface: Type[T], implementation: Type[T]) -> 'SeamContainer':
        """Register a service as transient (new instance every time)."""
        self._services[interface] = implementation
        self._transients.add(interface)
        return self

    def register_factory(self, interface: Type[T], factory: Callable[[], T]) -> 'SeamContainer':
        """Register a factory function for creating instances."""
        self._factories[interface] = factory
        return self

    def override(self, interface: Type[T], replacement: Any) -> Callable[[], None]:
        """Make ``resolve(interface)`` return ``replacement`` until the returned callable runs.

        Overrides stack: restoring the newest one reveals the previous one.
        """
        stack = self._overrides.setdefault(interface, [])
        stack.append(replacement)

        def restore() -> None:
            # Remove this exact entry even if newer overrides sit above it
            for index in range(len(stack) - 1, -1, -1):
                if stack[index] is replacement:
                    del stack[index]
                    break
            if not stack:
                self._overrides.pop(interface, None)

        return restore

    def is_overridden(self, interface: Type) -> bool:
        return bool(self._overrides.get(interface))

    def resolve(self, interface: Type[T]) -> T:
        """Resolve a service instance with circular dependency detection."""
        if self._overrides.get(interface):
            return self._overrides[interface][-1]

        if interface in self._singletons:
            return self._singletons[interface]

        interface_name = getattr(interface, '__name__', str(interface))
        if interface_name in self._resolution_stack:
            cycle_path = ' -> '.join(self._resolution_stack + [interface_name])
            raise ValueError(f"Circular dependency detected: {cycle_path}")

        if interface in self._factories:
            self._resolution_stack.append(interface_name)
            try:
                instance = self._factories[interface]()
            finally:
                self._resolution_stack.pop()
            if interface not in self._transients:
                self._singletons[interface] = instance
            return instance

        if interface in self._services:
            implementation = self._services[interface]
        elif inspect.isclass(interface) and issubclass(interface, Injectable) and not inspect.isabstract(interface):
            implementation = interface
        else:
            raise ValueError(f"Service {interface_name} is not registered")

        self._resolution_stack.append(interface_name)
        try:
            instance = self._create_instance(implementation)
        finally:
            self._resolution_stack.pop()

        if interface not in self._transients:
            self._singletons[interface] = instance
        return instance

    def _create_instance(self, implementation: Type[T]) -> T:
        """Create an instance, resolving annotated constructor parameters."""
        signature = inspect.signature(implementation.__init__)

        kwargs = {}
        for param_name, param in signature.parameters.items():
            if param_name == 'self' or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            if param.annotation != inspect.Parameter.empty:
                try:
                    kwargs[param_name] = self.resolve(param.annotation)
                except ValueError:
                    if param.default == inspect.Parameter.empty:
                        raise ValueError(
                            f"Cannot resolve dependency {getattr(param.annotation, '__name__', param.annotation)} "
                            f"for {implementation.__name__}"
                        )

        return implementation(**kwargs)

    def clear(self):
        """Clear all registrations and overrides."""
        self._services.clear()
        self._factories.clear()
        self._singletons.clear()
        self._transients.clear()
        self._overrides.clear()


# Global container instance
_container = SeamContainer()


def get_container() -> SeamContainer:
    """Get the global container instance."""
    return _container


def inject(interface: Type[T]) -> T:
    """Resolve a capability from the global container."""
    return _container.resolve(interface)
