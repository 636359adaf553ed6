"""
Construction Seam

Code that needs to be testable builds its collaborators with
``construct(cls, ...)`` instead of ``cls(...)``. Outside tests this is a plain
call; while a registry has ``when_new(cls)`` stubs installed, the call is
routed to that registry first.
"""

from typing import Any, Callable, Dict, List, Type, TypeVar

T = TypeVar('T')

ConstructionInterceptor = Callable[[tuple, Dict[str, Any]], Any]

_interceptors: Dict[type, List[ConstructionInterceptor]] = {}


def construct(cls: Type[T], *args: Any, **kwargs: Any) -> T:
    """Create an instance of ``cls``, honouring installed interceptors."""
    stack = _interceptors.get(cls)
    if stack:
        return stack[-1](args, kwargs)
    return cls(*args, **kwargs)


def install_interceptor(cls: type, interceptor: ConstructionInterceptor) -> Callable[[], None]:
    """Route ``construct(cls, ...)`` to ``interceptor``; returns the undo callable."""
    stack = _interceptors.setdefault(cls, [])
    stack.append(interceptor)

    def remove() -> None:
        for index in range(len(stack) - 1, -1, -1):
            if stack[index] is interceptor:
                del stack[index]
                break
        if not stack and _interceptors.get(cls) is stack:
            del _interceptors[cls]

    return remove


def is_intercepted(cls: type) -> bool:
    return bool(_interceptors.get(cls))
