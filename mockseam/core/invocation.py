"""
Invocations and Verification Modes

Every intercepted call is recorded as an Invocation. Records are grouped per
(handle, method) pair so verification can count matching calls.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from ..infrastructure.exceptions import MockseamException
from .matchers import ArgumentsMatcher

if TYPE_CHECKING:
    from .handle import MockHandle


@dataclass
class Invocation:
    """One intercepted call, as seen by answers and verification."""
    handle: 'MockHandle'
    method: str
    args: Tuple[Any, ...]
    kwargs: Dict[str, Any]
    sequence: int
    real: Optional[Callable[..., Any]] = None
    receiver: Any = None
    verified: bool = False

    @property
    def mock(self) -> Any:
        """The proxy (or patched target) the call was made on."""
        return self.handle.subject

    def argument(self, index: int) -> Any:
        return self.args[index]

    def call_real_method(self) -> Any:
        if self.real is None:
            raise MockseamException(
                f"{self.handle.name}.{self.method} has no real implementation to call",
                "NO_REAL_METHOD"
            )
        return self.real(*self.args, **self.kwargs)

    def describe(self) -> str:
        parts = [repr(a) for a in self.args]
        parts.extend(f"{k}={v!r}" for k, v in self.kwargs.items())
        return f"{self.handle.name}.{self.method}({', '.join(parts)})"


@dataclass
class InvocationRecord:
    """Calls made to one method of one handle, in call order."""
    method: str
    invocations: List[Invocation] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.invocations)

    def append(self, invocation: Invocation) -> None:
        self.invocations.append(invocation)

    def matching(self, matcher: ArgumentsMatcher) -> List[Invocation]:
        return [i for i in self.invocations if matcher.matches(i.args, i.kwargs)]


class InvocationLog:
    """All invocation records owned by a handle."""

    def __init__(self):
        self._records: Dict[str, InvocationRecord] = {}

    def record(self, invocation: Invocation) -> InvocationRecord:
        record = self._records.get(invocation.method)
        if record is None:
            # Created on first invocation of the method
            record = self._records[invocation.method] = InvocationRecord(invocation.method)
        record.append(invocation)
        return record

    def get(self, method: str) -> Optional[InvocationRecord]:
        return self._records.get(method)

    def matching(self, method: str, matcher: ArgumentsMatcher) -> List[Invocation]:
        record = self._records.get(method)
        return record.matching(matcher) if record else []

    def all(self) -> List[Invocation]:
        invocations = [i for r in self._records.values() for i in r.invocations]
        return sorted(invocations, key=lambda i: i.sequence)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return sum(r.count for r in self._records.values())


class VerificationMode:
    """Expected number of matching invocations."""

    def __init__(self, minimum: int, maximum: Optional[int], label: str):
        if minimum < 0 or (maximum is not None and maximum < minimum):
            raise ValueError(f"Invalid verification bounds: {minimum}..{maximum}")
        self.minimum = minimum
        self.maximum = maximum
        self.label = label

    def accepts(self, count: int) -> bool:
        if count < self.minimum:
            return False
        return self.maximum is None or count <= self.maximum

    def __repr__(self) -> str:
        return self.label


def times(n: int) -> VerificationMode:
    return VerificationMode(n, n, f"times({n})")


def never() -> VerificationMode:
    return VerificationMode(0, 0, "never()")


def at_least(n: int) -> VerificationMode:
    return VerificationMode(n, None, f"at_least({n})")


def at_least_once() -> VerificationMode:
    return VerificationMode(1, None, "at_least_once()")


def at_most(n: int) -> VerificationMode:
    return VerificationMode(0, n, f"at_most({n})")


def as_mode(expected: Any) -> VerificationMode:
    if isinstance(expected, VerificationMode):
        return expected
    if isinstance(expected, int) and not isinstance(expected, bool):
        return times(expected)
    raise TypeError(f"Expected an int or a verification mode, got {expected!r}")
