"""
Stub Actions

An action turns one intercepted invocation into its outcome: a value, a raised
exception, the result of a callback or the result of the real implementation.
"""

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Union

from ..infrastructure.exceptions import ConfigurationError

if TYPE_CHECKING:
    from .invocation import Invocation


class StubAction(Enum):
    """Kinds of programmed response."""
    RETURN = "RETURN"
    THROW = "THROW"
    CALL_REAL = "CALL_REAL"
    ANSWER = "ANSWER"
    DO_NOTHING = "DO_NOTHING"


@dataclass(frozen=True)
class Action:
    """A programmed response attached to a stub rule."""
    kind: StubAction
    payload: Any = None

    def perform(self, invocation: 'Invocation') -> Any:
        if self.kind is StubAction.RETURN:
            return self.payload
        if self.kind is StubAction.THROW:
            raise _materialise(self.payload)
        if self.kind is StubAction.ANSWER:
            return self.payload(invocation)
        if self.kind is StubAction.CALL_REAL:
            return invocation.call_real_method()
        return None

    def describe(self) -> str:
        if self.kind is StubAction.RETURN:
            return f"return {self.payload!r}"
        if self.kind is StubAction.THROW:
            return f"raise {getattr(self.payload, '__name__', self.payload)!r}"
        if self.kind is StubAction.ANSWER:
            return f"answer {getattr(self.payload, '__name__', 'callback')}"
        return self.kind.value.lower().replace('_', ' ')


def returning(value: Any) -> Action:
    return Action(StubAction.RETURN, value)


def raising(failure: Union[BaseException, type]) -> Action:
    if not (isinstance(failure, BaseException) or (inspect.isclass(failure) and issubclass(failure, BaseException))):
        raise ConfigurationError(f"Can only raise exception classes or instances, got {failure!r}")
    return Action(StubAction.THROW, failure)


def answering(callback: Callable[['Invocation'], Any]) -> Action:
    if not callable(callback):
        raise ConfigurationError(f"Answer must be callable, got {callback!r}")
    return Action(StubAction.ANSWER, callback)


CALL_REAL = Action(StubAction.CALL_REAL)
DO_NOTHING = Action(StubAction.DO_NOTHING)


def _materialise(failure: Union[BaseException, type]) -> BaseException:
    if inspect.isclass(failure):
        return failure()
    return failure
