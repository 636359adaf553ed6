"""
mockseam Core

Matchers, stub rules, invocation records, mock handles and the registry that
ties them together.
"""

from .actions import Action, StubAction
from .dsl import ConstructorStubbing, Stubber, VerifyProxy, WhenProxy
from .handle import CONSTRUCTOR_METHOD, HandleKind, Mock, MockHandle, MockMode, handle_of, is_mock
from .invocation import (
    Invocation, InvocationLog, InvocationRecord, VerificationMode,
    at_least, at_least_once, at_most, never, times
)
from .matchers import (
    ANY_ARGS, ArgumentsMatcher, Matcher, all_of, any_, any_float, any_int, any_number,
    any_of, any_of_type, any_string, contains, eq, is_none, not_, not_none, predicate, same
)
from .registry import StubRegistry
from .rules import StubRule, StubRuleBuilder
from .static import StaticPatcher

__all__ = [
    'Action',
    'StubAction',
    'ConstructorStubbing',
    'Stubber',
    'VerifyProxy',
    'WhenProxy',
    'CONSTRUCTOR_METHOD',
    'HandleKind',
    'Mock',
    'MockHandle',
    'MockMode',
    'handle_of',
    'is_mock',
    'Invocation',
    'InvocationLog',
    'InvocationRecord',
    'VerificationMode',
    'at_least',
    'at_least_once',
    'at_most',
    'never',
    'times',
    'ANY_ARGS',
    'ArgumentsMatcher',
    'Matcher',
    'all_of',
    'any_',
    'any_float',
    'any_int',
    'any_number',
    'any_of',
    'any_of_type',
    'any_string',
    'contains',
    'eq',
    'is_none',
    'not_',
    'not_none',
    'predicate',
    'same',
    'StubRegistry',
    'StubRule',
    'StubRuleBuilder',
    'StaticPatcher',
]
