"""
mockseam - test doubles with static, constructor and capability seams.

    from mockseam import StubRegistry, any_string, times

    with StubRegistry() as stubs:
        dictionary = stubs.mock(Dictionary)
        stubs.when(dictionary).get_meaning(any_string()).then_return("meaning")
        ...
        stubs.verify(dictionary, times(1)).get_meaning("word")

Inside pytest the ``stubs`` fixture provides a registry that is torn down
after every test.
"""

from .configuration import MockseamSettings, load_settings
from .core import (
    ANY_ARGS, ArgumentsMatcher, Invocation, Matcher, MockHandle, MockMode, StubRegistry,
    all_of, any_, any_float, any_int, any_number, any_of, any_of_type, any_string,
    at_least, at_least_once, at_most, contains, eq, is_mock, is_none, never, not_,
    not_none, predicate, same, times
)
from .infrastructure import (
    ConfigurationError, MockseamException, SeamContainer, TypeMismatchError,
    UnstubbedCallError, VerificationError, get_container, inject
)
from .seams import Platform, construct

__version__ = "0.1.0"

__all__ = [
    'MockseamSettings',
    'load_settings',
    'ANY_ARGS',
    'ArgumentsMatcher',
    'Invocation',
    'Matcher',
    'MockHandle',
    'MockMode',
    'StubRegistry',
    'all_of',
    'any_',
    'any_float',
    'any_int',
    'any_number',
    'any_of',
    'any_of_type',
    'any_string',
    'at_least',
    'at_least_once',
    'at_most',
    'contains',
    'eq',
    'is_mock',
    'is_none',
    'never',
    'not_',
    'not_none',
    'predicate',
    'same',
    'times',
    'ConfigurationError',
    'MockseamException',
    'SeamContainer',
    'TypeMismatchError',
    'UnstubbedCallError',
    'VerificationError',
    'get_container',
    'inject',
    'Platform',
    'construct',
]
