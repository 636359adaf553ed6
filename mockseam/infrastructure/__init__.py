"""
mockseam Infrastructure Layer

Exceptions, the capability container and logging shared by the core.
"""

from .exceptions import (
    MockseamException, ConfigurationError, TypeMismatchError,
    UnstubbedCallError, VerificationError
)
from .di import SeamContainer, get_container, inject

__all__ = [
    'MockseamException',
    'ConfigurationError',
    'TypeMismatchError',
    'UnstubbedCallError',
    'VerificationError',
    'SeamContainer',
    'get_container',
    'inject',
]
