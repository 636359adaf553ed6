"""
Seams - explicit indirections that tests can intercept.
"""

from .construction import construct, install_interceptor, is_intercepted
from .platform import Platform

__all__ = [
    "construct",
    "install_interceptor",
    "is_intercepted",
    "Platform",
]
