"""
Platform Capability

Process-level services (properties, clocks, processes, randomness, URL and
text helpers) gathered behind one class. Code under test resolves it with
``inject(Platform)`` or calls its static methods directly; either way a test
can replace it through ``StubRegistry.override``, ``mock_static`` or
``spy_static`` without touching the real interpreter state.
"""

import random
import shlex
import subprocess
import time
import urllib.parse
import urllib.request
import uuid
from typing import Any, Dict, MutableSequence, Optional, Sequence, Union

from ..infrastructure.di import Injectable

_properties: Dict[str, str] = {}


class Platform(Injectable):
    """Static facade over process-wide services."""

    @staticmethod
    def get_property(name: str, default: Optional[str] = None) -> Optional[str]:
        return _properties.get(name, default)

    @staticmethod
    def set_property(name: str, value: str) -> Optional[str]:
        """Set a process-wide property and return the previous value."""
        previous = _properties.get(name)
        _properties[name] = value
        return previous

    @staticmethod
    def clear_property(name: str) -> Optional[str]:
        return _properties.pop(name, None)

    @staticmethod
    def nano_time() -> int:
        """Monotonic clock in nanoseconds; only differences are meaningful."""
        return time.monotonic_ns()

    @staticmethod
    def current_time_millis() -> int:
        return time.time_ns() // 1_000_000

    @staticmethod
    def sleep(seconds: float) -> None:
        time.sleep(seconds)

    @staticmethod
    def exec(command: Union[str, Sequence[str]]) -> subprocess.Popen:
        args = shlex.split(command) if isinstance(command, str) else list(command)
        return subprocess.Popen(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE)

    @staticmethod
    def url_encode(value: str, encoding: str = "utf-8") -> str:
        return urllib.parse.quote_plus(value, encoding=encoding)

    @staticmethod
    def format(template: str, *args: Any) -> str:
        """printf-style formatting: ``%s``, ``%d`` and friends, as in ``template % args``."""
        return template % args

    @staticmethod
    def random_uuid() -> uuid.UUID:
        return uuid.uuid4()

    @staticmethod
    def shuffle(items: MutableSequence[Any]) -> None:
        random.shuffle(items)

    @staticmethod
    def open_url(url: str, timeout: float = 10.0) -> Any:
        return urllib.request.urlopen(url, timeout=timeout)
