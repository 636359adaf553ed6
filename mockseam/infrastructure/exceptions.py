"""
Exception hierarchy for mockseam.

Every failure raised by the library derives from MockseamException so test
code can catch library errors separately from the exceptions a stub was
programmed to raise.
"""

from typing import Any, Dict, List, Optional


class MockseamException(Exception):
    """Base class for all mockseam errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(MockseamException):
    """Raised for a target that cannot be intercepted or for invalid settings."""

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        validation_errors: Optional[List[Any]] = None,
        target: Any = None
    ):
        context: Dict[str, Any] = {}
        if config_path is not None:
            context["config_path"] = config_path
        if validation_errors:
            context["validation_errors"] = list(validation_errors)
        if target is not None:
            context["target"] = repr(target)
        super().__init__(message, "CONFIGURATION_ERROR", context)
        self.config_path = config_path
        self.validation_errors = list(validation_errors or [])
        self.target = target


class TypeMismatchError(MockseamException):
    """Raised when a configured return value does not fit the declared return type."""

    def __init__(self, method: str, expected: Any, value: Any):
        message = (
            f"{method} is declared to return {_type_name(expected)} "
            f"but was stubbed with {type(value).__name__} value {value!r}"
        )
        super().__init__(message, "TYPE_MISMATCH", {"method": method})
        self.method = method
        self.expected = expected
        self.value = value


class UnstubbedCallError(MockseamException):
    """Raised when a strict mock receives a call that no rule matches."""

    def __init__(self, handle_name: str, method: str, args: tuple, kwargs: Dict[str, Any]):
        rendered = _render_call(method, args, kwargs)
        super().__init__(
            f"Unstubbed call on strict mock {handle_name}: {rendered}",
            "UNSTUBBED_CALL",
            {"mock": handle_name, "call": rendered}
        )
        self.handle_name = handle_name
        self.method = method
        self.call_args = args
        self.call_kwargs = kwargs


class VerificationError(MockseamException, AssertionError):
    """Raised when recorded invocations differ from what a test expected."""

    def __init__(self, message: str, expected: Any = None, actual: Optional[int] = None):
        super().__init__(message, "VERIFICATION_FAILED", {"expected": str(expected), "actual": actual})
        self.expected = expected
        self.actual = actual


def _type_name(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or str(annotation).replace("typing.", "")


def _render_call(method: str, args: tuple, kwargs: Dict[str, Any]) -> str:
    parts = [repr(a) for a in args]
    parts.extend(f"{k}={v!r}" for k, v in kwargs.items())
    return f"{method}({', '.join(parts)})"
