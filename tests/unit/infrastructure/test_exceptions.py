"""
Tests for the exception hierarchy.
"""

import pytest

from mockseam.infrastructure.exceptions import (
    ConfigurationError, MockseamException, TypeMismatchError,
    UnstubbedCallError, VerificationError
)


class TestExceptions:
    """Test exception payloads and rendering."""

    def test_base_exception_defaults(self):
        error = MockseamException("boom")
        assert str(error) == "boom"
        assert error.error_code == "MOCKSEAMEXCEPTION"
        assert error.to_dict() == {"error_code": "MOCKSEAMEXCEPTION", "message": "boom", "context": {}}

    def test_configuration_error_context(self):
        error = ConfigurationError("bad", config_path="a.yaml", validation_errors=["x"], target=str)
        assert error.context == {"config_path": "a.yaml", "validation_errors": ["x"], "target": "<class 'str'>"}
        assert error.validation_errors == ["x"]

    def test_type_mismatch_message(self):
        error = TypeMismatchError("words.get_meaning", str, 42)
        assert str(error) == "words.get_meaning is declared to return str but was stubbed with int value 42"

    def test_unstubbed_call_keeps_exception_args(self):
        error = UnstubbedCallError("words", "add", ("a",), {"meaning": "b"})
        assert str(error) == "Unstubbed call on strict mock words: add('a', meaning='b')"
        assert error.call_args == ("a",)
        assert error.call_kwargs == {"meaning": "b"}

    def test_verification_error_is_assertion_error(self):
        with pytest.raises(AssertionError):
            raise VerificationError("wanted 1 but was 0", expected="times(1)", actual=0)

    @pytest.mark.parametrize("error", [
        ConfigurationError("x"),
        TypeMismatchError("m", int, "s"),
        UnstubbedCallError("h", "m", (), {}),
        VerificationError("x"),
    ])
    def test_all_derive_from_base(self, error):
        assert isinstance(error, MockseamException)
