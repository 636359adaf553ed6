"""
End-to-end seam tests against SystemClassUser, which reaches for platform
services, static functions and constructors the way legacy code does.
"""

import io
import subprocess
import time
import urllib.request
import uuid
from http.client import HTTPResponse

import pytest

from mockseam import Platform, any_number, any_string, times
from mockseam.infrastructure.exceptions import ConfigurationError

from tests.support.system_user import SystemClassUser


class TestStaticPlatformMocking:
    """Mocking class-level platform services."""

    def test_mocking_url_encode(self, stubs):
        stubs.mock_static(Platform)
        stubs.when(Platform).url_encode("string", "utf8").then_return("something")

        assert SystemClassUser().perform_encode() == "something"

    def test_mocking_command_execution(self, stubs):
        stubs.mock_static(Platform)
        process = stubs.mock(subprocess.Popen)
        stubs.when(Platform).exec("command").then_return(process)

        assert SystemClassUser().execute_command() is process

    def test_mocking_system_property(self, stubs):
        stubs.mock_static(Platform)
        stubs.when(Platform).get_property("property").then_return("my property")

        assert SystemClassUser().get_system_property() == "my property"

    def test_partial_mocking_of_void_workflow(self, stubs):
        stubs.spy_static(Platform)
        stubs.do_return(2).when(Platform).nano_time()

        SystemClassUser().do_more_complicated_stuff()

        assert Platform.get_property("nanoTime") == "2"

    def test_partial_mocking_for_non_void_methods(self, stubs):
        stubs.spy_static(Platform)
        stubs.do_return("my property").when(Platform).get_property("property")

        SystemClassUser().copy_property("to", "property")

        assert Platform.get_property("to") == "my property"

    def test_mocking_shuffle_and_verifying_calls(self, stubs):
        items = []
        stubs.mock_static(Platform)

        SystemClassUser().shuffle_collection(items)

        stubs.verify_static(Platform, times(2)).shuffle(items)

    def test_mocking_format(self, stubs):
        stubs.mock_static(Platform)
        stubs.when(Platform).format("string", "args").then_return("returnValue")

        assert SystemClassUser().format("string", "args") == "returnValue"

    def test_mocking_immutable_builtin_is_rejected(self, stubs):
        with pytest.raises(ConfigurationError):
            stubs.mock_static(str)

    def test_mocking_static_void_method(self, stubs):
        stubs.mock_static(Platform)
        stubs.do_nothing().when(Platform).sleep(any_number())

        start = time.monotonic()
        SystemClassUser().thread_sleep()

        assert time.monotonic() - start < 5
        stubs.verify(Platform).sleep(5)

    def test_mocking_random_uuid(self, stubs):
        token = stubs.mock(uuid.UUID)
        stubs.mock_static(Platform)
        stubs.given(Platform).random_uuid().will_return(token)
        stubs.given(token).__str__().will_return("00000000-0000-0000-0000-000000000000")

        assert SystemClassUser().generate_perishable_token() == "0" * 32


class TestInstanceMocking:
    """Mocking ordinary collaborators."""

    def test_mocking_url_opener(self, stubs):
        opener = stubs.mock(urllib.request.OpenerDirector)
        response = stubs.mock(HTTPResponse)
        stubs.when(opener).open("http://example.com").then_return(response)

        assert opener.open("http://example.com") is response

    def test_answer_raising_from_dunder(self, stubs):
        builder = stubs.mock(list)

        def explode(invocation):
            raise RuntimeError("Can't really happen")

        stubs.when(builder).__len__().then_answer(explode)

        with pytest.raises(RuntimeError, match="Can't really happen"):
            SystemClassUser().length_of(builder)


class TestConstructorMocking:
    """Mocking object construction."""

    def test_mocking_new_request(self, stubs):
        request = stubs.mock(urllib.request.Request)
        stubs.when_new(urllib.request.Request).with_arguments("some_url").then_return(request)

        assert SystemClassUser().new_url("some_url") is request

    def test_mocking_new_string_builder(self, stubs):
        buffer = stubs.mock(io.StringIO)
        stubs.when_new(io.StringIO).with_no_arguments().then_return(buffer)
        stubs.when(buffer).__str__().then_return("My toString")

        actual = SystemClassUser().new_string_builder()

        assert actual is buffer
        assert str(actual) == "My toString"

    def test_unmatched_construction_builds_real_object(self, stubs):
        stubs.when_new(urllib.request.Request).with_arguments(any_string(), data=b"x").then_raise(ValueError)

        request = SystemClassUser().new_url("http://example.com")

        assert isinstance(request, urllib.request.Request)
        assert request.full_url == "http://example.com"


def test_platform_restored_after_each_test():
    assert Platform.url_encode("a b") == "a+b"
    assert not hasattr(Platform.url_encode, "__wrapped__")
