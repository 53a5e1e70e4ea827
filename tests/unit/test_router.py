"""
Unit tests for the first-segment Router and the fallback handlers.
"""

from wirehttp.handlers import ErrorHandler, ERROR_MESSAGES
from wirehttp.http.handler import Handler
from wirehttp.http.request import HTTPRequest
from wirehttp.http.router import Router


def make_request(method: str, path: str) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, full_path=path)


class TestRouter:
    """Tests for Router class."""

    def test_named_handler(self):
        hello = Handler()
        router = Router()
        router.add_handler("hello", hello)

        request = make_request("GET", "/hello/Ada")

        assert router.route("hello", request) is hello
        assert request.path == "/Ada"
        assert request.segments == ["hello", "Ada"]

    def test_segment_slashes_are_trimmed(self):
        hello = Handler()
        router = Router()
        router.add_handler("/hello/", hello)

        assert router.get_handler("hello") is hello
        assert router.route("hello", make_request("GET", "/hello")) is hello

    def test_default_handler_keeps_full_path(self):
        default = Handler()
        router = Router(default_handler=default)

        request = make_request("GET", "/css/site.css")

        assert router.route("css", request) is default
        assert request.path == "/css/site.css"

    def test_error_handler_when_nothing_matches(self):
        router = Router()
        handler = router.route("nowhere", make_request("GET", "/nowhere"))

        assert handler is router.error_handler
        assert isinstance(handler, ErrorHandler)
        assert handler.code == 501

    def test_set_handlers(self):
        router = Router()
        default = Handler()
        error = ErrorHandler(503)

        router.set_default_handler(default)
        router.set_error_handler(error)

        assert router.route("x", make_request("GET", "/x")) is default

        router.set_default_handler(None)
        assert router.route("x", make_request("GET", "/x")) is error

    def test_root_path_uses_empty_segment(self):
        root = Handler()
        router = Router()
        router.add_handler("", root)

        request = make_request("GET", "/")
        assert router.route(request.first_segment, request) is root


class TestErrorHandler:

    def test_sends_code_and_canned_message(self, response_for):
        response = response_for()
        ErrorHandler(501).handle(make_request("GET", "/x"), response)

        assert response.code == 501
        assert response.body.decode() in ERROR_MESSAGES
        assert response.mime_type == "text/plain"

    def test_defaults_to_500(self, response_for):
        response = response_for()
        ErrorHandler().handle(make_request("GET", "/x"), response)

        assert response.code == 500

    def test_custom_messages(self, response_for):
        response = response_for()
        ErrorHandler(502, messages=["upstream sulking"]).handle(make_request("GET", "/"), response)

        assert response.body == b"upstream sulking"
