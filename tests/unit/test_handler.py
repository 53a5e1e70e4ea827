"""
Unit tests for Handler dispatch.
"""

from wirehttp.handlers import MessageHandler
from wirehttp.http.handler import Handler
from wirehttp.http.request import HTTPRequest
from wirehttp.http.response import NOT_A_METHOD_ERROR
from wirehttp.http.route import Route


def make_request(method: str, path: str) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, full_path=path)


def make_hello() -> Handler:
    hello = Handler()

    @hello.get("/hello")
    def plain(request, response):
        response.set_body("plain")

    @hello.get("/hello/{name}")
    def one(request, response):
        response.set_body(f"one:{request.param('name')}")

    @hello.get("/hello/{first}/{last}")
    def two(request, response):
        response.set_body(f"two:{request.param('first')},{request.param('last')}")

    @hello.get("/hello/{*}")
    def many(request, response):
        response.set_body("many:" + "/".join(request.varargs))

    return hello


class TestRegistration:

    def test_decorators_register_by_method(self):
        handler = Handler()

        @handler.get("/a")
        def a(request, response):
            pass

        @handler.post("/a")
        @handler.put("/a")
        def b(request, response):
            pass

        @handler.delete("/a/{id}")
        def c(request, response):
            pass

        @handler.head("/a")
        def d(request, response):
            pass

        assert sorted(handler.methods()) == ["DELETE", "GET", "HEAD", "POST", "PUT"]
        assert [r.path for r in handler.routes_for("get")] == ["/a"]
        assert handler.routes_for("PUT")[0].behavior is b
        assert handler.routes_for("PATCH") == []

    def test_decorator_returns_behavior_unchanged(self):
        handler = Handler()

        def behavior(request, response):
            pass

        assert handler.get("/x")(behavior) is behavior

    def test_add_route(self):
        handler = Handler()
        route = handler.add_route("post", Route("/x", lambda req, resp: None))

        assert handler.routes_for("POST") == [route]


class TestDispatch:

    def test_dynamic_segment_binds_name(self, response_for):
        """GET /hello/Ada under /hello/{name} binds name=Ada."""
        request = make_request("GET", "/hello/Ada")
        response = response_for(request)

        make_hello().handle(request, response)

        assert response.body == b"one:Ada"
        assert request.params["name"] == "Ada"

    def test_exact_match_wins(self, response_for):
        request = make_request("GET", "/hello")
        response = response_for(request)

        make_hello().handle(request, response)

        assert response.body == b"plain"

    def test_two_parameters_beat_variadic(self, response_for):
        request = make_request("GET", "/hello/Ada/Lovelace")
        response = response_for(request)

        make_hello().handle(request, response)

        assert response.body == b"two:Ada,Lovelace"

    def test_variadic_when_no_fixed_arity_fits(self, response_for):
        request = make_request("GET", "/hello/a/b/c")
        response = response_for(request)

        make_hello().handle(request, response)

        assert response.body == b"many:a/b/c"
        assert request.varargs == ["a", "b", "c"]

    def test_no_routes_for_method(self, response_for):
        request = make_request("PUT", "/hello/Ada")
        response = response_for(request)

        make_hello().handle(request, response)

        assert response.code == 501
        assert response.body == b"No PUT routes exist."

    def test_no_route_fits(self, response_for):
        handler = Handler()

        @handler.get("/bar/{y}")
        def bar(request, response):
            response.set_body("bar")

        request = make_request("GET", "/foo/x")
        response = response_for(request)
        handler.handle(request, response)

        assert response.code == 501
        assert response.body == NOT_A_METHOD_ERROR.encode()

    def test_unknown_method_gets_501(self, response_for):
        request = make_request("BREW", "/hello")
        response = response_for(request)

        make_hello().handle(request, response)

        assert response.code == 501

    def test_behavior_error_is_contained(self, response_for):
        handler = Handler()

        @handler.get("/boom")
        def boom(request, response):
            raise KeyError("missing")

        request = make_request("GET", "/boom")
        response = response_for(request)
        handler.handle(request, response)

        assert response.code == 500

    def test_find_route(self):
        hello = make_hello()

        route = hello.find_route(make_request("GET", "/hello/Ada"))
        assert route.path == "/hello/{name}"
        assert hello.find_route(make_request("POST", "/hello")) is None


class TestMessageHandler:

    def test_message_only(self, response_for):
        response = response_for()
        MessageHandler("pong").handle(make_request("GET", "/ping"), response)

        assert response.code == 200
        assert response.body == b"pong"
        assert response.mime_type == "text/plain"

    def test_code_and_message(self, response_for):
        response = response_for()
        MessageHandler(410, "gone").handle(make_request("DELETE", "/old/thing"), response)

        assert response.code == 410
        assert response.body == b"gone"
