"""
Unit tests for route patterns, scoring and invocation.
"""

import pytest

from wirehttp.http.exceptions import RouteError
from wirehttp.http.request import HTTPRequest
from wirehttp.http.response import EXCEPTION_ERROR, HTTPResponse
from wirehttp.http.route import Route, SegmentKind, best_route


def noop(request, response):
    pass


class TestRouteSegments:

    def test_segment_kinds(self):
        route = Route("/files/{name}/{*}", noop)

        kinds = [segment.kind for segment in route.segments]
        assert kinds == [SegmentKind.LITERAL, SegmentKind.DYNAMIC, SegmentKind.VARIADIC]
        assert route.segments[1].text == "name"
        assert route.is_variadic
        assert route.fixed_length == 2

    def test_root_pattern_has_no_segments(self):
        route = Route("/", noop)

        assert route.segments == []
        assert not route.is_variadic

    def test_variadic_must_be_last(self):
        with pytest.raises(RouteError):
            Route("/files/{*}/edit", noop)

    def test_route_error_is_value_error(self):
        with pytest.raises(ValueError):
            Route("/{*}/x", noop)

    def test_braces_with_bad_name_are_literal(self):
        route = Route("/{not-a-name}", noop)
        assert route.segments[0].kind is SegmentKind.LITERAL


class TestScoring:

    def test_literal_and_dynamic_scores(self):
        segments = ["hello", "Ada"]

        assert Route("/hello/{name}", noop).how_correct(segments) == 4
        assert Route("/{greeting}/{name}", noop).how_correct(segments) == 3
        assert Route("/hello/Ada", noop).how_correct(segments) == 5

    def test_literal_outranks_dynamic_at_same_position(self):
        segments = ["users", "me"]

        literal = Route("/users/me", noop).how_correct(segments)
        dynamic = Route("/users/{id}", noop).how_correct(segments)

        assert literal > dynamic

    def test_length_mismatch_scores_zero(self):
        route = Route("/hello/{name}", noop)

        assert route.how_correct(["hello"]) == 0
        assert route.how_correct(["hello", "Ada", "Lovelace"]) == 0

    def test_literal_mismatch_scores_zero(self):
        assert Route("/bar/{y}", noop).how_correct(["foo", "x"]) == 0

    def test_variadic_scores(self):
        route = Route("/hello/{*}", noop)

        assert route.how_correct(["hello"]) == 3
        assert route.how_correct(["hello", "a"]) == 3
        assert route.how_correct(["hello", "a", "b", "c"]) == 3

    def test_variadic_needs_fixed_prefix(self):
        route = Route("/files/{dir}/{*}", noop)

        assert route.how_correct(["files"]) == 0
        assert route.how_correct(["files", "css"]) == 4

    def test_fixed_arity_beats_variadic(self):
        segments = ["hello", "Ada", "Lovelace"]

        fixed = Route("/hello/{first}/{last}", noop)
        variadic = Route("/hello/{*}", noop)

        assert fixed.how_correct(segments) == 5
        assert variadic.how_correct(segments) == 3
        assert best_route([variadic, fixed], segments) is fixed

    def test_matches_perfectly(self):
        assert Route("/hello", noop).matches_perfectly(["hello"])
        assert Route("/", noop).matches_perfectly([])
        assert not Route("/hello/{name}", noop).matches_perfectly(["hello", "Ada"])
        assert Route("/hello/{name}", noop).matches_perfectly(["hello", "{name}"])


class TestBestRoute:

    def test_exact_match_short_circuits_scoring(self):
        """/hello and /hello/{*} both score 3 for ["hello"]; the exact one
        wins although the tie would otherwise keep the first registered."""
        plain = Route("/hello", noop)
        variadic = Route("/hello/{*}", noop)

        assert plain.how_correct(["hello"]) == variadic.how_correct(["hello"])
        assert best_route([variadic, plain], ["hello"]) is plain

    def test_exact_match_stops_scan(self):
        calls = []

        class Spy(Route):
            def how_correct(self, segments):
                calls.append(self.path)
                return super().how_correct(segments)

        exact = Spy("/a/b", noop)
        later = Spy("/a/{x}", noop)

        assert best_route([exact, later], ["a", "b"]) is exact
        assert calls == []

    def test_ties_keep_first(self):
        first = Route("/hello/{name}", noop)
        second = Route("/hello/{who}", noop)

        assert best_route([first, second], ["hello", "Ada"]) is first

    def test_no_positive_score(self):
        assert best_route([Route("/bar/{y}", noop)], ["foo", "x"]) is None
        assert best_route([], ["foo"]) is None


class TestInvoke:

    def test_binds_dynamic_segments(self):
        seen = {}

        def behavior(request, response):
            seen.update(request.params)

        request = HTTPRequest(full_path="/hello/Ada/Lovelace?x=1")
        Route("/hello/{first}/{last}", behavior).invoke(request, HTTPResponse(request))

        assert seen == {"x": "1", "first": "Ada", "last": "Lovelace"}

    @pytest.mark.parametrize("path, expected", [
        ("/files", []),
        ("/files/a", ["a"]),
        ("/files/a/b/c.txt", ["a", "b", "c.txt"]),
    ])
    def test_collects_varargs_in_order(self, path, expected):
        request = HTTPRequest(full_path=path)
        Route("/files/{*}", noop).invoke(request, HTTPResponse(request))

        assert request.varargs == expected

    def test_dynamic_values_are_not_coerced(self):
        request = HTTPRequest(full_path="/items/007")
        Route("/items/{id}", noop).invoke(request, HTTPResponse(request))

        assert request.params["id"] == "007"

    def test_behavior_error_becomes_500(self):
        def behavior(request, response):
            raise RuntimeError("database on fire")

        request = HTTPRequest(full_path="/x")
        response = HTTPResponse(request)
        Route("/x", behavior).invoke(request, response)

        assert response.code == 500
        assert response.body == b"database on fire"
        assert response.mime_type == "text/plain"

    def test_behavior_error_without_message(self):
        def behavior(request, response):
            raise RuntimeError()

        request = HTTPRequest(full_path="/x")
        response = HTTPResponse(request)
        Route("/x", behavior).invoke(request, response)

        assert response.code == 500
        assert response.body == EXCEPTION_ERROR.encode()
