"""
=============================================================================
HANDLER
=============================================================================

A Handler owns the routes for one area of the site (usually one first
path segment) and groups them by HTTP method:

    ┌──────────────────────────────────────────────────────────────────┐
    │  Handler "hello"                                                 │
    │                                                                  │
    │    GET  ─► [ /hello, /hello/{name}, /hello/{first}/{last} ]      │
    │    POST ─► [ /hello/{name} ]                                     │
    │                                                                  │
    └──────────────────────────────────────────────────────────────────┘

Dispatch for one request:

    1. No routes for request.method           → 501 "No PUT routes exist."
    2. A pattern equals the segments verbatim → that route, no scoring
    3. Highest positive score (ties: first)   → that route
    4. Nothing scored                          → 501 "No known method"

=============================================================================
DECORATOR-BASED API
=============================================================================

    hello = Handler()

    @hello.get("/hello/{name}")
    def say_hello(request, response):
        response.set_body(f"Hello {request.param('name')}!")

    router.add_handler("hello", hello)

=============================================================================
"""

from typing import Callable, Dict, List, Optional
import logging

from .request import DELETE, GET, HEAD, POST, PUT, HTTPRequest
from .response import NOT_A_METHOD_ERROR, HTTPResponse
from .route import Behavior, Route, best_route
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class Handler:
    """
    Routes grouped by method, with best-fit selection among them.

    Routes are read-only once the server starts accepting connections, so
    one Handler is shared by every connection thread without locking.
    """

    def __init__(self):
        self._routes: Dict[str, List[Route]] = {}

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(self, method: str, route: Route) -> Route:
        """
        Register `route` for `method`.

        Args:
            method: HTTP method name; stored upper-cased.
            route: A compiled Route.

        Returns:
            The same route.
        """
        self._routes.setdefault(method.upper(), []).append(route)
        return route

    def route(self, path: str, method: str = GET) -> Callable[[Behavior], Behavior]:
        """
        Decorator registering a behavior under `path` for `method`.

        The behavior is returned unchanged, so decorators can be stacked
        to register one behavior for several methods.
        """
        def decorator(behavior: Behavior) -> Behavior:
            self.add_route(method, Route(path, behavior))
            return behavior
        return decorator

    def get(self, path: str) -> Callable[[Behavior], Behavior]:
        return self.route(path, GET)

    def post(self, path: str) -> Callable[[Behavior], Behavior]:
        return self.route(path, POST)

    def put(self, path: str) -> Callable[[Behavior], Behavior]:
        return self.route(path, PUT)

    def delete(self, path: str) -> Callable[[Behavior], Behavior]:
        return self.route(path, DELETE)

    def head(self, path: str) -> Callable[[Behavior], Behavior]:
        return self.route(path, HEAD)

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def routes_for(self, method: str) -> List[Route]:
        return list(self._routes.get(method.upper(), []))

    def methods(self) -> List[str]:
        return list(self._routes)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def find_route(self, request: HTTPRequest) -> Optional[Route]:
        """Best route for the request among those of its method, if any."""
        return best_route(self._routes.get(request.method, []), request.segments)

    def handle(self, request: HTTPRequest, response: HTTPResponse) -> None:
        """
        Pick a route for the request and invoke it.

        Misses are answered with 501 on `response`; nothing is raised.
        """
        routes = self._routes.get(request.method)
        if not routes:
            response.message(
                HTTPStatus.NOT_IMPLEMENTED,
                f"No {request.method} routes exist.",
            )
            return

        route = best_route(routes, request.segments)
        if route is None:
            logger.debug(f"No {request.method} route fits {request.full_path}")
            response.message(HTTPStatus.NOT_IMPLEMENTED, NOT_A_METHOD_ERROR)
            return

        route.invoke(request, response)
