"""
=============================================================================
HTTP PROTOCOL IMPLEMENTATION
=============================================================================

Turns bytes from a connection into an HTTPRequest, finds the behavior
that should answer it, and turns the HTTPResponse it fills back into bytes.

=============================================================================
MODULE COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py       RequestParser → HTTPRequest                        │
    │                  request line, headers, Content-Length body,        │
    │                  query and POST form params                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │ router.py        Router: first path segment → Handler               │
    │                  default Handler, error Handler (501)               │
    ├─────────────────────────────────────────────────────────────────────┤
    │ handler.py       Handler: method → [Route, ...], best-fit choice    │
    ├─────────────────────────────────────────────────────────────────────┤
    │ route.py         Route: "/hello/{name}/{*}" patterns, scoring,      │
    │                  parameter binding, behavior invocation             │
    ├─────────────────────────────────────────────────────────────────────┤
    │ response.py      HTTPResponse: status, headers, body; written once  │
    ├─────────────────────────────────────────────────────────────────────┤
    │ status_codes.py  code → reason phrase, status line                  │
    │ mime_types.py    extension → MIME type                              │
    │ exceptions.py    HTTPException and friends                          │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .exceptions import (
    HTTPException,
    HTTPParseError,
    IncompleteBody,
    MalformedHeader,
    MalformedRequestLine,
    RouteError,
    TransportError,
)
from .request import HTTPRequest, RequestParser, parse_request
from .response import (
    EXCEPTION_ERROR,
    MALFORMED_INPUT_ERROR,
    NOT_A_METHOD_ERROR,
    STATUS_GOOD,
    HTTPResponse,
)
from .route import Route
from .handler import Handler
from .router import Router
from .status_codes import HTTPStatus, reason_phrase, status_line
from .mime_types import get_content_type, get_mime_type

__all__ = [
    # Errors
    "HTTPException",
    "HTTPParseError",
    "MalformedRequestLine",
    "MalformedHeader",
    "IncompleteBody",
    "TransportError",
    "RouteError",

    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "parse_request",

    # Responses
    "HTTPResponse",
    "EXCEPTION_ERROR",
    "NOT_A_METHOD_ERROR",
    "MALFORMED_INPUT_ERROR",
    "STATUS_GOOD",

    # Routing
    "Route",
    "Handler",
    "Router",

    # Status codes
    "HTTPStatus",
    "reason_phrase",
    "status_line",

    # MIME types
    "get_mime_type",
    "get_content_type",
]
