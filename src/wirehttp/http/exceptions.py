"""
=============================================================================
HTTP EXCEPTIONS
=============================================================================

Every error the engine raises descends from HTTPException. The tree
mirrors how a failure is handled further up:

    HTTPException
    ├── HTTPParseError          bytes on the wire are not valid HTTP
    │   ├── MalformedRequestLine
    │   ├── MalformedHeader
    │   └── IncompleteBody
    ├── TransportError          the socket itself is gone
    └── RouteError              a route pattern is invalid (setup time)

Routing misses are NOT exceptions. A request that matches nothing still
gets a well-formed 501 from the error handler.

=============================================================================
"""


class HTTPException(Exception):
    """Base class for all wirehttp errors."""


class HTTPParseError(HTTPException):
    """
    Raised when request parsing fails.

    Carries the status code to answer with when a response can still be
    written. Protocol errors default to 500, which is what the client
    sees for anything the parser rejects.
    """

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class MalformedRequestLine(HTTPParseError):
    """The request line is missing or is not METHOD SP PATH SP PROTOCOL."""


class MalformedHeader(HTTPParseError):
    """A header line has no ": " separator."""


class IncompleteBody(HTTPParseError):
    """The body is shorter than Content-Length, or Content-Length is bad."""


class TransportError(HTTPException):
    """The connection was closed or broke while reading or writing."""


class RouteError(HTTPException, ValueError):
    """A route pattern could not be compiled."""
