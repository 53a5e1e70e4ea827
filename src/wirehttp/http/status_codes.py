"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The fixed code -> reason phrase table used to write status lines.

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── reason phrase (from _REASON_PHRASES)
              └───────── status code

Codes missing from the table are still legal on the wire; the status
line then carries just the number:

    status_line(299)  ->  "HTTP/1.1 299"

=============================================================================
"""

from enum import IntEnum
from typing import Optional


PROTOCOL = "HTTP/1.1"


class HTTPStatus(IntEnum):
    """
    Status codes the server itself produces.

    Route behaviors may set any integer code on a response; this enum only
    names the ones the engine uses so call sites read well.
    """

    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    FORBIDDEN = 403
    NOT_FOUND = 404
    PAYLOAD_TOO_LARGE = 413
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501

    @property
    def phrase(self) -> str:
        """Reason phrase for this code."""
        return _REASON_PHRASES[int(self)]


# =============================================================================
# REASON PHRASES
# =============================================================================

_REASON_PHRASES = {
    # 1xx Informational
    100: "Continue",
    101: "Switching Protocols",

    # 2xx Success
    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non-Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",

    # 3xx Redirection
    300: "Multiple Choices",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    307: "Temporary Redirect",

    # 4xx Client Errors
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Request Entity Too Large",
    414: "Request-URI Too Long",
    415: "Unsupported Media Type",
    416: "Request Range Not Satisfiable",
    417: "Expectation Failed",
    418: "I'm a teapot",
    420: "Enhance Your Calm",

    # 5xx Server Errors
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
}


def reason_phrase(code: int) -> Optional[str]:
    """Return the reason phrase for `code`, or None if it isn't in the table."""
    return _REASON_PHRASES.get(int(code))


def status_line(code: int) -> str:
    """
    Format the first line of a response.

    Args:
        code: Any integer status code.

    Returns:
        "HTTP/1.1 200 OK" for known codes, "HTTP/1.1 299" otherwise.
    """
    phrase = reason_phrase(code)
    if phrase is None:
        return f"{PROTOCOL} {int(code)}"
    return f"{PROTOCOL} {int(code)} {phrase}"
