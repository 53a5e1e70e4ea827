"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Reads an HTTP/1.1 request off a binary stream (normally the socket's
read file) and turns it into an HTTPRequest.

=============================================================================
WHAT GETS PARSED
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   \r\n                               ← leading blank lines skipped  │
    │   POST /search/books?q=cats HTTP/1.1 ← request line (3 tokens)      │
    │   Host: localhost:8000               ← "Name: value" headers        │
    │   Content-Length: 13                                                │
    │   \r\n                               ← end of headers               │
    │   page=2&sort=a                      ← body (POST form data)        │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

    method    = "POST"
    full_path = "/search/books?q=cats"
    segments  = ["search", "books"]
    params    = {"q": "cats", "page": "2", "sort": "a"}

The query string and the POST body feed the same `params` mapping. Route
matching later adds the values bound by {name} segments to it as well.

=============================================================================
FRAMING RULES
=============================================================================

1. The body is read ONLY when Content-Length is present, and exactly that
   many bytes are read. No chunked encoding, no keep-alive.

2. Header lines must contain ": ". Anything after the first ": " is the
   value, including further ": " sequences.

3. Empty path segments are dropped: "//a///b/" → ["a", "b"].

=============================================================================
"""

from dataclasses import dataclass, field
from io import BytesIO
from typing import TYPE_CHECKING, BinaryIO, Dict, Iterable, List, Optional
from urllib.parse import unquote_plus
import logging

from .exceptions import (
    HTTPParseError,
    IncompleteBody,
    MalformedHeader,
    MalformedRequestLine,
    TransportError,
)

if TYPE_CHECKING:
    from .handler import Handler
    from .router import Router


logger = logging.getLogger(__name__)


# Method names the engine knows about. Other tokens are still accepted;
# they simply find no routes in a Handler and get a 501.
GET = "GET"
POST = "POST"
HEAD = "HEAD"
DELETE = "DELETE"
PUT = "PUT"


def split_path(full_path: str) -> tuple[List[str], str]:
    """
    Split a request target into path segments and a query string.

    Args:
        full_path: The target from the request line ("/a/b?x=1").

    Returns:
        Tuple of (segments, query). Segments never contain "".
    """
    path, _, query = full_path.partition("?")
    segments = [segment for segment in path.split("/") if segment]
    return segments, query


def parse_input_data(items: Iterable[str], keep_bare: bool = True) -> Dict[str, Optional[str]]:
    """
    Turn "key=value" strings into a dict, URL-decoding the values.

    Args:
        items: Tokens as produced by splitting on "&".
        keep_bare: If True a token without "=" maps to None; if False it
                   is skipped (used for POST bodies).

    Returns:
        Mapping of key -> decoded value (or None).
    """
    out: Dict[str, Optional[str]] = {}
    for item in items:
        if not item:
            continue

        if "=" not in item:
            if keep_bare:
                out[item] = None
            continue

        key, _, value = item.partition("=")
        out[key] = unquote_plus(value)

    return out


@dataclass
class HTTPRequest:
    """
    One in-flight HTTP exchange.

    =========================================================================
    LIFECYCLE
    =========================================================================

        socket ──parse──► HTTPRequest ──route──► Handler ──invoke──► Route
                              │                     │                  │
                              │              strips `path`      merges params
                              │                                  and varargs
                              ▼
                      discarded after the response is written

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:      Upper-cased method token ("GET", "POST", ...)
        full_path:   Target exactly as sent, query string included
        protocol:    Protocol token ("HTTP/1.1")
        segments:    Non-empty "/" segments of the path, no query string
        path:        Remaining path; the Router strips the segment it used
        headers:     Header name (as sent) → value
        params:      Query, POST form and route-bound values
        varargs:     Segments captured by a trailing {*}
        body:        Raw body bytes (only when Content-Length was sent)
        raw:         Captured request text, for diagnostics

    Constructing an HTTPRequest directly with just `full_path` fills in
    `segments`, `path` and the query parameters, which keeps tests short:

        HTTPRequest(method="GET", full_path="/hello/Ada")

    =========================================================================
    """

    method: str = GET
    full_path: str = "/"
    protocol: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, Optional[str]] = field(default_factory=dict)
    varargs: List[str] = field(default_factory=list)
    segments: List[str] = field(default_factory=list)
    path: Optional[str] = None
    body: bytes = b""
    request_line: str = ""
    raw: str = field(default="", repr=False)
    client_address: tuple[str, int] = ("", 0)
    router: Optional["Router"] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        self.method = self.method.upper()
        if not self.segments:
            self.set_full_path(self.full_path)
        elif self.path is None:
            self.path = self.full_path

    def set_full_path(self, full_path: str) -> None:
        """
        Set the full path and everything derived from it.

        The query string, if any, is parsed and merged into `params`.
        """
        self.full_path = full_path
        self.path = full_path
        self.segments, query = split_path(full_path)
        if query:
            self.params.update(parse_input_data(query.split("&")))

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def first_segment(self) -> str:
        """First path segment, or "" for the root path."""
        return self.segments[0] if self.segments else ""

    @property
    def content_length(self) -> Optional[int]:
        """Content-Length as an int, or None if absent."""
        value = self.get_header("Content-Length")
        if value is None:
            return None
        return int(value.strip())

    def is_type(self, method: str) -> bool:
        """Case-insensitive method comparison."""
        return self.method.upper() == method.upper()

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Look up a header without caring about case.

        Names are stored the way the client sent them, so this scans
        the mapping when the exact key is absent.
        """
        if name in self.headers:
            return self.headers[name]

        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.params.get(name, default)

    def merge_params(self, data: Dict[str, Optional[str]]) -> None:
        self.params.update(data)

    def merge_varargs(self, data: Iterable[str]) -> None:
        self.varargs.extend(data)

    # =========================================================================
    # ROUTING
    # =========================================================================

    def determine_handler(self) -> "Handler":
        """
        Ask the Router which Handler answers this request.

        The first path segment is the routing key. Without a Router there
        is nothing sensible to do, so an error handler answering 500 is
        returned.
        """
        if self.router is None:
            from ..handlers.error import ErrorHandler
            logger.error(f"No router attached to request for {self.full_path}")
            return ErrorHandler(500)

        return self.router.route(self.first_segment, self)


class RequestParser:
    """
    Parses a binary stream into an HTTPRequest.

    ==========================================================================
    PARSER STEPS
    ==========================================================================

        stream
          │
          ├─► 1. Skip blank lines, read request line
          │      EOF first?            → MalformedRequestLine
          │      not exactly 3 tokens? → MalformedRequestLine
          │
          ├─► 2. Split target into segments + query params
          │
          ├─► 3. Read "Name: value" lines until a blank line
          │      no ": "?              → MalformedHeader
          │
          ├─► 4. Content-Length present? read exactly that many bytes
          │      short read / bad int? → IncompleteBody
          │      POST? merge form params from the body
          │
          ▼
        HTTPRequest

    Reading is line-at-a-time straight from the stream, so nothing past
    the body is ever consumed.

    ==========================================================================
    """

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        """
        Args:
            max_request_size: Upper bound, in bytes, on the header section
                              and on the body. Larger requests raise
                              HTTPParseError with status 413.
        """
        self.max_request_size = max_request_size

    def parse(
        self,
        stream: BinaryIO,
        client_address: tuple[str, int] = ("", 0),
        router: Optional["Router"] = None,
    ) -> HTTPRequest:
        """
        Parse one request from `stream`.

        Args:
            stream: Readable binary stream positioned at the request start.
            client_address: Peer (ip, port), kept for logging.
            router: Router the request will use to find its Handler.

        Returns:
            A fully populated HTTPRequest.

        Raises:
            HTTPParseError: The bytes are not a request we can handle.
            TransportError: The stream failed underneath us.
        """
        reader = _LineReader(stream, self.max_request_size)
        captured: List[str] = []

        # ─────────────────────────────────────────────────────────────────
        # STEP 1: Request line (leading blank lines are ignored)
        # ─────────────────────────────────────────────────────────────────
        line = reader.read_line()
        while line is not None and not line:
            line = reader.read_line()

        if line is None:
            raise MalformedRequestLine("Connection ended before a request line was sent")

        method, full_path, protocol = self._parse_request_line(line)
        captured.append(line)

        request = HTTPRequest(
            method=method,
            full_path=full_path,
            protocol=protocol,
            request_line=line,
            client_address=client_address,
            router=router,
        )

        # ─────────────────────────────────────────────────────────────────
        # STEP 2: Headers, up to the first blank line (or EOF)
        # ─────────────────────────────────────────────────────────────────
        line = reader.read_line()
        while line:
            captured.append(line)
            name, value = self._parse_header(line)
            request.headers[name] = value
            line = reader.read_line()

        raw = "\n".join(captured) + "\n"

        # ─────────────────────────────────────────────────────────────────
        # STEP 3: Body, gated strictly on Content-Length
        # ─────────────────────────────────────────────────────────────────
        if request.get_header("Content-Length") is not None:
            request.body = self._read_body(stream, request)
            text = request.body.decode("utf-8", errors="replace")
            raw += text

            if request.is_type(POST):
                request.merge_params(parse_input_data(text.split("&"), keep_bare=False))

        request.raw = raw
        return request

    def _parse_request_line(self, line: str) -> tuple[str, str, str]:
        """
        Split "METHOD SP PATH SP PROTOCOL" into its three parts.

        Splitting is on single spaces, so a doubled space yields an empty
        token and the line is rejected.
        """
        parts = line.strip().split(" ")
        if len(parts) != 3:
            raise MalformedRequestLine(
                f"Request line has {len(parts)} tokens, expected 3: {line!r}"
            )

        method, full_path, protocol = parts
        return method.upper(), full_path, protocol

    def _parse_header(self, line: str) -> tuple[str, str]:
        items = line.split(": ")
        if len(items) == 1:
            raise MalformedHeader(f"No key value pair in header line: {line!r}")

        return items[0], ": ".join(items[1:])

    def _read_body(self, stream: BinaryIO, request: HTTPRequest) -> bytes:
        """Read exactly Content-Length bytes."""
        try:
            length = request.content_length
        except ValueError:
            raise IncompleteBody(
                f"Invalid Content-Length: {request.get_header('Content-Length')!r}"
            )

        if length is None or length < 0:
            raise IncompleteBody(f"Invalid Content-Length: {length}")

        if length > self.max_request_size:
            raise HTTPParseError(
                f"Request body of {length} bytes exceeds {self.max_request_size}",
                status_code=413,
            )

        chunks = []
        remaining = length
        try:
            while remaining > 0:
                chunk = stream.read(remaining)
                if not chunk:
                    break
                chunks.append(chunk)
                remaining -= len(chunk)
        except OSError as e:
            raise TransportError(f"Failed to read request body: {e}") from e

        body = b"".join(chunks)
        if len(body) < length:
            raise IncompleteBody(
                f"Incomplete body: expected {length} bytes, got {len(body)}"
            )
        return body


class _LineReader:
    """
    Line-at-a-time reader over one request's header section.

    Keeps the byte count for a single parse so a RequestParser can be
    shared between connection threads.
    """

    def __init__(self, stream: BinaryIO, limit: int):
        self.stream = stream
        self.limit = limit
        self.consumed = 0

    def read_line(self) -> Optional[str]:
        """
        Read one line without its terminator.

        Returns None at end of stream. Both CRLF and bare LF endings are
        accepted.
        """
        try:
            data = self.stream.readline(self.limit + 1)
        except OSError as e:
            raise TransportError(f"Failed to read from connection: {e}") from e

        if not data:
            return None

        self.consumed += len(data)
        if self.consumed > self.limit:
            raise HTTPParseError(
                f"Request headers exceed {self.limit} bytes",
                status_code=413,
            )

        return data.decode("utf-8", errors="replace").rstrip("\r\n")


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    router: Optional["Router"] = None,
    max_size: int = 10 * 1024 * 1024,
) -> HTTPRequest:
    """
    Parse a complete request held in memory.

    Wraps `data` in a BytesIO and runs a fresh RequestParser over it.
    """
    parser = RequestParser(max_request_size=max_size)
    return parser.parse(BytesIO(data), client_address, router)
