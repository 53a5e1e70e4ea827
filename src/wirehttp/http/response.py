"""
=============================================================================
HTTP RESPONSE
=============================================================================

The mutable answer a route behavior fills in, and the code that writes it
onto the wire exactly once.

=============================================================================
WIRE FORMAT
=============================================================================

    HTTP/1.1 200 OK\r\n                          ← status line
    Server: wirehttp v1.0.0 (...)\r\n
    Content-Type: text/plain\r\n
    Connection: close\r\n                        ← always; no keep-alive
    Content-Size: 11\r\n                         ← explicit size or len(body)
    Content-Length: 11\r\n                       ← len(body), omitted on 204
    X-Extra: value\r\n                           ← headers set by the route
    \r\n
    hello world                                  ← omitted for HEAD and 204

A response whose body was never set is coerced to "204 No Content" with an
empty body before anything is written.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, BinaryIO, Dict, Optional, Union
import logging

from .exceptions import TransportError
from .request import HEAD
from .status_codes import HTTPStatus, status_line

if TYPE_CHECKING:
    from .request import HTTPRequest


logger = logging.getLogger(__name__)


# Generic error message for when an exception occurs on the server
EXCEPTION_ERROR = "an exception occurred while processing your request"

# Generic error message for when no route answers the requested path
NOT_A_METHOD_ERROR = "No known method"

# Generic error message for when the client sends bad data
MALFORMED_INPUT_ERROR = "Malformed Input"

# Generic status message for when everything is good
STATUS_GOOD = "All systems are go"


# =============================================================================
# SERVER IDENTITY
# =============================================================================
#
# Written once (lazily, on first use) and read by every connection thread.
# Two threads racing on the first read compute the same string, so no lock.
#
_server_info: Optional[str] = None


def get_server_info() -> str:
    """Value of the Server header when a response isn't given one."""
    global _server_info
    if not _server_info:
        from ..config import ServerConfig
        _server_info = ServerConfig().server_info
    return _server_info


@dataclass
class HTTPResponse:
    """
    Status, headers, mime type and body for one request.

    =========================================================================
    USAGE FROM A ROUTE BEHAVIOR
    =========================================================================

        def say_hello(request, response):
            response.set_body(f"Hello {request.param('name')}!")

        def create(request, response):
            response.code = 201
            response.mime_type = "application/json"
            response.set_header("Location", "/things/7")
            response.set_body(b'{"id": 7}')

    Behaviors never return anything. The engine calls respond() after the
    behavior finishes.

    =========================================================================
    """

    request: Optional["HTTPRequest"] = None
    writer: Optional[BinaryIO] = field(default=None, repr=False)
    code: int = HTTPStatus.OK
    body: Optional[bytes] = None
    mime_type: str = "text/plain"
    headers: Dict[str, str] = field(default_factory=dict)
    server_info: Optional[str] = None

    _size: Optional[int] = field(default=None, init=False, repr=False)
    _sent: bool = field(default=False, init=False, repr=False)

    # =========================================================================
    # SETTERS
    # =========================================================================

    @property
    def size(self) -> int:
        """Explicit size if one was set, else the body length."""
        if self._size is not None:
            return self._size
        return len(self.body or b"")

    @size.setter
    def size(self, value: int) -> None:
        if value < 0:
            raise ValueError("Response size must be non-negative.")
        self._size = value

    @property
    def sent(self) -> bool:
        return self._sent

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body; strings are encoded as UTF-8."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body = body
        return self

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def get_header(self, name: str) -> Optional[str]:
        return self.headers.get(name)

    def message(self, code: int, message: str) -> None:
        """
        Answer with a plain-text message.

        Sets the status code, the body and the "text/plain" mime type in
        one call. Most error paths in the engine go through here.
        """
        self.code = code
        self.set_body(message)
        self.mime_type = "text/plain"

    def no_content(self) -> None:
        """Answer "204 No Content" with nothing in the body."""
        self.code = HTTPStatus.NO_CONTENT
        self.body = b""
        self.mime_type = ""

    def error(self, code: int, message: str, exc: Optional[BaseException] = None) -> None:
        """
        Log `exc` with its traceback, then send `message` with `code`.

        Args:
            code: HTTP status code, usually 500.
            message: Text sent to the client.
            exc: The exception that caused the error, if any.
        """
        if exc is not None:
            logger.error(f"Error while handling request: {exc}", exc_info=exc)
        self.message(code, message)

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def _is_head(self) -> bool:
        return self.request is not None and self.request.is_type(HEAD)

    def to_bytes(self) -> bytes:
        """
        Build the complete message as it goes on the wire.

        Coerces an unset body to 204 first, so calling this has the same
        effect on the response as respond() does.
        """
        if self.body is None:
            self.no_content()

        lines = [
            status_line(self.code),
            f"Server: {self.server_info or get_server_info()}",
            f"Content-Type: {self.mime_type}",
            "Connection: close",
            f"Content-Size: {self.size}",
        ]

        # Content-Length frames the bytes actually sent, whatever size a
        # behavior declared. A 204 must not carry one.
        if self.code != HTTPStatus.NO_CONTENT:
            lines.append(f"Content-Length: {len(self.body)}")

        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        head = ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")

        if self._is_head() or self.code == HTTPStatus.NO_CONTENT:
            return head
        return head + self.body

    def respond(self) -> bool:
        """
        Write the response to the client and close the writer.

        Returns:
            True if every byte was written, False if the connection was
            already gone (the failure is logged) or this response was
            already sent.
        """
        if self._sent:
            logger.warning("Response already sent; ignoring second respond()")
            return False
        self._sent = True

        try:
            if self.writer is None:
                raise TransportError("No connection to write to")
            if self.writer.closed:
                raise TransportError("Connection is closed")

            self.writer.write(self.to_bytes())
            self.writer.flush()
            return True

        except (TransportError, OSError) as e:
            logger.warning(f"Something went wrong while sending data to the client: {e}")
            return False

        finally:
            if self.writer is not None:
                try:
                    self.writer.close()
                except OSError as e:
                    logger.debug(f"Error closing response writer: {e}")
