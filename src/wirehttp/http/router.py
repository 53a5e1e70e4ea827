"""
=============================================================================
ROUTER
=============================================================================

Top-level dispatch table: first path segment → Handler.

    GET /hello/Ada           first segment "hello"
         │
         ▼
    ┌──────────────────────────────────────────────────────────────────┐
    │  "hello"  ─► hello Handler        ← registered: path becomes     │
    │  "api"    ─► api Handler            "/Ada", segments untouched   │
    │                                                                  │
    │  default  ─► FileHandler          ← unregistered: path intact    │
    │  error    ─► ErrorHandler(501)    ← no default configured        │
    └──────────────────────────────────────────────────────────────────┘

Routing never raises. A request nobody claims still reaches the error
Handler, which always answers.

=============================================================================
"""

from typing import TYPE_CHECKING, Dict, Optional
import logging

from .request import HTTPRequest
from .status_codes import HTTPStatus

if TYPE_CHECKING:
    from .handler import Handler


logger = logging.getLogger(__name__)


class Router:
    """
    Maps the first path segment of a request to its Handler.

    Attributes:
        default_handler: Answers segments with no Handler of their own.
        error_handler: Answers when there is no default Handler either.
    """

    def __init__(
        self,
        default_handler: Optional["Handler"] = None,
        error_handler: Optional["Handler"] = None,
    ):
        if error_handler is None:
            from ..handlers.error import ErrorHandler
            error_handler = ErrorHandler(HTTPStatus.NOT_IMPLEMENTED)

        self._handlers: Dict[str, "Handler"] = {}
        self.default_handler = default_handler
        self.error_handler = error_handler

    def add_handler(self, segment: str, handler: "Handler") -> None:
        """
        Register `handler` for requests whose first segment is `segment`.

        Surrounding slashes are trimmed, so "/hello/" and "hello" are the
        same key.
        """
        self._handlers[segment.strip("/")] = handler

    def set_default_handler(self, handler: Optional["Handler"]) -> None:
        self.default_handler = handler

    def set_error_handler(self, handler: "Handler") -> None:
        self.error_handler = handler

    def get_handler(self, segment: str) -> Optional["Handler"]:
        return self._handlers.get(segment.strip("/"))

    def route(self, segment: str, request: HTTPRequest) -> "Handler":
        """
        Resolve the Handler for `request`.

        Args:
            segment: The request's first path segment ("" for "/").
            request: Its `path` loses the leading "/segment" when a named
                     Handler is found.

        Returns:
            The named Handler, else the default Handler, else the error
            Handler.
        """
        handler = self._handlers.get(segment)
        if handler is not None:
            prefix = "/" + segment
            if request.path and request.path.startswith(prefix):
                request.path = request.path[len(prefix):]
            return handler

        if self.default_handler is not None:
            return self.default_handler

        logger.debug(f"No handler for segment {segment!r}; using error handler")
        return self.error_handler
