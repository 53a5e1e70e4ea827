"""
=============================================================================
WIREHTTP - HTTP/1.1 Server Built From Scratch
=============================================================================

Owns the raw socket, parses request bytes, matches the request against
registered routes, runs the application's behavior and writes the
response back. No web framework underneath.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    wirehttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m wirehttp)
    ├── server.py            # HTTPServer: accept loop, thread per connection
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Networking plumbing
    │   ├── socket_server.py # Listening socket, accept loop, signals
    │   ├── connection.py    # Client socket wrapper
    │   └── access_log.py    # One line per exchange
    ├── http/                # Protocol and routing
    │   ├── request.py       # HTTPRequest, RequestParser
    │   ├── response.py      # HTTPResponse
    │   ├── route.py         # Route patterns and scoring
    │   ├── handler.py       # Handler: routes by method
    │   ├── router.py        # Router: first segment → Handler
    │   ├── status_codes.py  # Reason phrases
    │   ├── mime_types.py    # Extension → MIME type
    │   └── exceptions.py    # Error taxonomy
    └── handlers/            # Ready-made Handlers
        ├── message.py       # Fixed message
        ├── error.py         # Fallback (501)
        └── static.py        # Files from disk

=============================================================================
QUICK START
=============================================================================

    from wirehttp import HTTPServer, Handler, ServerConfig

    server = HTTPServer(ServerConfig(port=8080))

    hello = Handler()

    @hello.get("/hello/{name}")
    def say_hello(request, response):
        response.set_body(f"Hello {request.param('name')}!")

    @hello.get("/hello/{*}")
    def say_hello_to_all(request, response):
        response.set_body("Hello " + " and ".join(request.varargs) + "!")

    server.add_handler("hello", hello)
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .http import (
    Handler,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    Route,
    Router,
)
from .handlers import ErrorHandler, FileHandler, MessageHandler
from .server import HTTPServer, create_app

__all__ = [
    "HTTPServer",
    "create_app",
    "ServerConfig",
    "Handler",
    "Route",
    "Router",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "ErrorHandler",
    "FileHandler",
    "MessageHandler",
    "__version__",
]
