"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    python -m wirehttp                        # Run with defaults
    python -m wirehttp --port 3000            # Custom port
    python -m wirehttp --root ./www           # Also serve files from ./www

Starts a demo server: a "hello" Handler that greets whoever asks, a
status route, an adder, and optionally a FileHandler as the default Handler.

    GET    /hello                  → Hello World
    GET    /hello/Ada              → Hello Ada
    GET    /hello/Ada/Lovelace     → Hello Ada Lovelace
    GET    /hello/a/b/c/d          → Hello a, b, c and d
    DELETE /hello/goodbye          → Goodbye World
    GET    /status                 → All systems are go
    GET    /plus/2/3/4             → 9
    GET    /plus                   → 418 Malformed Input

=============================================================================
"""

import argparse
import os
import sys
from typing import Optional

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .handlers import FileHandler, MessageHandler
from .http import MALFORMED_INPUT_ERROR, STATUS_GOOD, Handler
from .server import HTTPServer


def create_hello_handler() -> Handler:
    """The greeting Handler registered under "hello"."""
    hello = Handler()

    @hello.get("/hello")
    def say_hello(request, response):
        response.set_body("Hello World")

    @hello.get("/hello/{name}")
    def say_hello_to(request, response):
        response.set_body(f"Hello {request.param('name')}")

    @hello.get("/hello/{first}/{last}")
    def say_hello_to_full_name(request, response):
        response.set_body(f"Hello {request.param('first')} {request.param('last')}")

    @hello.get("/hello/{*}")
    def say_hello_to_everyone(request, response):
        names = request.varargs
        response.set_body("Hello " + ", ".join(names[:-1]) + " and " + names[-1])

    @hello.delete("/hello/goodbye")
    def say_goodbye(request, response):
        response.set_body("Goodbye World")

    return hello


def create_plus_handler() -> Handler:
    """Adds up the integers after "/plus"."""
    plus = Handler()

    @plus.get("/plus/{*}")
    def add(request, response):
        try:
            numbers = [int(n) for n in request.varargs]
        except ValueError:
            numbers = []

        if not numbers:
            response.message(418, MALFORMED_INPUT_ERROR)
            return

        response.set_body(str(sum(numbers)))

    return plus


def create_demo_server(config: ServerConfig, root: Optional[str] = None) -> HTTPServer:
    server = HTTPServer(config)
    server.add_handler("hello", create_hello_handler())
    server.add_handler("status", MessageHandler(STATUS_GOOD))
    server.add_handler("plus", create_plus_handler())

    if root:
        server.set_default_handler(FileHandler(root))

    return server


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="wirehttp",
        description="HTTP/1.1 server built from scratch in Python",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m wirehttp                        # Run with defaults
  python -m wirehttp --port 3000            # Custom port
  python -m wirehttp --host 0.0.0.0         # Listen on all interfaces
  python -m wirehttp --root ./www           # Serve files from ./www
        """
    )

    parser.add_argument(
        "--host", "-H",
        default=os.getenv("WIREHTTP_HOST", "127.0.0.1"),
        help="Host to bind to (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=int(os.getenv("WIREHTTP_PORT", "8000")),
        help="Port to listen on (default: 8000)"
    )

    parser.add_argument(
        "--root", "-r",
        default=None,
        help="Directory to serve files from for paths no Handler claims"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=os.getenv("WIREHTTP_LOG_LEVEL", "INFO").upper(),
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"wirehttp {__version__}"
    )

    args = parser.parse_args(argv)

    config = ServerConfig.from_env()
    config.host = args.host
    config.port = args.port
    config.log_level = args.log_level

    if args.root and not os.path.isdir(args.root):
        parser.error(f"--root {args.root!r} is not a directory")

    try:
        server = create_demo_server(config, args.root)
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
