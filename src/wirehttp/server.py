"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: the SocketServer accepts, every connection gets
its own thread, and that thread runs one request through the Router.

    accept loop (run() caller's thread)
        │
        ├──► Connection ──► Thread ──► _process_connection(conn)
        ├──► Connection ──► Thread ──► _process_connection(conn)
        └──► ...

    _process_connection(conn)
        1. RequestParser.parse(conn.rfile)        HTTPParseError → 500
        2. request.determine_handler()            Router: segment → Handler
        3. handler.handle(request, response)      Route scoring + behavior
        4. response.respond()                     write, close writer
        5. access log line, conn.close()

No connection is reused, and nothing but the route table (read-only once
run() starts) is shared between connection threads.

=============================================================================
"""

import logging
import threading
import time
from typing import Callable, Optional, Set, Tuple

from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer, RequestLog, log_request
from .http import (
    EXCEPTION_ERROR,
    Handler,
    HTTPParseError,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    RequestParser,
    Router,
    TransportError,
)
from .http.route import Behavior


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    HTTP/1.1 server with thread-per-connection dispatch.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer()

        @server.get("/")
        def index(request, response):
            response.set_body("Hello World")

        hello = Handler()

        @hello.get("/hello/{name}")
        def say_hello(request, response):
            response.set_body(f"Hello {request.param('name')}!")

        server.add_handler("hello", hello)
        server.run()

    Routes registered straight on the server (server.get(...)) live in
    the server's own Handler, which is the Router's default Handler: it
    sees every request whose first segment has no Handler of its own.

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(max_request_size=self.config.max_request_size)

        self._handler = Handler()
        self._router = Router(default_handler=self._handler)

        self._threads: Set[threading.Thread] = set()
        self._threads_lock = threading.Lock()
        self._running = False

    # =========================================================================
    # ROUTING SETUP
    # =========================================================================

    @property
    def router(self) -> Router:
        return self._router

    @property
    def handler(self) -> Handler:
        """The server's own Handler (the Router's default)."""
        return self._handler

    def route(self, path: str, method: str = "GET") -> Callable[[Behavior], Behavior]:
        return self._handler.route(path, method)

    def get(self, path: str) -> Callable[[Behavior], Behavior]:
        return self._handler.get(path)

    def post(self, path: str) -> Callable[[Behavior], Behavior]:
        return self._handler.post(path)

    def put(self, path: str) -> Callable[[Behavior], Behavior]:
        return self._handler.put(path)

    def delete(self, path: str) -> Callable[[Behavior], Behavior]:
        return self._handler.delete(path)

    def head(self, path: str) -> Callable[[Behavior], Behavior]:
        return self._handler.head(path)

    def add_handler(self, segment: str, handler: Handler) -> "HTTPServer":
        self._router.add_handler(segment, handler)
        return self

    def set_default_handler(self, handler: Optional[Handler]) -> "HTTPServer":
        self._router.set_default_handler(handler)
        return self

    def set_error_handler(self, handler: Handler) -> "HTTPServer":
        self._router.set_error_handler(handler)
        return self

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port when configured with port 0."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Start the server (blocking) until shutdown() or Ctrl+C.

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host is not None:
            self.config.host = host
        if port is not None:
            self.config.port = port
        self.config.validate()

        self._setup_logging()
        self._running = True

        logger.info(
            f"Starting {self.config.server_info} on {self.config.host}:{self.config.port}"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is bound (for background runs)."""
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Stop accepting connections. run() returns once the loop notices."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("wirehttp").setLevel(level)

    def _shutdown(self, timeout: float = 5.0):
        """Wait (bounded) for in-flight connection threads, then stop."""
        logger.info("Shutting down server...")
        self._running = False

        with self._threads_lock:
            threads = list(self._threads)

        deadline = time.monotonic() + timeout
        for thread in threads:
            thread.join(max(0.0, deadline - time.monotonic()))

        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Start a thread for `conn`. Runs on the accept loop."""
        thread = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"wirehttp-conn-{conn.id}",
            daemon=True,
        )
        with self._threads_lock:
            self._threads.add(thread)
        thread.start()

    def _process_connection(self, conn: Connection):
        """
        Run one request/response exchange (connection thread).

        Parse errors still get an answer. A connection that breaks
        underneath us is logged and dropped without one.
        """
        start_time = time.time()
        request: Optional[HTTPRequest] = None
        response = HTTPResponse(writer=None, server_info=self.config.server_info)

        try:
            with conn:
                response.writer = conn.wfile

                try:
                    conn.state = ConnectionState.READING
                    request = self._parser.parse(conn.rfile, conn.address, self._router)
                    response.request = request

                    conn.state = ConnectionState.PROCESSING
                    handler = request.determine_handler()
                    handler.handle(request, response)

                except HTTPParseError as e:
                    logger.warning(f"[{conn.id}] Bad request from {conn.client_ip}: {e}")
                    response.message(e.status_code, str(e))

                except (TransportError, OSError) as e:
                    logger.warning(f"[{conn.id}] Connection lost while reading: {e}")
                    return

                except Exception as e:
                    logger.exception(f"[{conn.id}] Handler error")
                    response.error(HTTPStatus.INTERNAL_SERVER_ERROR, EXCEPTION_ERROR, e)

                conn.state = ConnectionState.WRITING
                sent = response.respond()

            if self.config.access_log:
                duration_ms = (time.time() - start_time) * 1000
                log_request(
                    RequestLog.build(conn.id, request, response, conn.client_ip, duration_ms, sent),
                    self.config.log_format,
                )
        finally:
            with self._threads_lock:
                self._threads.discard(threading.current_thread())


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """Factory for a configured, not yet running, HTTPServer."""
    return HTTPServer(config)
