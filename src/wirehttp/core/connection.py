"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket for the lifetime of one exchange:

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED
     │         │                                      ▲
     └─────────┴──────────── (error) ─────────────────┘

There is no keep-alive. Every connection carries exactly one request and
one response and is then closed.

=============================================================================
STREAMS
=============================================================================

The request is read through a buffered binary file over the socket
(`rfile`), which gives the parser readline() and read(n) without it ever
touching recv() directly. The response goes out through `wfile`. Closing
`wfile` does not close the socket; close() does that.

=============================================================================
"""

import socket
import time
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)

# Upper bounds on reading leftover client data while closing.
DRAIN_TIMEOUT = 2.0
DRAIN_LIMIT = 64 * 1024


class ConnectionState(Enum):
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Parsing the request
    PROCESSING = "processing"  # Handler is running
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection owned by exactly one thread.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port).
        id: Short identifier used in log lines.
        state: Where in the exchange this connection is.
        timeout: Socket timeout in seconds; None blocks forever.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    timeout: Optional[float] = None

    _rfile: Optional[BinaryIO] = field(default=None, repr=False)
    _wfile: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    @property
    def rfile(self) -> BinaryIO:
        """Buffered reader over the socket."""
        if self._rfile is None:
            self._rfile = self.socket.makefile("rb")
        return self._rfile

    @property
    def wfile(self) -> BinaryIO:
        """Buffered writer over the socket."""
        if self._wfile is None:
            self._wfile = self.socket.makefile("wb")
        return self._wfile

    def close(self):
        """
        Close the connection.

        Sends FIN (shutdown SHUT_WR), drains whatever the client still
        had in flight so the kernel doesn't answer with RST, then releases
        the descriptor. Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        for stream in (self._wfile, self._rfile):
            if stream is not None:
                try:
                    stream.close()
                except OSError as e:
                    logger.debug(f"[{self.id}] Error closing stream: {e}")

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        self._drain()

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def _drain(self):
        """Read and discard what the client still sends, within DRAIN_TIMEOUT and DRAIN_LIMIT."""
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0

        try:
            while drained < DRAIN_LIMIT:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(min(0.5, remaining))
                chunk = self.socket.recv(4096)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # Includes socket.timeout

        if drained >= DRAIN_LIMIT:
            logger.debug(f"[{self.id}] Stopped draining after {drained} bytes")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
