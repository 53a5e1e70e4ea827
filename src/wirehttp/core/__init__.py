"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing underneath the HTTP layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                               │
    │  • Creates, binds and listens on the TCP socket                     │
    │  • Runs the accept() loop                                           │
    │  • Stops on shutdown() or SIGINT / SIGTERM                          │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ one new thread per connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                 │
    │  • Wraps the client socket with buffered read/write files           │
    │  • Tracks NEW → READING → PROCESSING → WRITING → CLOSED             │
    │  • Closed after a single exchange (Connection: close)               │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          ACCESS LOG                                 │
    │  • One text or JSON line per exchange on "wirehttp.access"          │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .access_log import RequestLog, log_request

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "RequestLog",
    "log_request",
]
