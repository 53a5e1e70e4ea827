"""
Unit tests for Connection shutdown.
"""

import socket
import time

from wirehttp.core import connection as connection_module
from wirehttp.core.connection import Connection, ConnectionState


class ChattySocket:
    """Socket stand-in whose peer never stops sending."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.received = 0
        self.closed = False

    def setblocking(self, flag):
        pass

    def settimeout(self, value):
        pass

    def shutdown(self, how):
        pass

    def recv(self, size):
        if self.delay:
            time.sleep(self.delay)
        self.received += size
        return b"x" * size

    def close(self):
        self.closed = True


class TestConnectionClose:

    def test_close_after_peer_hangs_up(self):
        server_side, client_side = socket.socketpair()
        conn = Connection(socket=server_side, address=("127.0.0.1", 1))

        client_side.close()
        conn.close()

        assert conn.state == ConnectionState.CLOSED
        conn.close()  # second call is a no-op

    def test_drain_stops_at_byte_limit(self, monkeypatch):
        monkeypatch.setattr(connection_module, "DRAIN_LIMIT", 16 * 1024)
        sock = ChattySocket()
        conn = Connection(socket=sock, address=("127.0.0.1", 1))

        conn.close()

        assert sock.closed
        assert sock.received <= 16 * 1024 + 4096

    def test_drain_stops_at_deadline(self, monkeypatch):
        monkeypatch.setattr(connection_module, "DRAIN_TIMEOUT", 0.05)
        monkeypatch.setattr(connection_module, "DRAIN_LIMIT", 10 ** 9)
        sock = ChattySocket(delay=0.01)
        conn = Connection(socket=sock, address=("127.0.0.1", 1))

        started = time.monotonic()
        conn.close()

        assert sock.closed
        assert time.monotonic() - started < 1.0
        assert conn.state == ConnectionState.CLOSED
