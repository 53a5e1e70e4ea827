"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All server settings in one dataclass, with defaults that work for local
development and a from_env() constructor for deployments.

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================

    WIREHTTP_HOST              Bind address         (default: 127.0.0.1)
    WIREHTTP_PORT              Port, 0 = ephemeral  (default: 8000)
    WIREHTTP_TIMEOUT           Socket timeout, s    (default: none)
    WIREHTTP_MAX_REQUEST_SIZE  Bytes                (default: 10 MB)
    WIREHTTP_LOG_LEVEL         DEBUG, INFO, ...     (default: INFO)
    WIREHTTP_LOG_FORMAT        text | json          (default: text)
    WIREHTTP_ACCESS_LOG        1/0, true/false      (default: on)

    WIREHTTP_PORT=3000 WIREHTTP_LOG_LEVEL=DEBUG python -m wirehttp

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from . import __version__


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK
    - host, port, backlog, timeout

    HTTP
    - max_request_size

    IDENTITY (the Server header)
    - server_name, server_version, server_etc

    LOGGING
    - log_level, log_format, access_log

    =========================================================================
    """

    host: str = "127.0.0.1"
    port: int = 8000
    backlog: int = 128

    timeout: Optional[float] = None
    """
    Socket timeout in seconds for reading the request and writing the
    response. None blocks forever, so a silent client only ever stalls
    its own thread.
    """

    max_request_size: int = 10 * 1024 * 1024
    """Upper bound on the header section and on the body; larger is 413."""

    server_name: str = "wirehttp"
    server_version: str = __version__
    server_etc: str = "now in Glorious Extra Color"

    log_level: str = "INFO"
    log_format: str = "text"
    access_log: bool = True

    @property
    def server_info(self) -> str:
        """Value of the Server response header."""
        return f"{self.server_name} v{self.server_version} ({self.server_etc})"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Build a configuration from WIREHTTP_* environment variables."""
        timeout = os.getenv("WIREHTTP_TIMEOUT")
        return cls(
            host=os.getenv("WIREHTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("WIREHTTP_PORT", "8000")),
            timeout=float(timeout) if timeout else None,
            max_request_size=int(os.getenv("WIREHTTP_MAX_REQUEST_SIZE", str(10 * 1024 * 1024))),
            log_level=os.getenv("WIREHTTP_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("WIREHTTP_LOG_FORMAT", "text").lower(),
            access_log=os.getenv("WIREHTTP_ACCESS_LOG", "1").lower() in _TRUE_VALUES,
        )

    def validate(self) -> None:
        """
        Raise ValueError for settings the server cannot run with.

        Called by HTTPServer at construction so mistakes surface before
        the socket is bound.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_request_size < 1:
            raise ValueError("max_request_size must be >= 1")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be text or json.")
