"""
=============================================================================
ACCESS LOG
=============================================================================

One line per exchange on the "wirehttp.access" logger, written after the
response has gone out (or failed to).

    TEXT (Apache-like):
        127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] "GET /hello/Ada" 200 10 0.41ms

    JSON:
        {"connection_id": "1a2b3c4d", "method": "GET", "path": "/hello/Ada",
         "client_ip": "127.0.0.1", "user_agent": "curl/8.0",
         "status_code": 200, "content_length": 10, "duration_ms": 0.41,
         "timestamp": "18/Oct/2026:10:00:00 +0000", "sent": true}

=============================================================================
"""

import json
import time
import logging
from dataclasses import dataclass
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("wirehttp.access")


@dataclass
class RequestLog:
    """Structured access log entry for one request."""

    connection_id: str
    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str
    sent: bool = True

    @classmethod
    def build(
        cls,
        connection_id: str,
        request: Optional[HTTPRequest],
        response: HTTPResponse,
        client_ip: str,
        duration_ms: float,
        sent: bool,
    ) -> "RequestLog":
        """
        Build an entry from a finished exchange.

        `request` is None when parsing failed; method and path are then "-".
        """
        return cls(
            connection_id=connection_id,
            method=request.method if request else "-",
            path=request.full_path if request else "-",
            client_ip=client_ip or "-",
            user_agent=(request.get_header("User-Agent") if request else None) or "-",
            status_code=int(response.code),
            content_length=response.size,
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
            sent=sent,
        )

    def to_dict(self) -> dict:
        return {
            "connection_id": self.connection_id,
            "method": self.method,
            "path": self.path,
            "client_ip": self.client_ip,
            "user_agent": self.user_agent,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
            "sent": self.sent,
        }

    def to_text(self) -> str:
        line = (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )
        if not self.sent:
            line += " (not sent)"
        return line


def log_request(entry: RequestLog, log_format: str = "text", level: int = logging.INFO) -> None:
    """Emit `entry` on the access logger in the configured format."""
    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())
