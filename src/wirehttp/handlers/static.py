"""
=============================================================================
FILE HANDLER
=============================================================================

Serves files from a directory on disk. Meant to sit in the Router as the
default Handler, so it sees the whole request path:

    router.set_default_handler(FileHandler("./www"))

    GET /                     → www/index.html
    GET /css/site.css         → www/css/site.css      (text/css)
    GET /missing.png          → 404 "404 - File Not Found!"
    GET /../etc/passwd        → 403

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

Request segments like ".." must not walk out of the root directory:

    full_path = (root / "a" / ".." / ".." / "etc").resolve()
    full_path.relative_to(root)     # raises ValueError → 403

resolve() also follows symlinks, so a link pointing outside the root is
refused the same way.

=============================================================================
"""

import logging
from pathlib import Path
from typing import List
from urllib.parse import unquote

from ..http.handler import Handler
from ..http.request import GET, HEAD, HTTPRequest
from ..http.response import HTTPResponse
from ..http.route import Route
from ..http.mime_types import get_mime_type
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


NOT_FOUND_MESSAGE = "404 - File Not Found!"


class FileHandler(Handler):
    """
    Handler serving `root/<path segments>` for GET and HEAD.

    =========================================================================
    ROUTES
    =========================================================================

        GET  /       → serve_default_file   (root/default_file)
        GET  /{*}    → serve_file           (root/<varargs...>)

    The same two routes are registered for HEAD, which sends the headers
    of the file without its body.

    =========================================================================
    """

    def __init__(self, root: str | Path, default_file: str = "index.html"):
        """
        Args:
            root: Directory to serve. Files outside it are never read.
            default_file: File answered for "/" (relative to root).

        Raises:
            ValueError: `root` is not a directory.
        """
        super().__init__()
        self.root = Path(root).resolve()
        self.default_file = default_file.lstrip("/")

        if not self.root.is_dir():
            raise ValueError(f"Content directory does not exist: {root}")

        for method in (GET, HEAD):
            self.add_route(method, Route("/", self.serve_default_file))
            self.add_route(method, Route("/{*}", self.serve_file))

    def serve_default_file(self, request: HTTPRequest, response: HTTPResponse) -> None:
        self._serve(self.default_file.split("/"), response)

    def serve_file(self, request: HTTPRequest, response: HTTPResponse) -> None:
        self._serve(request.varargs, response)

    def _serve(self, parts: List[str], response: HTTPResponse) -> None:
        relative = Path(*[unquote(part) for part in parts if part])
        full_path = (self.root / relative).resolve()

        try:
            full_path.relative_to(self.root)
        except ValueError:
            logger.warning(f"Path traversal attempt: {relative}")
            response.message(HTTPStatus.FORBIDDEN, "Access denied")
            return

        if full_path.is_dir():
            full_path = full_path / self.default_file

        if not full_path.is_file():
            response.code = HTTPStatus.NOT_FOUND
            response.set_body(NOT_FOUND_MESSAGE)
            response.mime_type = "text/html"
            return

        try:
            content = full_path.read_bytes()
        except PermissionError:
            response.message(HTTPStatus.FORBIDDEN, "Permission denied")
            return

        response.mime_type = get_mime_type(full_path)
        response.set_body(content)
