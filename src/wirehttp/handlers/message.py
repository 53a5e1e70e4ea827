"""
Handler that answers every request with the same plain-text message.

    router.add_handler("ping", MessageHandler("pong"))
    router.add_handler("legacy", MessageHandler(410, "This API is gone."))
"""

from typing import Optional

from ..http.handler import Handler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus


class MessageHandler(Handler):
    """
    Sends a fixed message regardless of method or path.

    Args:
        code: Status code, or the message itself when `message` is omitted
              (the code is then 200).
        message: Text sent to the client.
    """

    def __init__(self, code: int | str, message: Optional[str] = None):
        super().__init__()
        if message is None:
            code, message = HTTPStatus.OK, str(code)

        self.code = int(code)
        self.message = message

    def handle(self, request: HTTPRequest, response: HTTPResponse) -> None:
        response.message(self.code, self.message)
