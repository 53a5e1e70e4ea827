"""
=============================================================================
ERROR HANDLER
=============================================================================

The Handler of last resort. The Router falls back to it when neither a
named Handler nor a default Handler claims a request, and a request that
has no Router at all gets one answering 500.

Whatever was asked, the answer is the configured status code and a
message picked at random from a small set of canned lines.

=============================================================================
"""

import logging
import random
from typing import Optional, Sequence

from ..http.handler import Handler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


ERROR_MESSAGES = (
    "Well, that went well...",
    "That's not a good sound.",
    "Oh God, oh God, we're all gonna die.",
    "What a crazy random happenstance!",
    "Uh, everything's under control. Situation normal.",
    "Uh, we had a slight weapons malfunction, but, uh... "
    "everything's perfectly all right now. We're fine. We're all "
    "fine here now, thank you. How are you?",
    "Definitely feeling aggressive tendency, sir!",
    "If they move, shoot 'em.",
)


class ErrorHandler(Handler):
    """
    Answers every request with `code` and a random canned message.

    Args:
        code: Status code to send; 500 unless told otherwise.
        messages: Replacement message set, for servers that want their own.
    """

    def __init__(
        self,
        code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
        messages: Optional[Sequence[str]] = None,
    ):
        super().__init__()
        self.code = int(code)
        self.messages = tuple(messages) if messages else ERROR_MESSAGES

    def handle(self, request: HTTPRequest, response: HTTPResponse) -> None:
        logger.debug(f"Error handler answering {request.method} {request.full_path}")
        response.message(self.code, random.choice(self.messages))
