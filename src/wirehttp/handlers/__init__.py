"""
=============================================================================
HANDLERS MODULE
=============================================================================

Ready-made Handlers for the Router.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Handler           │ Use Case                                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │ MessageHandler    │ Same text for every request                     │
    │                   │ router.add_handler("ping", MessageHandler("ok"))│
    ├─────────────────────────────────────────────────────────────────────┤
    │ ErrorHandler      │ Fallback when nothing else answers (501)        │
    ├─────────────────────────────────────────────────────────────────────┤
    │ FileHandler       │ Files from a directory, as the default Handler  │
    │                   │ router.set_default_handler(FileHandler("www"))  │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .error import ErrorHandler, ERROR_MESSAGES
from .message import MessageHandler
from .static import FileHandler

__all__ = [
    "ErrorHandler",
    "ERROR_MESSAGES",
    "MessageHandler",
    "FileHandler",
]
