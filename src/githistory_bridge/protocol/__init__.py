"""Dispatch protocol between the embedded UI and the controller.

Key concepts:
- Commands: UI -> controller requests carrying a ``requestId``
- Responses: controller -> UI replies echoing that ``requestId``
- Command table: fixed name -> handler mapping resolved per command
- Dispatcher: runs handlers and normalizes every failure into a response
"""

from .commands import Command, CommandType
from .dispatcher import CommandTable, Dispatcher, Handler
from .errors import (
    BridgeError,
    ErrorCode,
    HandlerFailure,
    LifecycleError,
    MissingOriginTypeError,
    PayloadValidationError,
    UnknownCommandError,
    normalize_error,
)
from .responses import Response

__all__ = [
    "Command",
    "CommandType",
    "CommandTable",
    "Dispatcher",
    "Handler",
    "Response",
    "BridgeError",
    "ErrorCode",
    "HandlerFailure",
    "LifecycleError",
    "MissingOriginTypeError",
    "PayloadValidationError",
    "UnknownCommandError",
    "normalize_error",
]
