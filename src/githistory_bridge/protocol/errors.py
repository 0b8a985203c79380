"""Error taxonomy for the dispatch protocol.

Every failure that reaches the dispatcher is normalized into a
BridgeError so the outbound envelope always carries a serializable
``{"code": ..., "message": ...}`` value.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error codes carried in error envelopes."""

    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    HANDLER_ERROR = "HANDLER_ERROR"
    NO_ORIGIN_TYPE = "NO_ORIGIN_TYPE"
    PARSE_ERROR = "PARSE_ERROR"


class BridgeError(Exception):
    """Base class for errors reported back to the UI."""

    code: ErrorCode = ErrorCode.HANDLER_ERROR

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message}


class UnknownCommandError(BridgeError):
    """The command name has no entry in the command table."""

    code = ErrorCode.UNKNOWN_COMMAND

    def __init__(self, command: str) -> None:
        super().__init__(f"Unknown command: {command}")
        self.command = command


class PayloadValidationError(BridgeError):
    """A payload field is missing or malformed."""

    code = ErrorCode.VALIDATION_ERROR


class MissingOriginTypeError(BridgeError):
    """The repository has no origin remote we can classify."""

    code = ErrorCode.NO_ORIGIN_TYPE

    def __init__(self) -> None:
        super().__init__("No origin type found")


class HandlerFailure(BridgeError):
    """Wraps an arbitrary exception raised by a handler or collaborator."""

    code = ErrorCode.HANDLER_ERROR

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause


class LifecycleError(RuntimeError):
    """Raised when the controller is driven through an invalid transition."""


def normalize_error(exc: BaseException) -> BridgeError:
    """Map any exception onto the bridge error taxonomy."""
    if isinstance(exc, BridgeError):
        return exc
    return HandlerFailure(exc)
