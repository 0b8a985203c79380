"""Outbound envelope definitions.

A response echoes the command's ``requestId`` and carries exactly one
of ``payload`` (success) or ``error`` (failure).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Response(BaseModel):
    """A response from the controller to the UI.

    Example (success):
        {"requestId": "42", "payload": {"hash": {"full": "d3adb33f"}}}

    Example (failure):
        {"requestId": "42", "error": {"code": "HANDLER_ERROR", "message": "..."}}
    """

    model_config = ConfigDict(populate_by_name=True)

    request_id: str = Field(alias="requestId")
    payload: Any = None
    error: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _payload_or_error(self) -> Response:
        if self.error is not None and self.payload is not None:
            raise ValueError("A response carries either a payload or an error, not both")
        return self

    def is_error(self) -> bool:
        """Check if this response reports a failure."""
        return self.error is not None

    @classmethod
    def result(cls, request_id: str, payload: Any = None) -> Response:
        """Create a successful response."""
        return cls(request_id=request_id, payload=payload)

    @classmethod
    def failure(cls, request_id: str, error: dict[str, Any]) -> Response:
        """Create an error response."""
        return cls(request_id=request_id, error=error)

    def to_message(self) -> dict[str, Any]:
        """Serialize to the wire shape posted to the UI."""
        data = self.model_dump(mode="json", by_alias=True)
        if self.is_error():
            del data["payload"]
        else:
            del data["error"]
        return data
