"""Inbound envelope definitions.

Commands are requests from the UI. Each carries a ``requestId`` that
the response echoes back so the UI can match out-of-order replies.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CommandType(str, Enum):
    """All command names understood by the controller."""

    # History queries
    GET_LOG_ENTRIES = "getLogEntries"
    GET_BRANCHES = "getBranches"
    GET_AUTHORS = "getAuthors"
    GET_COMMIT = "getCommit"
    GET_AVATARS = "getAvatars"

    # Mutations
    DO_ACTION_REF = "doActionRef"
    DO_ACTION = "doAction"

    # External command side effects
    DO_SOMETHING_WITH_COMMIT = "doSomethingWithCommit"
    SELECT_COMMITTED_FILE = "selectCommittedFile"

    # State push
    REGISTER_STATE = "registerState"
    SEND_STATE = "sendState"


class Command(BaseModel):
    """A command from the UI to the controller.

    Example:
        {
            "cmd": "getCommit",
            "requestId": "42",
            "payload": {"hash": "d3adb33f"}
        }
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    cmd: str
    request_id: str = Field(default="", alias="requestId")
    payload: Any = Field(default_factory=dict)

    @classmethod
    def create(
        cls,
        cmd: str | CommandType,
        payload: Any = None,
        request_id: str = "",
    ) -> Command:
        """Factory method for creating commands."""
        return cls(
            cmd=cmd.value if isinstance(cmd, CommandType) else cmd,
            request_id=request_id,
            payload={} if payload is None else payload,
        )

    @classmethod
    def send_state(cls, request_id: str) -> Command:
        """Create the synthetic command used for state-change pushes."""
        return cls.create(CommandType.SEND_STATE, {}, request_id)
