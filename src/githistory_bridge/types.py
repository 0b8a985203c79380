"""Domain descriptors passed through the controller.

These values are borrowed from the git service for the lifetime of a
single request and handed on to collaborators. Log entries themselves
stay as the plain mappings the UI sends, so local edits (new refs) are
visible in the returned payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RefType(IntEnum):
    """Kind of ref attached to a log entry (wire values are integers)."""

    HEAD = 0
    REMOTE_HEAD = 1
    TAG = 2


class GitOriginType(str, Enum):
    """Hosting flavour of the repository's origin remote."""

    ANY = "any"
    GITHUB = "github"
    BITBUCKET = "bitbucket"
    VSTS = "vsts"


class Ref(BaseModel):
    """A branch, remote branch or tag pointing at a commit."""

    type: RefType
    name: str | None = None


class Avatar(BaseModel):
    """Avatar for a commit author, as rendered by the UI."""

    model_config = ConfigDict(populate_by_name=True)

    login: str
    name: str | None = None
    email: str | None = None
    url: str | None = None
    avatar_url: str = Field(alias="avatarUrl")


@dataclass
class CommitDetails:
    """Commit context forwarded to the commit viewer and external commands.

    Attributes:
        workspace_folder: Repository root
        branch: Branch checked out when the request was made
        log_entry: The log entry as received from the UI or git service
    """

    workspace_folder: Path
    branch: str | None
    log_entry: Any


@dataclass
class FileCommitDetails(CommitDetails):
    """Commit context narrowed to one committed file."""

    committed_file: Any = None
