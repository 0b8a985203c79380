"""Type protocols for the controller's collaborators.

The controller only depends on these shapes. Real implementations
live in the host application; tests provide small stubs.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .disposable import Disposable
    from .types import Avatar, CommitDetails, GitOriginType

StateListener = Callable[[], Awaitable[None]]
MessageListener = Callable[[Any], Awaitable[None]]


@runtime_checkable
class GitService(Protocol):
    """Repository history and ref mutations."""

    def get_git_root(self) -> Path:
        """Repository root directory."""
        ...

    def get_current_branch(self) -> str | None:
        """Branch currently checked out."""
        ...

    async def get_log_entries(
        self,
        start_index: int,
        stop_index: int,
        branch: str | None = None,
        search_text: str | None = None,
        file: Path | None = None,
        line_number: int | None = None,
        author: str | None = None,
    ) -> Mapping[str, Any]:
        """Query history; the result is merged into the response payload."""
        ...

    async def get_branches(self) -> Sequence[Any]: ...

    async def get_authors(self) -> Sequence[Mapping[str, Any]]:
        """Authors as mappings with at least ``name`` and ``email``."""
        ...

    async def get_commit(self, hash: str, refresh: bool = False) -> Any:
        """Resolve a commit; ``refresh`` bypasses any cache."""
        ...

    async def get_origin_type(self) -> GitOriginType | None: ...

    async def get_origin_url(self) -> str | None: ...

    async def create_tag(self, name: str, hash: str) -> None: ...

    async def create_branch(self, name: str, hash: str) -> None: ...

    async def remove_tag(self, name: str) -> None: ...

    async def remove_branch(self, name: str) -> None: ...

    async def remove_remote_branch(self, name: str) -> None: ...

    async def reset(self, hash: str, hard: bool = False) -> None: ...

    def on_state_changed(self, listener: StateListener) -> Disposable:
        """Subscribe to repository state changes."""
        ...


@runtime_checkable
class AvatarProvider(Protocol):
    """Produces avatars for a repository hosted on a given origin type."""

    def supported(self, origin_type: GitOriginType) -> bool: ...

    async def get_avatars(self, git_service: GitService) -> list[Avatar]: ...


@runtime_checkable
class ApplicationShell(Protocol):
    """UI chrome used to surface errors to the user."""

    async def show_error_message(self, error: Any) -> None: ...


@runtime_checkable
class CommandManager(Protocol):
    """Executes named external commands."""

    async def execute_command(self, command: str, *args: Any) -> Any: ...


@runtime_checkable
class CommitViewer(Protocol):
    """Shows the file tree of a commit."""

    def view_commit_tree(self, details: CommitDetails) -> None: ...


@runtime_checkable
class Webview(Protocol):
    """The embedded UI surface the controller talks to."""

    async def post_message(self, message: Mapping[str, Any]) -> None: ...

    def on_did_receive_message(self, listener: MessageListener) -> Disposable: ...
