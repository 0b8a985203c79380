"""Pytest configuration and shared fixtures.

Collaborators are minimal stubs with real behavior (not mocks): they
record what the controller asked of them and return canned data.
"""

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import pytest

from githistory_bridge.avatars import BaseAvatarProvider, GravatarAvatarProvider
from githistory_bridge.controller import ApiController
from githistory_bridge.emitter import EventEmitter
from githistory_bridge.types import Avatar, GitOriginType


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


# =============================================================================
# Collaborator stubs
# =============================================================================


class StubGitService:
    """In-memory git service."""

    def __init__(self):
        self.root = Path("/repo")
        self.branch: str | None = "main"
        self.origin_type: GitOriginType | str | None = GitOriginType.GITHUB
        self.origin_url: str | None = "git@github.com:octo/history.git"
        self.authors = [
            {"name": "Ada", "email": "ada@example.com"},
            {"name": "Linus", "email": "linus@example.com"},
        ]
        self.branches = [{"name": "main", "current": True}, {"name": "dev", "current": False}]
        self.log_result: dict[str, Any] = {"items": [{"hash": {"full": "abc"}}], "count": 1}
        self.calls: list[tuple] = []
        self.fail_with: Exception | None = None
        self.state_changed: EventEmitter[[]] = EventEmitter("state_changed")

    def _record(self, *call: Any) -> None:
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def get_git_root(self) -> Path:
        return self.root

    def get_current_branch(self) -> str | None:
        return self.branch

    async def get_log_entries(
        self,
        start_index,
        stop_index,
        branch=None,
        search_text=None,
        file=None,
        line_number=None,
        author=None,
    ) -> Mapping[str, Any]:
        self._record(
            "get_log_entries",
            start_index,
            stop_index,
            branch,
            search_text,
            file,
            line_number,
            author,
        )
        return dict(self.log_result)

    async def get_branches(self):
        self._record("get_branches")
        return self.branches

    async def get_authors(self):
        self._record("get_authors")
        return self.authors

    async def get_commit(self, hash: str, refresh: bool = False):
        self._record("get_commit", hash, refresh)
        return {"hash": {"full": hash}, "refs": [], "refreshed": refresh}

    async def get_origin_type(self):
        self._record("get_origin_type")
        return self.origin_type

    async def get_origin_url(self):
        return self.origin_url

    async def create_tag(self, name: str, hash: str) -> None:
        self._record("create_tag", name, hash)

    async def create_branch(self, name: str, hash: str) -> None:
        self._record("create_branch", name, hash)

    async def remove_tag(self, name: str) -> None:
        self._record("remove_tag", name)

    async def remove_branch(self, name: str) -> None:
        self._record("remove_branch", name)

    async def remove_remote_branch(self, name: str) -> None:
        self._record("remove_remote_branch", name)

    async def reset(self, hash: str, hard: bool = False) -> None:
        self._record("reset", hash, hard)

    def on_state_changed(self, listener):
        return self.state_changed.subscribe(listener)


class StubWebview:
    """Webview that keeps every posted message."""

    def __init__(self):
        self.posted: list[dict[str, Any]] = []
        self.received: EventEmitter[[Any]] = EventEmitter("did_receive_message")

    async def post_message(self, message):
        self.posted.append(dict(message))

    def on_did_receive_message(self, listener):
        return self.received.subscribe(listener)

    async def send(self, message: Any) -> None:
        """Simulate the UI posting a message to the host."""
        await self.received.fire(message)

    @property
    def last(self) -> dict[str, Any]:
        return self.posted[-1]


class StubShell:
    def __init__(self):
        self.errors: list[Any] = []

    async def show_error_message(self, error):
        self.errors.append(error)


class StubCommandManager:
    def __init__(self):
        self.executed: list[tuple[str, tuple]] = []

    async def execute_command(self, command, *args):
        self.executed.append((command, args))


class StubCommitViewer:
    def __init__(self):
        self.viewed: list[Any] = []

    def view_commit_tree(self, details):
        self.viewed.append(details)


class StaticAvatarProvider(BaseAvatarProvider):
    """Provider returning a fixed avatar, tagged with its own name."""

    def __init__(self, name: str, *origin_types: GitOriginType):
        self.name = name
        self._origin_types = frozenset(origin_types)

    def supported(self, origin_type):
        return origin_type in self._origin_types

    async def get_avatars(self, git_service):
        return [Avatar(login=self.name, avatar_url=f"https://avatars.test/{self.name}.png")]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def git_service() -> StubGitService:
    return StubGitService()


@pytest.fixture
def webview() -> StubWebview:
    return StubWebview()


@pytest.fixture
def shell() -> StubShell:
    return StubShell()


@pytest.fixture
def command_manager() -> StubCommandManager:
    return StubCommandManager()


@pytest.fixture
def commit_viewer() -> StubCommitViewer:
    return StubCommitViewer()


@pytest.fixture
def avatar_providers() -> list[BaseAvatarProvider]:
    return [
        StaticAvatarProvider("github", GitOriginType.GITHUB),
        StaticAvatarProvider("fallback", GitOriginType.ANY),
    ]


@pytest.fixture
def controller(
    webview, git_service, avatar_providers, shell, command_manager, commit_viewer
) -> Iterator[ApiController]:
    """An activated controller, disposed after the test."""
    controller = ApiController(
        webview,
        git_service,
        avatar_providers,
        shell,
        command_manager,
        commit_viewer,
    )
    controller.activate()
    yield controller
    controller.dispose()


@pytest.fixture
def gravatar() -> GravatarAvatarProvider:
    return GravatarAvatarProvider()
