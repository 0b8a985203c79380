"""GitHub avatars fetched from the repository's contributor list."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, ClassVar

import httpx

from ..types import Avatar, GitOriginType
from .base import BaseAvatarProvider

if TYPE_CHECKING:
    from ..interfaces import GitService

logger = logging.getLogger(__name__)

# git@github.com:owner/repo.git, https://github.com/owner/repo, ssh://git@github.com/owner/repo.git
_REMOTE_PATTERN = re.compile(r"github\.com[:/](?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?/?$")


def parse_github_remote(url: str) -> tuple[str, str] | None:
    """Extract ``(owner, repo)`` from a GitHub remote url."""
    match = _REMOTE_PATTERN.search(url.strip())
    if match is None:
        return None
    return match.group("owner"), match.group("repo")


class GithubAvatarProvider(BaseAvatarProvider):
    """Avatars of the contributors of a GitHub-hosted repository.

    Args:
        api_url: Base url of the GitHub REST API
        token: Optional token sent as a bearer credential
        timeout: Request timeout in seconds
        client: Preconfigured client (tests inject one with a mock transport)
    """

    name = "github"
    origin_types: ClassVar[frozenset[GitOriginType]] = frozenset({GitOriginType.GITHUB})

    def __init__(
        self,
        api_url: str = "https://api.github.com",
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def get_avatars(self, git_service: GitService) -> list[Avatar]:
        remote = await git_service.get_origin_url()
        repo = parse_github_remote(remote) if remote else None
        if repo is None:
            logger.warning(f"Origin {remote!r} is not a GitHub repository url")
            return []

        owner, name = repo
        url = f"{self._api_url}/repos/{owner}/{name}/contributors"
        if self._client is not None:
            response = await self._client.get(url, headers=self._headers())
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, headers=self._headers())
        response.raise_for_status()

        return [
            Avatar(
                login=item["login"],
                name=item.get("name"),
                url=item.get("html_url"),
                avatar_url=item["avatar_url"],
            )
            for item in response.json()
        ]
