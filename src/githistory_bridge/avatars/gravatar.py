"""Gravatar avatars derived from author emails."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, ClassVar
from urllib.parse import urlencode

from ..types import Avatar, GitOriginType
from .base import BaseAvatarProvider

if TYPE_CHECKING:
    from ..interfaces import GitService

GRAVATAR_URL = "https://www.gravatar.com/avatar"


def gravatar_hash(email: str) -> str:
    """md5 of the trimmed, lower-cased email, as Gravatar expects."""
    return hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()


class GravatarAvatarProvider(BaseAvatarProvider):
    """Fallback provider: works for any origin, needs no network access."""

    name = "gravatar"
    origin_types: ClassVar[frozenset[GitOriginType]] = frozenset({GitOriginType.ANY})

    def __init__(self, default_image: str = "identicon", size: int = 80) -> None:
        self._query = urlencode({"d": default_image, "s": size})

    def avatar_url(self, email: str) -> str:
        return f"{GRAVATAR_URL}/{gravatar_hash(email)}?{self._query}"

    async def get_avatars(self, git_service: GitService) -> list[Avatar]:
        avatars: list[Avatar] = []
        seen: set[str] = set()
        for author in await git_service.get_authors():
            email = author.get("email")
            if not email or email.lower() in seen:
                continue
            seen.add(email.lower())
            name = author.get("name") or email
            avatars.append(
                Avatar(login=name, name=name, email=email, avatar_url=self.avatar_url(email))
            )
        return avatars
