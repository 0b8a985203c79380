"""Choosing an avatar provider for an origin type."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from ..types import GitOriginType
from .github import GithubAvatarProvider
from .gravatar import GravatarAvatarProvider

if TYPE_CHECKING:
    import httpx

    from ..config import BridgeSettings
    from ..interfaces import AvatarProvider

logger = logging.getLogger(__name__)


class AvatarProviderSet:
    """Closed set of avatar providers with a guaranteed fallback.

    Selection is "first provider that supports the origin type, else
    the fallback". The fallback is the single provider supporting
    ``GitOriginType.ANY``; its presence is checked at construction.
    """

    def __init__(self, providers: Iterable[AvatarProvider]) -> None:
        self._providers = tuple(providers)
        fallbacks = [p for p in self._providers if p.supported(GitOriginType.ANY)]
        if not fallbacks:
            raise ValueError("No avatar provider supports the 'any' origin type")
        if len(fallbacks) > 1:
            raise ValueError(f"Several avatar providers support the 'any' origin type: {fallbacks!r}")
        self._fallback = fallbacks[0]

    @classmethod
    def from_settings(
        cls, settings: BridgeSettings, client: httpx.AsyncClient | None = None
    ) -> AvatarProviderSet:
        """Default providers: GitHub for GitHub remotes, Gravatar for everything else.

        ``client`` is handed to the GitHub provider; without one it opens
        a client per request using ``settings.http_timeout``.
        """
        return cls(
            [
                GithubAvatarProvider(
                    api_url=settings.github_api_url,
                    token=settings.github_token,
                    timeout=settings.http_timeout,
                    client=client,
                ),
                GravatarAvatarProvider(),
            ]
        )

    def __iter__(self) -> Iterator[AvatarProvider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    @property
    def fallback(self) -> AvatarProvider:
        return self._fallback

    def select(self, origin_type: GitOriginType | str) -> AvatarProvider:
        try:
            origin = GitOriginType(origin_type)
        except ValueError:
            logger.debug(f"Unrecognized origin type {origin_type!r}, using fallback")
            return self._fallback

        for provider in self._providers:
            if provider.supported(origin):
                return provider
        logger.debug(f"No dedicated avatar provider for {origin.value}, using fallback")
        return self._fallback
