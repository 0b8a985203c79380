"""Avatar providers and provider selection."""

from .base import BaseAvatarProvider
from .github import GithubAvatarProvider, parse_github_remote
from .gravatar import GravatarAvatarProvider, gravatar_hash
from .selection import AvatarProviderSet

__all__ = [
    "AvatarProviderSet",
    "BaseAvatarProvider",
    "GithubAvatarProvider",
    "GravatarAvatarProvider",
    "gravatar_hash",
    "parse_github_remote",
]
