"""Base class for avatar providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from ..types import GitOriginType

if TYPE_CHECKING:
    from ..interfaces import GitService
    from ..types import Avatar


class BaseAvatarProvider(ABC):
    """Provider advertising the origin types it can serve.

    Subclasses list their origin types in ``origin_types``. A provider
    listing ``GitOriginType.ANY`` is the fallback used when no other
    provider matches.
    """

    name: ClassVar[str] = "base"
    origin_types: ClassVar[frozenset[GitOriginType]] = frozenset()

    def supported(self, origin_type: GitOriginType) -> bool:
        return origin_type in self.origin_types

    @abstractmethod
    async def get_avatars(self, git_service: GitService) -> list[Avatar]:
        """Produce avatars for the repository behind ``git_service``."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
