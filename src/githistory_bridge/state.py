"""Subscriber registration and state-change notifications.

The UI registers one request id via ``registerState``. Every state
change of the git service is turned into a synthetic ``sendState``
command addressed to that id and pushed through the normal dispatch
path, so pushes and replies share one error policy.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from .protocol import Command

if TYPE_CHECKING:
    from .disposable import Disposable
    from .interfaces import GitService

logger = logging.getLogger(__name__)


class StateSubscription:
    """Single slot holding the most recently registered request id.

    Registering again silently replaces the previous target; the slot
    is never cleared.
    """

    def __init__(self) -> None:
        self._request_id: str | None = None

    @property
    def request_id(self) -> str | None:
        return self._request_id

    def is_registered(self) -> bool:
        return self._request_id is not None

    def register(self, request_id: str) -> None:
        if self._request_id is not None and self._request_id != request_id:
            logger.debug(f"Replacing state subscriber {self._request_id!r} with {request_id!r}")
        self._request_id = request_id


class StateNotifier:
    """Feeds a ``sendState`` command to ``deliver`` on every state change.

    Args:
        git_service: Source of state-change notifications
        subscription: Where the target request id is read from
        deliver: Dispatches a command and posts the response to the UI
    """

    def __init__(
        self,
        git_service: GitService,
        subscription: StateSubscription,
        deliver: Callable[[Command], Awaitable[None]],
    ) -> None:
        self._git = git_service
        self._subscription = subscription
        self._deliver = deliver

    def bind(self) -> Disposable:
        """Start listening; dispose the result to stop."""
        return self._git.on_state_changed(self.notify)

    def build_command(self) -> Command:
        # Unregistered subscribers get an empty id the UI will not recognize.
        return Command.send_state(self._subscription.request_id or "")

    async def notify(self) -> None:
        command = self.build_command()
        logger.debug(f"State changed, notifying subscriber {command.request_id!r}")
        await self._deliver(command)
