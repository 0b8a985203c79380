"""Instance-level async event emitter.

Collaborators use this to back ``on_state_changed`` and
``on_did_receive_message``: each subscription returns a Disposable
that removes the listener.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, ParamSpec

from .disposable import Disposable

logger = logging.getLogger(__name__)

P = ParamSpec("P")


class EventEmitter(Generic[P]):
    """Fan-out of one event to async listeners.

    Usage:
        changed: EventEmitter[[]] = EventEmitter()
        subscription = changed.subscribe(on_changed)
        await changed.fire()
        subscription.dispose()
    """

    def __init__(self, name: str = "event") -> None:
        self.name = name
        self._listeners: list[Callable[P, Awaitable[Any]]] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Callable[P, Awaitable[Any]]) -> Disposable:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Disposable(unsubscribe)

    async def fire(self, *args: P.args, **kwargs: P.kwargs) -> None:
        """Call every listener in subscription order.

        A failing listener is logged and does not stop the others.
        """
        for listener in list(self._listeners):
            try:
                await listener(*args, **kwargs)
            except Exception:
                logger.exception(f"Error in listener for {self.name}")
