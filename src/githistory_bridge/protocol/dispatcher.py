"""Command table and dispatcher.

Transport-agnostic core: a command name is resolved through a fixed
table to an async handler, the handler runs with the command payload,
and the outcome is wrapped in a response correlated by ``requestId``.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .commands import Command
from .errors import BridgeError, UnknownCommandError, normalize_error
from .responses import Response

if TYPE_CHECKING:
    from ..interfaces import ApplicationShell
    from ..tasks import BackgroundTasks

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


class CommandTable(Mapping[str, Handler]):
    """Immutable mapping from command name to handler.

    Built once from the handlers given at construction. There is no
    way to add or remove entries afterwards.
    """

    def __init__(self, handlers: Mapping[str, Handler]) -> None:
        for name, handler in handlers.items():
            if not callable(handler):
                raise TypeError(f"Handler for {name!r} is not callable")
        self._handlers: Mapping[str, Handler] = MappingProxyType(dict(handlers))

    def __getitem__(self, name: str) -> Handler:
        return self._handlers[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def resolve(self, name: str) -> Handler:
        """Look up a handler, raising UnknownCommandError when absent."""
        try:
            return self._handlers[name]
        except KeyError:
            raise UnknownCommandError(name) from None

    def names(self) -> list[str]:
        """Sorted list of registered command names."""
        return sorted(self._handlers)


class Dispatcher:
    """Turns commands into responses.

    ``dispatch`` never raises: unknown commands, payload validation
    failures and anything a handler throws are reported to the
    application shell (without waiting on it) and returned as an error
    response carrying the same ``requestId``.
    """

    def __init__(
        self,
        table: CommandTable,
        shell: ApplicationShell,
        background: BackgroundTasks,
    ) -> None:
        self._table = table
        self._shell = shell
        self._background = background

    @property
    def table(self) -> CommandTable:
        return self._table

    async def dispatch(self, command: Command) -> Response:
        """Run the handler for a command and build the correlated response."""
        logger.debug(f"Dispatching command: {command.cmd} (requestId={command.request_id!r})")

        try:
            handler = self._table.resolve(command.cmd)
            result = await handler(command.payload)
        except BridgeError as e:
            logger.warning(f"Command {command.cmd} (requestId={command.request_id!r}) failed: {e}")
            return self._fail(command, e)
        except Exception as e:
            logger.exception(f"Error handling command {command.cmd} (requestId={command.request_id!r}): {e}")
            return self._fail(command, e)

        response = Response.result(command.request_id, result)
        try:
            response.to_message()
        except ValueError as e:
            logger.exception(f"Cannot serialize result of {command.cmd} (requestId={command.request_id!r}): {e}")
            return self._fail(command, e)
        return response

    def _fail(self, command: Command, exc: Exception) -> Response:
        self._show_error(command, exc)
        return Response.failure(command.request_id, normalize_error(exc).to_dict())

    def _show_error(self, command: Command, exc: Exception) -> None:
        """Hand the error to the shell without waiting on it."""
        try:
            pending = self._shell.show_error_message(exc)
        except Exception:
            logger.exception(f"Error showing failure of {command.cmd}")
            return
        if inspect.isawaitable(pending):
            self._background.spawn(pending, name=f"show-error:{command.cmd}")
