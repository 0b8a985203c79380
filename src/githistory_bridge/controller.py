"""API Controller - bridge between the history webview and the git service.

Owns the command table, the dispatcher, the state subscription and the
channel subscriptions. Each handler validates the untyped payload sent
by the UI, delegates to a collaborator and returns a JSON-friendly
result.

Usage:
    controller = ApiController(webview, git_service, providers, shell, commands, viewer)
    controller.activate()
    ...
    controller.dispose()
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

import pydantic

from .avatars import AvatarProviderSet
from .config import BridgeSettings
from .disposable import DisposableStore
from .protocol import (
    BridgeError,
    Command,
    CommandTable,
    CommandType,
    Dispatcher,
    ErrorCode,
    LifecycleError,
    MissingOriginTypeError,
    PayloadValidationError,
    Response,
)
from .state import StateNotifier, StateSubscription
from .tasks import BackgroundTasks
from .types import CommitDetails, FileCommitDetails, Ref, RefType

if TYPE_CHECKING:
    from .interfaces import (
        ApplicationShell,
        AvatarProvider,
        CommandManager,
        CommitViewer,
        GitService,
        Webview,
    )

logger = logging.getLogger(__name__)

NO_ORIGIN_TYPE_MESSAGE = "No origin type found"


class ControllerState(str, Enum):
    CONSTRUCTED = "constructed"
    ACTIVE = "active"
    DISPOSED = "disposed"


# =============================================================================
# Payload helpers
# =============================================================================


def _args(payload: Any) -> Mapping[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise PayloadValidationError(f"Payload must be an object, got {type(payload).__name__}")
    return payload


def _parse_int(value: Any, field: str) -> int:
    """Parse an integer field; numeric strings are read base 10."""
    if isinstance(value, bool):
        raise PayloadValidationError(f"{field} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    try:
        return int(str(value).strip(), 10)
    except ValueError:
        raise PayloadValidationError(f"{field} must be an integer, got {value!r}") from None


def _require_str(args: Mapping[str, Any], field: str) -> str:
    value = args.get(field)
    if not isinstance(value, str) or not value:
        raise PayloadValidationError(f"Missing required field: {field}")
    return value


def _log_entry(args: Mapping[str, Any]) -> MutableMapping[str, Any]:
    entry = args.get("logEntry")
    if not isinstance(entry, MutableMapping):
        raise PayloadValidationError("Missing required field: logEntry")
    return entry


def _entry_hash(entry: Mapping[str, Any]) -> str:
    hash_ = entry.get("hash")
    full = hash_.get("full") if isinstance(hash_, Mapping) else None
    if not isinstance(full, str) or not full:
        raise PayloadValidationError("logEntry.hash.full is required")
    return full


def _ref_name(args: Mapping[str, Any]) -> str:
    try:
        ref = Ref.model_validate(args.get("ref"))
    except pydantic.ValidationError as e:
        raise PayloadValidationError(f"Invalid ref: {e}") from e
    if not ref.name:
        raise PayloadValidationError("ref.name is required")
    return ref.name


class ApiController:
    """Serves the history webview.

    Lifecycle: constructed -> active (``activate``) -> disposed
    (``dispose``). Disposal is idempotent and releases the message
    channel and state-change subscriptions exactly once.

    Without explicit ``avatar_providers`` the GitHub and Gravatar
    providers are built from ``settings``.
    """

    def __init__(
        self,
        webview: Webview,
        git_service: GitService,
        avatar_providers: AvatarProviderSet | Iterable[AvatarProvider] | None,
        application_shell: ApplicationShell,
        command_manager: CommandManager,
        commit_viewer: CommitViewer,
        settings: BridgeSettings | None = None,
    ) -> None:
        self._webview = webview
        self._git = git_service
        self._commands = command_manager
        self._commit_viewer = commit_viewer
        self._settings = settings or BridgeSettings()
        if avatar_providers is None:
            self._avatar_providers = AvatarProviderSet.from_settings(self._settings)
        elif isinstance(avatar_providers, AvatarProviderSet):
            self._avatar_providers = avatar_providers
        else:
            self._avatar_providers = AvatarProviderSet(avatar_providers)

        self._background = BackgroundTasks()
        self._subscription = StateSubscription()
        self._table = CommandTable(
            {
                CommandType.GET_LOG_ENTRIES.value: self.get_log_entries,
                CommandType.GET_BRANCHES.value: self.get_branches,
                CommandType.GET_AUTHORS.value: self.get_authors,
                CommandType.GET_COMMIT.value: self.get_commit,
                CommandType.GET_AVATARS.value: self.get_avatars,
                CommandType.DO_ACTION_REF.value: self.do_action_ref,
                CommandType.DO_ACTION.value: self.do_action,
                CommandType.DO_SOMETHING_WITH_COMMIT.value: self.do_something_with_commit,
                CommandType.SELECT_COMMITTED_FILE.value: self.select_committed_file,
                CommandType.REGISTER_STATE.value: self.register_state,
                CommandType.SEND_STATE.value: self.send_state,
            }
        )
        self._dispatcher = Dispatcher(self._table, application_shell, self._background)
        self._notifier = StateNotifier(git_service, self._subscription, self.deliver)
        self._disposables = DisposableStore()
        self._state = ControllerState.CONSTRUCTED

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def webview(self) -> Webview:
        return self._webview

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def table(self) -> CommandTable:
        return self._table

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def subscription(self) -> StateSubscription:
        return self._subscription

    @property
    def notifier(self) -> StateNotifier:
        return self._notifier

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def activate(self) -> ApiController:
        """Bind the message channel and the state-change subscription."""
        if self._state is not ControllerState.CONSTRUCTED:
            raise LifecycleError(f"Cannot activate a controller that is {self._state.value}")

        self._disposables.add(self._webview.on_did_receive_message(self.on_message))
        self._disposables.add(self._notifier.bind())
        self._state = ControllerState.ACTIVE
        logger.debug("Controller activated")
        return self

    def dispose(self) -> None:
        """Release both subscriptions. Safe to call any number of times."""
        if self._state is ControllerState.DISPOSED:
            return
        self._state = ControllerState.DISPOSED
        self._disposables.dispose()
        logger.debug("Controller disposed")

    def __enter__(self) -> ApiController:
        return self.activate()

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    async def wait_idle(self) -> None:
        """Wait for fire-and-forget collaborator calls to finish."""
        await self._background.drain()

    # =========================================================================
    # Message channel
    # =========================================================================

    async def on_message(self, message: Any) -> None:
        """Entry point for raw messages arriving from the webview."""
        if self._state is ControllerState.DISPOSED:
            logger.debug("Dropping message received after dispose")
            return

        try:
            command = Command.model_validate(message)
        except pydantic.ValidationError as e:
            request_id = ""
            if isinstance(message, Mapping) and isinstance(message.get("requestId"), str):
                request_id = message["requestId"]
            logger.warning(f"Invalid message from webview: {e}")
            error = BridgeError(f"Invalid message: {e}", code=ErrorCode.PARSE_ERROR)
            await self._webview.post_message(Response.failure(request_id, error.to_dict()).to_message())
            return

        await self.deliver(command)

    async def deliver(self, command: Command) -> None:
        """Dispatch a command and post the correlated response."""
        response = await self._dispatcher.dispatch(command)
        await self._webview.post_message(response.to_message())

    # =========================================================================
    # History queries
    # =========================================================================

    async def get_log_entries(self, payload: Any) -> dict[str, Any]:
        args = _args(payload)

        search_text = args.get("searchText")
        if isinstance(search_text, str) and not search_text:
            search_text = None

        start_index = (
            _parse_int(args["startIndex"], "startIndex")
            if args.get("startIndex")
            else self._settings.default_start_index
        )
        stop_index = (
            _parse_int(args["stopIndex"], "stopIndex")
            if args.get("stopIndex")
            else self._settings.default_stop_index
        )

        author = args.get("authorFilter") if isinstance(args.get("authorFilter"), str) else None
        line_number = _parse_int(args["line"], "line") if args.get("line") else None
        branch = args.get("branchName")
        file_path = args.get("file")
        file = Path(file_path) if file_path else None

        entries = await self._git.get_log_entries(
            start_index,
            stop_index,
            branch,
            search_text,
            file,
            line_number,
            author,
        )
        return {**dict(entries), "startIndex": start_index, "stopIndex": stop_index}

    async def get_branches(self, payload: Any = None) -> Any:
        return await self._git.get_branches()

    async def get_authors(self, payload: Any = None) -> Any:
        return await self._git.get_authors()

    async def get_commit(self, payload: Any) -> Any:
        hash_ = _require_str(_args(payload), "hash")
        git_root = self._git.get_git_root()
        branch = self._git.get_current_branch()

        commit = await self._git.get_commit(hash_)
        self._commit_viewer.view_commit_tree(CommitDetails(git_root, branch, commit))
        return commit

    async def get_avatars(self, payload: Any = None) -> Any:
        origin_type = await self._git.get_origin_type()
        if not origin_type:
            if self._settings.legacy_avatar_error_push:
                await self._webview.post_message(
                    {"cmd": "getAvatarsResult", "error": NO_ORIGIN_TYPE_MESSAGE}
                )
                return None
            raise MissingOriginTypeError()

        provider = self._avatar_providers.select(origin_type)
        return await provider.get_avatars(self._git)

    # =========================================================================
    # Mutations
    # =========================================================================

    async def do_action_ref(self, payload: Any) -> Any:
        """Remove a ref, then re-fetch the commit from the git service."""
        args = _args(payload)
        action = args.get("name")
        hash_ = unquote(_require_str(args, "hash"))

        match action:
            case "removeTag":
                await self._git.remove_tag(_ref_name(args))
            case "removeBranch":
                await self._git.remove_branch(_ref_name(args))
            case "removeRemote":
                await self._git.remove_remote_branch(_ref_name(args))
            case _:
                logger.debug(f"Ignoring unknown ref action: {action!r}")

        return await self._git.get_commit(hash_, refresh=True)

    async def do_action(self, payload: Any) -> Any:
        """Apply a commit action.

        New tags and branches are appended to the log entry's refs
        locally instead of re-fetching the commit.
        """
        args = _args(payload)
        git_root = self._git.get_git_root()
        branch = self._git.get_current_branch()

        action = args.get("name")
        raw_value = args.get("value")
        value = unquote(str(raw_value)) if raw_value is not None else ""
        log_entry = args.get("logEntry")

        match action:
            case "newtag":
                log_entry = _log_entry(args)
                name, hash_, refs = self._ref_target(log_entry, value, action)
                await self._git.create_tag(name, hash_)
                refs.append(Ref(type=RefType.TAG, name=name).model_dump())
            case "newbranch":
                log_entry = _log_entry(args)
                name, hash_, refs = self._ref_target(log_entry, value, action)
                await self._git.create_branch(name, hash_)
                refs.append(Ref(type=RefType.HEAD, name=name).model_dump())
            case "reset_hard":
                await self._git.reset(_entry_hash(_log_entry(args)), hard=True)
            case "reset_soft":
                await self._git.reset(_entry_hash(_log_entry(args)))
            case _:
                await self._commands.execute_command(
                    self._settings.commit_action_command,
                    CommitDetails(git_root, branch, log_entry),
                )

        return log_entry

    @classmethod
    def _ref_target(
        cls, log_entry: MutableMapping[str, Any], value: str, action: str
    ) -> tuple[str, str, list[Any]]:
        """Validate everything a new ref needs before the repository is touched."""
        if not value:
            raise PayloadValidationError(f"{action} requires a value")
        return value, _entry_hash(log_entry), cls._refs(log_entry)

    @staticmethod
    def _refs(log_entry: MutableMapping[str, Any]) -> list[Any]:
        refs = log_entry.setdefault("refs", [])
        if not isinstance(refs, list):
            raise PayloadValidationError("logEntry.refs must be a list")
        return refs

    # =========================================================================
    # External commands
    # =========================================================================

    async def do_something_with_commit(self, payload: Any) -> None:
        args = _args(payload)
        details = CommitDetails(
            self._git.get_git_root(), self._git.get_current_branch(), args.get("logEntry")
        )
        self._background.spawn(
            self._commands.execute_command(self._settings.commit_action_command, details),
            name=self._settings.commit_action_command,
        )

    async def select_committed_file(self, payload: Any) -> None:
        args = _args(payload)
        details = FileCommitDetails(
            self._git.get_git_root(),
            self._git.get_current_branch(),
            args.get("logEntry"),
            args.get("committedFile"),
        )
        self._background.spawn(
            self._commands.execute_command(self._settings.file_select_command, details),
            name=self._settings.file_select_command,
        )

    # =========================================================================
    # State push
    # =========================================================================

    async def register_state(self, payload: Any) -> None:
        request_id = _args(payload).get("requestId")
        if request_id is None or isinstance(request_id, bool):
            raise PayloadValidationError("Missing required field: requestId")
        self._subscription.register(str(request_id))

    async def send_state(self, payload: Any) -> Any:
        return payload
