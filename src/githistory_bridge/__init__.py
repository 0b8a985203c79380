"""Message-dispatch bridge between a git history webview and a git service.

The webview sends commands (``{"cmd", "requestId", "payload"}``); the
controller resolves each through a fixed command table, runs the
handler and replies with ``{"requestId", "payload"}`` or
``{"requestId", "error"}``. Repository state changes are pushed back
through the same path to the last registered subscriber.
"""

from .avatars import AvatarProviderSet, GithubAvatarProvider, GravatarAvatarProvider
from .config import BridgeSettings, configure_logging, load_settings
from .controller import ApiController, ControllerState
from .disposable import Disposable, DisposableStore
from .emitter import EventEmitter
from .protocol import Command, CommandType, Response

__version__ = "0.1.0"

__all__ = [
    "ApiController",
    "AvatarProviderSet",
    "BridgeSettings",
    "Command",
    "CommandType",
    "ControllerState",
    "Disposable",
    "DisposableStore",
    "EventEmitter",
    "GithubAvatarProvider",
    "GravatarAvatarProvider",
    "Response",
    "configure_logging",
    "load_settings",
]
