"""Deterministic release of subscriptions."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Disposable:
    """Wraps a release callback so it runs at most once."""

    def __init__(self, on_dispose: Callable[[], None]) -> None:
        self._on_dispose: Callable[[], None] | None = on_dispose

    @property
    def disposed(self) -> bool:
        return self._on_dispose is None

    def dispose(self) -> None:
        callback, self._on_dispose = self._on_dispose, None
        if callback is not None:
            callback()


class DisposableStore:
    """Collects disposables and releases all of them exactly once.

    Disposables added after the store was disposed are released
    immediately.
    """

    def __init__(self) -> None:
        self._items: list[Disposable] = []
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: Disposable) -> Disposable:
        if self._disposed:
            logger.debug("Store already disposed, releasing new item immediately")
            item.dispose()
        else:
            self._items.append(item)
        return item

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        items, self._items = self._items, []
        errors: list[Exception] = []
        for item in items:
            try:
                item.dispose()
            except Exception as e:
                logger.exception(f"Error releasing {item!r}")
                errors.append(e)
        if errors:
            raise errors[0]
