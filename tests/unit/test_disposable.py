"""Unit tests for disposables and the event emitter."""

import pytest

from githistory_bridge.disposable import Disposable, DisposableStore
from githistory_bridge.emitter import EventEmitter


class TestDisposable:
    def test_dispose_runs_callback_once(self):
        calls = []
        disposable = Disposable(lambda: calls.append(1))

        disposable.dispose()
        disposable.dispose()

        assert calls == [1]
        assert disposable.disposed is True


class TestDisposableStore:
    def test_releases_every_item_once(self):
        calls = []
        store = DisposableStore()
        store.add(Disposable(lambda: calls.append("a")))
        store.add(Disposable(lambda: calls.append("b")))

        store.dispose()
        store.dispose()

        assert calls == ["a", "b"]
        assert store.disposed is True
        assert len(store) == 0

    def test_add_after_dispose_releases_immediately(self):
        calls = []
        store = DisposableStore()
        store.dispose()

        store.add(Disposable(lambda: calls.append("late")))

        assert calls == ["late"]

    def test_failing_item_does_not_skip_others(self):
        calls = []

        def fail():
            raise RuntimeError("cannot release")

        store = DisposableStore()
        store.add(Disposable(fail))
        store.add(Disposable(lambda: calls.append("b")))

        with pytest.raises(RuntimeError):
            store.dispose()

        assert calls == ["b"]
        # Second dispose is still a no-op
        store.dispose()


class TestEventEmitter:
    @pytest.mark.anyio
    async def test_fire_reaches_listeners_in_order(self):
        seen = []
        emitter: EventEmitter[[str]] = EventEmitter("test")

        async def first(value):
            seen.append(("first", value))

        async def second(value):
            seen.append(("second", value))

        emitter.subscribe(first)
        emitter.subscribe(second)
        await emitter.fire("x")

        assert seen == [("first", "x"), ("second", "x")]

    @pytest.mark.anyio
    async def test_dispose_unsubscribes(self):
        seen = []
        emitter: EventEmitter[[]] = EventEmitter("test")

        async def listener():
            seen.append(1)

        subscription = emitter.subscribe(listener)
        subscription.dispose()
        await emitter.fire()

        assert seen == []
        assert len(emitter) == 0

    @pytest.mark.anyio
    async def test_failing_listener_is_isolated(self):
        seen = []
        emitter: EventEmitter[[]] = EventEmitter("test")

        async def broken():
            raise ValueError("nope")

        async def healthy():
            seen.append(1)

        emitter.subscribe(broken)
        emitter.subscribe(healthy)
        await emitter.fire()

        assert seen == [1]
