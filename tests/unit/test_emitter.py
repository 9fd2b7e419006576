"""
Tests for Emitter - event vocabulary over the registry.

This test suite covers:
1. Listener registration (single, list, variadic, appending)
2. Ordered dispatch and waterfall folding
3. once() semantics
4. off() in its three forms
5. Introspection (has_listeners, listeners)
"""

import asyncio

import pytest

import cochain
from cochain import Emitter


class TestOn:
    """Test listener registration."""

    def test_registers_the_listener(self):
        """on() should store the listener under the event name."""
        emitter = Emitter()

        async def gen():
            pass

        emitter.on("helloWorld", gen)
        assert emitter.listeners("helloWorld") == (gen,)

    def test_can_take_a_list(self):
        """on() should accept a list of listeners."""
        emitter = Emitter()

        async def gen():
            pass

        async def gen_b():
            pass

        emitter.on("helloWorld", [gen, gen_b])
        assert emitter.listeners("helloWorld") == (gen, gen_b)

    def test_can_take_multiple_listeners(self):
        """on() should accept several listeners as separate arguments."""
        emitter = Emitter()

        async def gen():
            pass

        async def gen_b():
            pass

        emitter.on("helloWorld", gen, gen_b)
        assert len(emitter.listeners("helloWorld")) == 2

    def test_appends_listeners(self):
        """Later registrations should go after earlier ones."""
        emitter = Emitter()

        async def gen():
            pass

        async def gen_b():
            pass

        emitter.on("helloWorld", gen)
        emitter.on("helloWorld", gen_b)
        listeners = emitter.listeners("helloWorld")
        assert listeners[0] is gen
        assert listeners[1] is gen_b

    def test_returns_the_emitter(self):
        """on() should return the emitter for chaining."""
        emitter = Emitter()

        async def gen():
            pass

        assert emitter.on("helloWorld", gen) is emitter

    def test_duplicates_are_kept(self):
        """Registering the same listener twice should invoke it twice."""
        emitter = Emitter()
        calls = []

        def listener():
            calls.append(1)

        emitter.on("dup", listener).on("dup", listener)
        emitter.emit_sync("dup")
        assert calls == [1, 1]


class TestEmit:
    """Test ordered dispatch and waterfall folding."""

    @pytest.mark.asyncio
    async def test_runs_listeners_in_registration_order(self):
        """Each listener should see all earlier listeners completed."""
        called = {"first": False, "second": False, "third": False}

        async def first():
            assert called == {"first": False, "second": False, "third": False}
            await asyncio.sleep(0)
            called["first"] = True

        async def second():
            assert called == {"first": True, "second": False, "third": False}
            await asyncio.sleep(0)
            called["second"] = True

        async def third():
            assert called == {"first": True, "second": True, "third": False}
            called["third"] = True

        emitter = Emitter()
        emitter.on("helloWorld", [first, second, third])
        await emitter.emit("helloWorld")

        assert all(called.values())

    @pytest.mark.asyncio
    async def test_waterfalls_the_results(self):
        """Each result should become the next listener's arguments."""

        async def first(a, b):
            assert (a, b) == ("a", "b")
            return [1, 2]

        async def second(a, b):
            assert (a, b) == (1, 2)
            return "woo"

        async def third(a):
            assert a == "woo"
            return "yay"

        emitter = Emitter()
        emitter.on("test", [first, second, third])
        assert await emitter.emit("test", "a", "b") == "yay"

    @pytest.mark.asyncio
    async def test_listeners_that_return_nothing(self):
        """Arguments should pass through when no listener returns anything."""
        emitter = Emitter()

        async def listener(*args):
            pass

        emitter.on("test", listener)
        assert await emitter.emit("test", 1, 2, 3) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_returns_the_args_if_no_listener_exists(self):
        """Unregistered events should pass the arguments through."""
        emitter = Emitter()
        assert await emitter.emit("bogus", "a", "b") == ["a", "b"]
        assert await emitter.emit("bogus", "a") == "a"

    @pytest.mark.asyncio
    async def test_sync_listeners_do_not_fold(self):
        """Return values of synchronous listeners should be ignored."""
        emitter = Emitter()
        seen = []

        def audit(*args):
            seen.append(args)
            return "ignored"

        emitter.on("sync", audit)
        assert await emitter.emit("sync", "x", "y") == ["x", "y"]
        assert seen == [("x", "y")]

    def test_emit_sync(self):
        """emit_sync() should run synchronous listeners without a loop."""
        emitter = Emitter()
        seen = []
        emitter.on("sync", lambda value: seen.append(value))
        assert emitter.emit_sync("sync", 42) == 42
        assert seen == [42]

    @pytest.mark.asyncio
    async def test_listener_failure_aborts_chain(self):
        """A failing listener should propagate and stop later listeners."""
        emitter = Emitter()
        reached = []

        async def boom(*args):
            raise ValueError("boom")

        async def after(*args):
            reached.append(True)

        emitter.on("fail", boom, after)
        with pytest.raises(ValueError, match="boom"):
            await emitter.emit("fail", 1)
        assert reached == []


class TestOnce:
    """Test once() semantics."""

    @pytest.mark.asyncio
    async def test_attaches_a_listener_and_removes_it(self):
        """A once-listener should run on exactly one emit."""
        emitter = Emitter()
        count = {"n": 0}

        async def gen():
            count["n"] += 1

        emitter.once("test", gen)
        assert emitter.has_listeners("test")
        await emitter.emit("test")
        await emitter.emit("test")
        assert count["n"] == 1
        assert not emitter.has_listeners("test")

    @pytest.mark.asyncio
    async def test_once_result_still_folds(self):
        """The wrapped listener's result should fold on its single run."""
        emitter = Emitter()

        async def double(x):
            return x * 2

        emitter.once("calc", double)
        assert await emitter.emit("calc", 4) == 8
        assert await emitter.emit("calc", 4) == 4

    def test_once_sync_listener(self):
        """Synchronous once-listeners should work with emit_sync()."""
        emitter = Emitter()
        calls = []
        emitter.once("tick", lambda: calls.append(1))
        emitter.emit_sync("tick")
        emitter.emit_sync("tick")
        assert calls == [1]


class TestOff:
    """Test off() in its three forms."""

    @pytest.fixture
    def populated(self):
        emitter = Emitter()

        async def first():
            pass

        async def second():
            pass

        emitter.on("test", first, second)
        emitter.on("anotherTest", first)
        return emitter, first, second

    def test_removes_all_listeners_if_no_name_provided(self, populated):
        """off() should clear every event."""
        emitter, first, second = populated
        emitter.off()
        assert emitter.names() == ()

    def test_removes_all_listeners_of_name_if_name_provided(self, populated):
        """off(name) should clear only that event."""
        emitter, first, second = populated
        emitter.off("test")
        assert emitter.names() == ("anotherTest",)
        assert emitter.listeners("anotherTest") == (first,)

    def test_removes_specific_listener(self, populated):
        """off(name, listener) should remove only that listener."""
        emitter, first, second = populated
        emitter.off("test", second)
        assert emitter.listeners("test") == (first,)
        assert emitter.listeners("anotherTest") == (first,)

    def test_removing_unknown_listener_is_a_noop(self, populated):
        """off() with unknown names or listeners should not raise."""
        emitter, first, second = populated
        emitter.off("missing", first)
        emitter.off("anotherTest", second)
        assert emitter.listeners("anotherTest") == (first,)


class TestIntrospection:
    """Test has_listeners() and listeners()."""

    def test_has_listeners_true(self):
        emitter = Emitter()

        async def gen():
            pass

        emitter.on("test", gen)
        assert emitter.has_listeners("test") is True

    def test_has_listeners_false(self):
        assert Emitter().has_listeners("test") is False

    def test_listeners_empty(self):
        """listeners() should return an empty tuple for unknown events."""
        assert Emitter().listeners("test") == ()

    def test_listeners_is_a_snapshot(self):
        """Mutating the registry should not change an earlier listeners() result."""
        emitter = Emitter()

        @cochain.suspending
        async def gen():
            pass

        emitter.on("test", gen)
        before = emitter.listeners("test")
        emitter.off("test")
        assert len(before) == 1
