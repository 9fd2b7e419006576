"""
Emitter and Middleware - the two vocabularies over Registry.

Emitter: events with mixed calling conventions (one convention per event name).
Middleware: suspending-only middleware slots; every handler's result folds.
"""

from typing import Any

from cochain.config import RegistrySettings
from cochain.core.handler import HandlerStyle
from cochain.core.registry import Registry


class Emitter(Registry):
    """
    Event emitter with waterfall dispatch.

    Example:
        events = Emitter()

        async def parse(raw):
            return raw.split(",")

        events.on("line", parse)
        fields = await events.emit("line", "a,b")  # ['a', 'b']
    """

    def on(self, event: str, *listeners: Any) -> "Emitter":
        """Register listeners for an event (single, variadic or list form)."""
        return self.register(event, *listeners)

    def on_sync(self, event: str, *listeners: Any) -> "Emitter":
        """Register listeners, treating untagged callables as synchronous."""
        return self.register_sync(event, *listeners)

    def on_async(self, event: str, *listeners: Any) -> "Emitter":
        """Register listeners, treating untagged callables as suspending."""
        return self.register_async(event, *listeners)

    def off(self, event: str | None = None, listener: Any = None) -> None:
        """Remove all listeners, one event's listeners, or a single listener."""
        self.remove(event, listener)

    async def emit(self, event: str, *args: Any) -> Any:
        """Run an event's listeners in order and return the folded arguments."""
        return await self.dispatch(event, *args)

    def emit_sync(self, event: str, *args: Any) -> Any:
        """Run an event whose listeners are all synchronous, without an event loop."""
        return self.dispatch_sync(event, *args)

    def has_listeners(self, event: str) -> bool:
        """Return True if the event has at least one listener."""
        return self.has_handlers(event)

    def listeners(self, event: str) -> tuple:
        """Return the event's listeners in dispatch order."""
        return self.handlers_for(event)


class Middleware(Registry):
    """
    Suspending-only middleware runner.

    Plain functions are accepted and their return values fold like those of
    coroutine functions. Synchronously tagged handlers are rejected.

    Example:
        mw = Middleware()
        mw.middleware("request", authenticate, load_user)
        request, user = await mw.run("request", request, None)
    """

    def __init__(self, settings: RegistrySettings | None = None):
        super().__init__(settings=settings, style=HandlerStyle.SUSPENDING)

    def middleware(self, name: str, *middlewares: Any) -> "Middleware":
        """Register middlewares for a slot (single, variadic or list form)."""
        return self.register(name, *middlewares)

    async def run(self, name: str, *args: Any) -> Any:
        """Run a slot's middlewares in order and return the folded arguments."""
        return await self.dispatch(name, *args)

    def remove_middleware(self, name: str | None = None, middleware: Any = None) -> None:
        """Remove all middlewares, one slot's middlewares, or a single middleware."""
        self.remove(name, middleware)

    def has_middlewares(self, name: str) -> bool:
        """Return True if the slot has at least one middleware."""
        return self.has_handlers(name)

    def middlewares(self, name: str) -> tuple:
        """Return the slot's middlewares in run order."""
        return self.handlers_for(name)
