"""
Registry - Named handler chains with waterfall dispatch.

A registry maps chain names to ordered handler lists. Dispatch walks one
chain front-to-back, one handler at a time:

- SYNC handlers are invoked for their side effects; their return value is ignored
- SUSPENDING handlers are awaited and their result becomes the next handler's arguments

Each chain name carries one calling convention, fixed by its first handler.
"""

import inspect
import logging
import warnings
from collections.abc import Callable
from typing import Any

from cochain.config import RegistrySettings
from cochain.core.handler import (
    Handler,
    HandlerStyle,
    _OnceBase,
    classify,
    wrap_once,
)
from cochain.core.result import NOTHING, Result, as_result, fold, unwrap

logger = logging.getLogger(__name__)


class ChainError(Exception):
    """Base exception for handler chain errors."""

    pass


class RegistrationError(ChainError):
    """Raised when a handler cannot be registered."""

    pass


class StyleConflictError(RegistrationError):
    """Raised when a handler's calling convention differs from its chain's."""

    pass


class DispatchError(ChainError):
    """Raised when a chain cannot be dispatched the way it was asked to be."""

    pass


class Registry:
    """
    Handler chain registry.

    Owns the chain-name -> handler-list mapping and the chain-name -> style
    mapping. Handlers are referenced, never copied.

    Args:
        settings: Registry settings (defaults when omitted)
        style: Fix every chain of this registry to one calling convention
    """

    def __init__(
        self,
        settings: RegistrySettings | None = None,
        style: HandlerStyle | None = None,
    ):
        self.settings = settings if settings is not None else RegistrySettings()
        self._fixed_style = style
        self._chains: dict[str, list[Handler]] = {}
        self._styles: dict[str, HandlerStyle] = {}

    # Registration

    def register(self, name: str, *handlers: Any) -> "Registry":
        """
        Append handlers to a chain, creating it if absent.

        Accepts one handler, several handlers, or a single list/tuple of handlers.
        Untagged callables are classified with the default_style setting.

        Raises:
            RegistrationError: If no handler is given or one is not callable
            StyleConflictError: If a handler's style conflicts with the chain's
        """
        return self._register(name, handlers, self._default_style())

    def register_sync(self, name: str, *handlers: Any) -> "Registry":
        """Like register(), treating untagged callables as synchronous."""
        return self._register(name, handlers, HandlerStyle.SYNC.value)

    def register_async(self, name: str, *handlers: Any) -> "Registry":
        """Like register(), treating untagged callables as suspending."""
        return self._register(name, handlers, HandlerStyle.SUSPENDING.value)

    def _default_style(self) -> str:
        if self._fixed_style is not None:
            return self._fixed_style.value
        return self.settings.default_style

    def _register(
        self, name: str, handlers: tuple[Any, ...], default_style: str
    ) -> "Registry":
        if len(handlers) == 1 and isinstance(handlers[0], (list, tuple)):
            handlers = tuple(handlers[0])
        if not handlers:
            raise RegistrationError(f"No handler given for chain '{name}'")

        tagged = []
        for handler in handlers:
            try:
                tagged.append(classify(handler, default_style))
            except TypeError as e:
                raise RegistrationError(f"Cannot register on '{name}': {e}") from e

        self._check_styles(name, tagged)

        self._styles.setdefault(name, tagged[0].style)
        self._chains.setdefault(name, []).extend(tagged)
        logger.debug("registered %d handler(s) on %r", len(tagged), name)
        return self

    def _check_styles(self, name: str, tagged: list[Handler]) -> None:
        """Validate a whole batch before any of it is stored."""
        if self._fixed_style is not None:
            for handler in tagged:
                if handler.style is not self._fixed_style:
                    raise StyleConflictError(
                        f"Chain '{name}' only accepts {self._fixed_style.value} "
                        f"handlers, got {handler.style.value} handler {handler.callback!r}"
                    )

        if not self.settings.enforce_styles:
            return

        expected = self._styles.get(name, tagged[0].style)
        for handler in tagged:
            if handler.style is not expected:
                raise StyleConflictError(
                    f"Chain '{name}' is {expected.value}; cannot add "
                    f"{handler.style.value} handler {handler.callback!r}"
                )

    def once(self, name: str, handler: Any) -> None:
        """
        Register a handler that runs on the next dispatch only.

        The wrapper removes itself after its first invocation, also when the
        handler raises. Its result folds into the chain like any other.
        """
        try:
            tagged = classify(handler, self._default_style())
        except TypeError as e:
            raise RegistrationError(f"Cannot register on '{name}': {e}") from e
        self.register(name, wrap_once(self, name, tagged))

    # Removal

    def remove(self, name: str | None = None, handler: Any = None) -> None:
        """
        Remove handlers.

        remove()              clears every chain and its style
        remove(name)          drops one chain and its style
        remove(name, handler) drops the first entry matching handler by identity

        Missing chains and handlers are ignored.
        """
        if name is None:
            self._chains.clear()
            self._styles.clear()
            logger.debug("cleared all chains")
            return

        if handler is None:
            self._chains.pop(name, None)
            self._styles.pop(name, None)
            logger.debug("cleared chain %r", name)
            return

        chain = self._chains.get(name)
        if not chain:
            return
        for index, entry in enumerate(chain):
            if _matches(entry, handler):
                del chain[index]
                logger.debug("removed handler %r from %r", handler, name)
                return

    # Introspection

    def has_handlers(self, name: str) -> bool:
        """Return True if the chain has at least one handler."""
        return bool(self._chains.get(name))

    def handlers_for(self, name: str) -> tuple[Callable, ...]:
        """Return the chain's callbacks in dispatch order (a read-only snapshot)."""
        return tuple(entry.callback for entry in self._chains.get(name, ()))

    def style_of(self, name: str) -> HandlerStyle | None:
        """Return the chain's calling convention, or None if not yet fixed."""
        return self._styles.get(name)

    def names(self) -> tuple[str, ...]:
        """Return the names of all chains currently held."""
        return tuple(self._chains)

    # Dispatch

    async def dispatch(self, name: str, *args: Any) -> Any:
        """
        Run a chain with waterfall folding.

        Handlers run strictly in order; a suspending handler is awaited before
        the next one starts. Handler exceptions propagate and abort the chain.

        Returns:
            The single remaining argument, or a list of the remaining arguments
        """
        current: tuple[Any, ...] = args
        for entry in self._snapshot(name):
            outcome = await self._invoke(name, entry, current)
            current = fold(current, outcome)
        return unwrap(current)

    def dispatch_sync(self, name: str, *args: Any) -> Any:
        """
        Run a chain of synchronous handlers without an event loop.

        Raises:
            DispatchError: If the chain holds a suspending handler (nothing runs)
        """
        snapshot = self._snapshot(name)
        for entry in snapshot:
            if entry.style is HandlerStyle.SUSPENDING:
                raise DispatchError(
                    f"Chain '{name}' has suspending handlers; await dispatch() instead"
                )

        for entry in snapshot:
            try:
                entry.callback(*args)
            except Exception:
                logger.debug("handler %r failed on %r", entry.callback, name)
                raise
        return unwrap(args)

    def _snapshot(self, name: str) -> tuple[Handler, ...]:
        snapshot = tuple(self._chains.get(name, ()))
        if not snapshot and self.settings.warn_unhandled:
            warnings.warn(
                f"No handlers registered for '{name}'",
                RuntimeWarning,
                stacklevel=3,
            )
        logger.debug("dispatching %r to %d handler(s)", name, len(snapshot))
        return snapshot

    async def _invoke(
        self, name: str, entry: Handler, args: tuple[Any, ...]
    ) -> Result:
        try:
            outcome = entry.callback(*args)
            if entry.style is HandlerStyle.SYNC:
                return NOTHING
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception:
            logger.debug("handler %r failed on %r", entry.callback, name)
            raise
        return as_result(outcome)

    def __repr__(self) -> str:
        counts = {name: len(chain) for name, chain in self._chains.items()}
        return f"{type(self).__name__}({counts})"


def _matches(entry: Handler, target: Any) -> bool:
    """Identity match against a stored entry, its callback, or a once-wrapper's listener."""
    if entry is target:
        return True
    callback = target.callback if isinstance(target, Handler) else target
    if entry.callback is callback:
        return True
    return isinstance(entry.callback, _OnceBase) and entry.callback.listener is callback
