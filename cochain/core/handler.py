"""
Handler tagging and once-wrappers.

Calling convention is declared, never guessed from source text:

- sync(fn): fire-and-forget, return value ignored by the dispatcher
- suspending(fn): may return an awaitable; its result feeds the next handler

Both work as decorators. Untagged callables are classified by classify()
according to the registry's default_style setting.
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cochain.core.registry import Registry

logger = logging.getLogger(__name__)


class HandlerStyle(Enum):
    """Calling convention of a handler (and of the chain it belongs to)."""

    SYNC = "sync"
    SUSPENDING = "suspending"


@dataclass(frozen=True, eq=False)
class Handler:
    """
    A callable tagged with its calling convention.

    Attributes:
        callback: The function invoked with the chain's positional arguments
        style: SYNC or SUSPENDING
    """

    callback: Callable
    style: HandlerStyle


def sync(fn: Callable) -> Handler:
    """
    Tag a callable as a synchronous handler.

    Example:
        @cochain.sync
        def audit(*args):
            log.append(args)
    """
    return Handler(callback=fn, style=HandlerStyle.SYNC)


def suspending(fn: Callable) -> Handler:
    """
    Tag a callable as a suspending handler.

    Example:
        @cochain.suspending
        async def normalize(text):
            return text.strip()
    """
    return Handler(callback=fn, style=HandlerStyle.SUSPENDING)


def classify(handler: Any, default_style: str = "auto") -> Handler:
    """
    Turn a handler value into a tagged Handler.

    Args:
        handler: A Handler (kept as is) or a plain callable
        default_style: "auto", "sync" or "suspending"; applies to untagged callables.
            "auto" reads the coroutine-function flag set when the function (or a
            callable object's __call__) was defined.

    Returns:
        Tagged Handler

    Raises:
        TypeError: If handler is not callable
        ValueError: If default_style is unknown
    """
    if isinstance(handler, Handler):
        return handler
    if not callable(handler):
        raise TypeError(f"Handler must be callable, got {type(handler).__name__}")

    if default_style == "auto":
        is_async = inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
            getattr(type(handler), "__call__", None)
        )
        style = HandlerStyle.SUSPENDING if is_async else HandlerStyle.SYNC
    elif default_style == "sync":
        style = HandlerStyle.SYNC
    elif default_style == "suspending":
        style = HandlerStyle.SUSPENDING
    else:
        raise ValueError(f"Unknown handler style: {default_style!r}")

    return Handler(callback=handler, style=style)


class _OnceBase:
    """Common state of the self-removing wrappers."""

    def __init__(self, registry: "Registry", name: str, listener: Callable):
        self.registry = registry
        self.name = name
        self.listener = listener
        self.fired = False

    def _claim(self) -> bool:
        """Mark the wrapper fired and detach it; False if it already fired."""
        if self.fired:
            return False
        self.fired = True
        self._detach()
        return True

    def _detach(self) -> None:
        logger.debug("once-wrapper for %r removing itself", self.name)
        self.registry.remove(self.name, self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.listener!r})"


class SyncOnce(_OnceBase):
    """Once-wrapper for synchronous listeners."""

    def __call__(self, *args: Any) -> Any:
        if not self._claim():
            return None
        return self.listener(*args)


class SuspendingOnce(_OnceBase):
    """Once-wrapper for suspending listeners."""

    async def __call__(self, *args: Any) -> Any:
        # detached before the listener runs
        if not self._claim():
            return None
        outcome = self.listener(*args)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome


def wrap_once(registry: "Registry", name: str, handler: Handler) -> Handler:
    """Build a tagged once-wrapper matching the handler's calling convention."""
    if handler.style is HandlerStyle.SYNC:
        wrapper: _OnceBase = SyncOnce(registry, name, handler.callback)
    else:
        wrapper = SuspendingOnce(registry, name, handler.callback)
    return Handler(callback=wrapper, style=handler.style)
