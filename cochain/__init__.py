"""
cochain - Sequential waterfall handler pipelines.

Named handler chains run in registration order; each suspending handler's
result becomes the next handler's arguments.

Example:
    import cochain

    events = cochain.Emitter()

    async def first(a, b):
        return [a + b, a * b]

    async def second(total, product):
        return f"{total}/{product}"

    events.on("calc", first, second)
    await events.emit("calc", 2, 3)  # '5/6'
"""

__version__ = "0.1.0"

from cochain.config import ConfigError, RegistrySettings, load_settings
from cochain.core.emitter import Emitter, Middleware
from cochain.core.handler import Handler, HandlerStyle, suspending, sync
from cochain.core.mixin import bind, component
from cochain.core.registry import (
    ChainError,
    DispatchError,
    Registry,
    RegistrationError,
    StyleConflictError,
)
from cochain.core.result import NOTHING, Many, Nothing, Single

__all__ = [
    "__version__",
    "Emitter",
    "Middleware",
    "Registry",
    "Handler",
    "HandlerStyle",
    "sync",
    "suspending",
    "component",
    "bind",
    "NOTHING",
    "Nothing",
    "Single",
    "Many",
    "ChainError",
    "RegistrationError",
    "StyleConflictError",
    "DispatchError",
    "ConfigError",
    "RegistrySettings",
    "load_settings",
]
