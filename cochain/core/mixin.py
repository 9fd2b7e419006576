"""
Composition helpers - give any object its own registry without inheritance.

Two forms:

1. component(): a descriptor declared on a host class; each host instance
   lazily gets its own registry.

       class Connection:
           events = component(Emitter)

       conn = Connection()
       conn.events.on("close", cleanup)

2. bind(): look up (or create) the registry associated with an existing object.
   The object itself is not modified.

       events = bind(some_object)
       events.on("ready", handler)
"""

import weakref
from collections.abc import Callable
from typing import Any

from cochain.core.emitter import Emitter
from cochain.core.registry import Registry

Factory = Callable[[], Registry]


class component:
    """
    Descriptor holding one registry per host instance.

    Args:
        factory: Builds the registry on first access (default: Emitter)
    """

    def __init__(self, factory: Factory = Emitter):
        self.factory = factory
        self.attr: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.attr = f"_cochain_{name}"

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        if self.attr is None:
            raise TypeError("component() must be assigned in a class body")
        registry = instance.__dict__.get(self.attr)
        if registry is None:
            registry = self.factory()
            instance.__dict__[self.attr] = registry
        return registry


_bound: dict[Factory, dict[int, Registry]] = {}


def bind(target: Any, factory: Factory = Emitter) -> Registry:
    """
    Return the registry associated with target, creating it on first use.

    Targets are matched by identity, so distinct targets get independent
    registries even when they compare equal. The association is dropped when
    target is garbage collected.

    Raises:
        TypeError: If target cannot be weakly referenced (e.g. dict, int)
    """
    registries = _bound.setdefault(factory, {})
    key = id(target)
    registry = registries.get(key)
    if registry is not None:
        return registry

    registry = factory()
    try:
        weakref.finalize(target, registries.pop, key, None)
    except TypeError as e:
        raise TypeError(
            f"Cannot bind a registry to {type(target).__name__} instances: {e}"
        ) from e
    registries[key] = registry
    return registry
