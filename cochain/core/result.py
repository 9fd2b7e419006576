"""
Handler results and the waterfall folding rule.

A suspending handler's return value decides the argument set for the next
handler in the chain. Results are modelled as a small tagged union:

- Nothing: arguments propagate untouched
- Single(value): next handler receives exactly one positional argument
- Many(values): next handler receives the values unpacked positionally

Handlers may return these directly, or return plain values which are coerced
by as_result().
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Nothing:
    """No result; the current argument set is kept."""


@dataclass(frozen=True)
class Single:
    """One value, passed on as a single positional argument (never unpacked)."""

    value: Any


@dataclass(frozen=True)
class Many:
    """An ordered sequence of values, unpacked positionally for the next handler."""

    values: tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))


Result = Nothing | Single | Many

NOTHING = Nothing()


def as_result(value: Any) -> Result:
    """
    Coerce a handler's return value into a Result.

    Rules:
        None            -> NOTHING
        Result instance -> unchanged
        list / tuple    -> Many(values)
        anything else   -> Single(value)

    Falsy values such as 0, "" and False are real results, not absence.
    To forward a list as one argument, return Single([...]) explicitly.
    """
    if value is None:
        return NOTHING
    if isinstance(value, (Nothing, Single, Many)):
        return value
    if isinstance(value, (list, tuple)):
        return Many(tuple(value))
    return Single(value)


def fold(args: tuple[Any, ...], result: Result) -> tuple[Any, ...]:
    """Compute the argument set for the next handler."""
    if isinstance(result, Nothing):
        return args
    if isinstance(result, Single):
        return (result.value,)
    if isinstance(result, Many):
        return result.values
    raise TypeError(f"Expected a Result, got {type(result).__name__}")


def unwrap(args: tuple[Any, ...]) -> Any:
    """
    Shape the final dispatch result.

    Exactly one argument is returned bare; zero or several are returned as a list.
    """
    if len(args) == 1:
        return args[0]
    return list(args)
