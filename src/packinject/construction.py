"""
Construction kinds: how a discovered unit is turned into an instance.

The kind is decided once, when a unit is loaded, and travels with the unit
as a :class:`Unit` record. Shape inspection is only the fallback; the
:func:`as_value`, :func:`as_factory` and :func:`as_class` markers state the
kind explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from inspect import Parameter, signature
from typing import Final, final

_POSITIONAL_KINDS: Final = frozenset(
    (
        Parameter.POSITIONAL_ONLY,
        Parameter.POSITIONAL_OR_KEYWORD,
        Parameter.VAR_POSITIONAL,
    )
)


class ConstructionKind(Enum):
    VALUE = "value"
    """Registered as-is."""

    FACTORY = "factory"
    """Called with the options object to produce the dependency."""

    CLASS = "class"
    """Instantiated with the options object."""

    SKIP = "skip"
    """Explicitly unresolvable; never registered."""


@final
@dataclass(frozen=True, kw_only=True, slots=True)
class Unit:
    kind: ConstructionKind
    payload: object


def classify(obj: object) -> ConstructionKind:
    if obj is None:
        return ConstructionKind.SKIP
    if isinstance(obj, Unit):
        return obj.kind
    if not callable(obj):
        return ConstructionKind.VALUE
    # A class wins over a factory even when its constructor takes arguments.
    if isinstance(obj, type):
        return ConstructionKind.CLASS
    return ConstructionKind.FACTORY


def to_unit(obj: object) -> Unit:
    if isinstance(obj, Unit):
        return obj
    return Unit(kind=classify(obj), payload=obj)


def as_value(obj: object) -> Unit:
    """Mark ``obj`` to be registered as-is, even if it is callable."""
    return Unit(kind=ConstructionKind.VALUE, payload=obj)


def as_factory(obj: object) -> Unit:
    return Unit(kind=ConstructionKind.FACTORY, payload=obj)


def as_class(obj: object) -> Unit:
    return Unit(kind=ConstructionKind.CLASS, payload=obj)


def _accepts_options(function: object) -> bool:
    try:
        sig = signature(function)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        # Builtins without a retrievable signature get the options object.
        return True
    return any(param.kind in _POSITIONAL_KINDS for param in sig.parameters.values())


def construct(unit: Unit, options: object) -> object:
    """
    Produce the instance described by ``unit``.

    Factories and classes receive ``options`` as their single positional
    argument when they declare one, and are called without arguments
    otherwise.
    """
    match unit.kind:
        case ConstructionKind.VALUE:
            return unit.payload
        case ConstructionKind.FACTORY | ConstructionKind.CLASS:
            function = unit.payload
            assert callable(function)
            if _accepts_options(function):
                return function(options)
            return function()
        case ConstructionKind.SKIP:
            raise ValueError("A skipped unit cannot be constructed")
