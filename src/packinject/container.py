"""
A minimal name-based registry that packed registrations are handed to.

A :class:`Container` is a read-only mapping from registered names to
resolved instances, also reachable as attributes. The container itself is
the options object passed to factories and classes, so a factory reads its
own dependencies from it:

```python
def user_repository(options):
    return UserRepository(options.database)
```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping, MutableMapping, MutableSequence, Sequence, final

from typing_extensions import override

from packinject.construction import ConstructionKind, Unit, construct


class Lifetime(Enum):
    SINGLETON = "singleton"
    """One instance for the lifetime of the container that owns the registration."""

    TRANSIENT = "transient"
    """A new instance per resolution."""

    SCOPED = "scoped"
    """One instance per scope created with :meth:`Container.create_scope`."""


class ResolutionError(LookupError):
    """Raised when a name is not registered or its resolution is cyclic."""

    def __init__(self, message: str, *, path: Sequence[str]) -> None:
        super().__init__(message)
        self.path = tuple(path)


@final
@dataclass(frozen=True, kw_only=True, slots=True)
class Registration:
    """A named construction recipe with a lifetime."""

    kind: ConstructionKind
    lifetime: Lifetime
    payload: object

    def create(self, options: object) -> object:
        return construct(Unit(kind=self.kind, payload=self.payload), options)


@final
@dataclass(frozen=True, kw_only=True, slots=True, weakref_slot=True, eq=False)
class Container(Mapping[str, object]):
    parent: "Container | None" = None

    _registrations: MutableMapping[str, Registration] = field(
        default_factory=dict, init=False, repr=False
    )
    _cache: MutableMapping[str, object] = field(
        default_factory=dict, init=False, repr=False
    )
    _resolving: MutableSequence[str] = field(
        default_factory=list, init=False, repr=False
    )

    @property
    def root(self) -> "Container":
        container = self
        while container.parent is not None:
            container = container.parent
        return container

    def register(self, **registrations: Registration) -> "Container":
        return self.register_bulk(registrations)

    def register_bulk(self, registrations: Mapping[str, Registration]) -> "Container":
        for name, registration in registrations.items():
            self._registrations[name] = registration
            self._cache.pop(name, None)
        return self

    def create_scope(self, **values: object) -> "Container":
        """Create a child scope, optionally registering scope-local values."""
        scope = Container(parent=self)
        scope.register_bulk(
            {
                name: Registration(
                    kind=ConstructionKind.VALUE,
                    lifetime=Lifetime.SCOPED,
                    payload=value,
                )
                for name, value in values.items()
            }
        )
        return scope

    def _lookup(self, name: str) -> "tuple[Container, Registration] | None":
        container: Container | None = self
        while container is not None:
            registration = container._registrations.get(name)
            if registration is not None:
                return container, registration
            container = container.parent
        return None

    def resolve(self, name: str) -> object:
        stack = self.root._resolving
        found = self._lookup(name)
        if found is None:
            raise ResolutionError(
                f"Could not resolve {name!r}", path=(*stack, name)
            )
        owner, registration = found

        match registration.lifetime:
            case Lifetime.SINGLETON:
                cache: MutableMapping[str, object] | None = owner._cache
                options = owner
            case Lifetime.SCOPED:
                cache = self._cache
                options = self
            case Lifetime.TRANSIENT:
                cache = None
                options = self

        if cache is not None and name in cache:
            return cache[name]

        if name in stack:
            cycle = " -> ".join((*stack[stack.index(name) :], name))
            raise ResolutionError(
                f"Cyclic dependency detected: {cycle}", path=(*stack, name)
            )
        stack.append(name)
        try:
            instance = registration.create(options)
        finally:
            stack.pop()

        if cache is not None:
            cache[name] = instance
        return instance

    @override
    def __getitem__(self, key: str) -> object:
        if self._lookup(key) is None:
            raise KeyError(key)
        return self.resolve(key)

    def __getattr__(self, key: str) -> object:
        if key.startswith("_") or self._lookup(key) is None:
            raise AttributeError(name=key, obj=self)
        return self.resolve(key)

    @override
    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._lookup(key) is not None

    @override
    def __iter__(self) -> Iterator[str]:
        visited: set[str] = set()
        container: Container | None = self
        while container is not None:
            for key in container._registrations:
                if key not in visited:
                    visited.add(key)
                    yield key
            container = container.parent

    @override
    def __len__(self) -> int:
        return sum(1 for _ in self)

    # Containers compare by identity, never by resolved contents.
    def __hash__(self) -> int:
        return hash(id(self))

    @override
    def __eq__(self, other: object) -> bool:
        return self is other
