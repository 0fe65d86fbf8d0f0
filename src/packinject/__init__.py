"""
packinject: populate a dependency-injection container from a source tree.

## Conventions

Every file or directory under the source root is a candidate unit, named
``<identifier>.<lifetime tag>.<extension>``:

- the lifetime tag is one of ``singleton``/``si``, ``transient``/``tr`` or
  ``scoped``/``sc``; without one the default lifetime applies;
- a Python module exposes the attribute named after its identifier
  (``user_service``, ``userService`` or ``UserService``); a package does
  the same from its ``__init__.py``; JSON and TOML files are values;
- classes are instantiated, other callables are factories, anything else
  is a value. Factories and classes receive the container as their single
  argument;
- test files, ``*.mock.*`` files and the ``mocks/`` directory are never
  registered.

A directory that does not expose a unit is expanded. Directly under a
top-level directory, units get repository-style names, and nested
directories become one factory producing a mapping of their children.

## Example

```python
from packinject import Container, PackingOptions, pack_tree, register

container = register(Container(), pack_tree(PackingOptions.create("./src")))
container.userRepository  # src/repositories/user.py
```
"""

from packinject.assembler import assemble, register
from packinject.configure import configure_container
from packinject.construction import (
    ConstructionKind,
    Unit,
    as_class,
    as_factory,
    as_value,
    classify,
    construct,
)
from packinject.container import Container, Lifetime, Registration, ResolutionError
from packinject.loader import LoadSentinel, try_load
from packinject.mocks import MockNotFoundError, MockSentinel, MockSource, resolve_mock
from packinject.naming import NamingInfo, parse
from packinject.packer import (
    Aggregate,
    PackingOptions,
    RegistrationDescriptor,
    pack,
    pack_tree,
)

__all__ = [
    "Aggregate",
    "ConstructionKind",
    "Container",
    "Lifetime",
    "LoadSentinel",
    "MockNotFoundError",
    "MockSentinel",
    "MockSource",
    "NamingInfo",
    "PackingOptions",
    "Registration",
    "RegistrationDescriptor",
    "ResolutionError",
    "Unit",
    "as_class",
    "as_factory",
    "as_value",
    "assemble",
    "classify",
    "configure_container",
    "construct",
    "pack",
    "pack_tree",
    "parse",
    "register",
    "resolve_mock",
    "try_load",
]
