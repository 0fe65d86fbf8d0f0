"""Folding packed descriptors into container registrations."""

from __future__ import annotations

from typing import Iterable

from packinject.construction import ConstructionKind
from packinject.container import Container, Lifetime, Registration
from packinject.naming import camel_case
from packinject.packer import RegistrationDescriptor


def assemble(
    descriptors: Iterable[RegistrationDescriptor],
    default_lifetime: Lifetime = Lifetime.SINGLETON,
) -> dict[str, Registration]:
    """
    Build registrations keyed by camel-cased name.

    Descriptors are applied in order, so a later descriptor replaces an
    earlier one with the same name.
    """
    registrations: dict[str, Registration] = {}
    for descriptor in descriptors:
        if descriptor.kind is ConstructionKind.SKIP:
            continue
        registrations[camel_case(descriptor.name)] = Registration(
            kind=descriptor.kind,
            lifetime=descriptor.lifetime or default_lifetime,
            payload=descriptor.payload,
        )
    return registrations


def register(
    container: Container,
    descriptors: Iterable[RegistrationDescriptor],
    default_lifetime: Lifetime = Lifetime.SINGLETON,
) -> Container:
    return container.register_bulk(assemble(descriptors, default_lifetime))
