"""
Recursive packing of a source tree into registration descriptors.

Each entry is first loaded as a unit. A directory that loads (a package
whose ``__init__.py`` exposes a unit) is opaque: it is registered as one
unit and its children are never visited. A directory that does not load is
expanded, and below the top level its children are collapsed into a single
:class:`Aggregate` factory.

Given the tree::

    src/
        config.json
        repositories/
            user.py
            post.scoped.py
        services/
            mail/
                smtp.py
                sendgrid.py

``pack_tree`` yields ``config``, ``user_repository``, ``post_repository``
(scoped) and ``mail_service``, an aggregate producing
``{"sendgrid": ..., "smtp": ...}``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Iterable, Mapping, Sequence, final

from packinject.construction import ConstructionKind, Unit, construct
from packinject.container import Lifetime
from packinject.loader import LoadSentinel, try_load
from packinject.mocks import MockSentinel, resolve_mock
from packinject.naming import NamingInfo, aggregate_name, parse, scoped_name

_logger: Final[logging.Logger] = logging.getLogger(__name__)


@final
@dataclass(frozen=True, kw_only=True, slots=True)
class PackingOptions:
    """Configuration threaded unchanged through one packing pass."""

    root: Path
    extensions: frozenset[str]
    """Allowed file extensions, including the leading dot."""

    test_pattern: re.Pattern[str]
    mock_pattern: re.Pattern[str]
    mock_prefix: str
    mocks_directory: Path
    default_lifetime: Lifetime
    mocks: Mapping[str, object] = field(default_factory=dict)
    mock_resolution: bool = True

    @classmethod
    def create(
        cls,
        root: str | Path,
        *,
        extensions: Iterable[str] = ("py", "json", "toml"),
        mock: str = "mock",
        test: str = "test",
        default_lifetime: Lifetime = Lifetime.SINGLETON,
        mocks: Mapping[str, object] | None = None,
        mock_resolution: bool = True,
    ) -> "PackingOptions":
        """
        Build options from plain conventions.

        Test files are ``test_*``, ``*_test`` and ``*.test`` files plus
        ``conftest.py``. Mock files and directories end in ``.mock``
        (before the extension, for files). The shared mocks directory is
        ``<root>/mocks``.
        """
        root = Path(root).resolve()
        extensions = tuple(extension.lstrip(".") for extension in extensions)
        alternatives = "|".join(re.escape(extension) for extension in extensions)
        test_token = re.escape(test)
        mock_token = re.escape(mock)
        return cls(
            root=root,
            extensions=frozenset(f".{extension}" for extension in extensions),
            test_pattern=re.compile(
                rf"^(conftest|{test_token}_.+|.+[._]{test_token})\.({alternatives})$"
            ),
            mock_pattern=re.compile(rf"\.{mock_token}(\.({alternatives}))?$"),
            mock_prefix=mock,
            mocks_directory=root / f"{mock}s",
            default_lifetime=default_lifetime,
            mocks=dict(mocks or {}),
            mock_resolution=mock_resolution,
        )


@final
@dataclass(frozen=True, kw_only=True, slots=True)
class RegistrationDescriptor:
    name: str
    """Logical name before camel-casing."""

    kind: ConstructionKind
    lifetime: Lifetime | None
    payload: object
    members: tuple["RegistrationDescriptor", ...] = ()
    """Descriptors collapsed into this one, when it is an aggregate."""

    @property
    def unit(self) -> Unit:
        return Unit(kind=self.kind, payload=self.payload)


@final
@dataclass(frozen=True, kw_only=True, slots=True)
class Aggregate:
    """
    Factory for a directory without a loadable entry point.

    Calling it constructs every member with the same options and returns
    them keyed by name. A member that raises is logged and left out.
    """

    members: Mapping[str, RegistrationDescriptor]

    def __call__(self, options: object) -> dict[str, object]:
        produced: dict[str, object] = {}
        for name, member in self.members.items():
            try:
                produced[name] = construct(member.unit, options)
            except Exception:
                _logger.warning(
                    "Omitting %r from the aggregate: construction failed",
                    name,
                    exc_info=True,
                )
        return produced


def aggregate(
    name: str, lifetime: Lifetime | None, members: Sequence[RegistrationDescriptor]
) -> RegistrationDescriptor:
    # Later members replace earlier ones with the same name.
    slots = {member.name: member for member in members}
    return RegistrationDescriptor(
        name=name,
        kind=ConstructionKind.FACTORY,
        lifetime=lifetime,
        payload=Aggregate(members=slots),
        members=tuple(slots.values()),
    )


def is_registrable(
    path: Path, info: NamingInfo, is_directory: bool, options: PackingOptions
) -> bool:
    base_name = path.name
    if base_name.startswith((".", "__")):
        return False
    location = path.resolve()
    if (
        location == options.mocks_directory
        or options.mocks_directory in location.parents
    ):
        return False
    if options.mock_pattern.search(base_name):
        return False
    if is_directory:
        return True
    return info.extension in options.extensions and not options.test_pattern.match(
        base_name
    )


def pack(
    path: Path,
    ancestors: Sequence[str] = (),
    *,
    options: PackingOptions,
) -> list[RegistrationDescriptor]:
    """
    Pack ``path`` into an ordered list of descriptors, possibly empty.

    :param ancestors: Names of the enclosing directories, innermost first,
        excluding the scanned root.
    :raises MockNotFoundError: if a requested test double cannot be found.
    """
    is_directory = path.is_dir()
    info = parse(path.name, is_directory=is_directory)
    if not is_registrable(path, info, is_directory, options):
        _logger.debug("Not registering %s", path)
        return []
    lifetime = info.lifetime or options.default_lifetime

    unit = try_load(path, info.identifier)
    if unit is not LoadSentinel.NOT_LOADABLE:
        name = scoped_name(info.identifier, ancestors)
        if options.mock_resolution:
            mock = resolve_mock(
                path,
                info.identifier,
                info.extension,
                name,
                mocks=options.mocks,
                prefix=options.mock_prefix,
                mocks_directory=options.mocks_directory,
            )
            if mock is not MockSentinel.NOT_REQUESTED:
                unit = mock
        if unit.kind is ConstructionKind.SKIP:
            _logger.debug("Skipping %s: it exposes no unit", path)
            return []
        return [
            RegistrationDescriptor(
                name=name, kind=unit.kind, lifetime=lifetime, payload=unit.payload
            )
        ]

    if not is_directory:
        _logger.debug("Skipping %s: not loadable", path)
        return []

    child_ancestors = (info.identifier, *ancestors)
    children = [
        descriptor
        for child in sorted(path.iterdir())
        for descriptor in pack(child, child_ancestors, options=options)
    ]
    if not ancestors or not children:
        return children
    return [aggregate(aggregate_name(info.identifier, ancestors), lifetime, children)]


def pack_tree(options: PackingOptions) -> list[RegistrationDescriptor]:
    """Pack every entry of ``options.root`` with an empty ancestor stack."""
    return [
        descriptor
        for entry in sorted(options.root.iterdir())
        for descriptor in pack(entry, options=options)
    ]
