"""
Test-double substitution.

A unit registered as ``userRepository`` is replaced when the caller's mock
map contains ``mockUserRepository``. The map value decides where the double
comes from:

- :attr:`MockSource.DISCOVER` searches ``<identifier>.mock<ext>`` next to
  the real unit, then in the shared ``mocks`` directory of the scanned tree;
- a :class:`pathlib.PurePath` is tried first, before those two locations;
- any other object is the double itself.

A requested double that cannot be found is a configuration error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path, PurePath
from typing import Final, Mapping, Sequence, final

from packinject.construction import Unit, to_unit
from packinject.loader import LoadSentinel, try_load
from packinject.naming import camel_case, capitalize

_logger: Final[logging.Logger] = logging.getLogger(__name__)


class MockSource(Enum):
    DISCOVER = auto()


class MockSentinel(Enum):
    NOT_REQUESTED = auto()


class MockNotFoundError(LookupError):
    """Raised when a requested test double exists in none of its candidate locations."""

    def __init__(self, logical_name: str, candidates: Sequence[Path]) -> None:
        locations = ", ".join(str(candidate) for candidate in candidates)
        super().__init__(
            f"Mock for {logical_name!r} was requested but could not be loaded "
            f"from any of: {locations}"
        )
        self.logical_name = logical_name
        self.candidates = tuple(candidates)


def mock_key(logical_name: str, prefix: str) -> str:
    return prefix + capitalize(camel_case(logical_name))


def candidate_paths(
    path: Path,
    identifier: str,
    extension: str,
    *,
    prefix: str,
    mocks_directory: Path,
) -> tuple[Path, Path]:
    file_name = f"{identifier}.{prefix}{extension}"
    return path.parent / file_name, mocks_directory / file_name


@final
@dataclass(frozen=True, kw_only=True, slots=True)
class MockOverrideRequest:
    key: str
    requested: bool
    override: object
    candidates: tuple[Path, ...]


def mock_request(
    path: Path,
    identifier: str,
    extension: str,
    logical_name: str,
    *,
    mocks: Mapping[str, object],
    prefix: str,
    mocks_directory: Path,
) -> MockOverrideRequest:
    key = mock_key(logical_name, prefix)
    override = mocks.get(key)
    candidates: tuple[Path, ...] = candidate_paths(
        path, identifier, extension, prefix=prefix, mocks_directory=mocks_directory
    )
    if isinstance(override, PurePath):
        candidates = (Path(override), *candidates)
    return MockOverrideRequest(
        key=key, requested=key in mocks, override=override, candidates=candidates
    )


def resolve_mock(
    path: Path,
    identifier: str,
    extension: str,
    logical_name: str,
    *,
    mocks: Mapping[str, object],
    prefix: str,
    mocks_directory: Path,
) -> Unit | MockSentinel:
    """
    Return the test double requested for ``logical_name``.

    :raises MockNotFoundError: if a double is requested and none of the
        candidate locations can be loaded.
    :raises ValueError: if the mock map holds ``None`` for the unit.
    """
    request = mock_request(
        path,
        identifier,
        extension,
        logical_name,
        mocks=mocks,
        prefix=prefix,
        mocks_directory=mocks_directory,
    )
    if not request.requested:
        return MockSentinel.NOT_REQUESTED

    if request.override is None:
        raise ValueError(
            f"Mock {request.key!r} is None; supply a test double, a Path or "
            "MockSource.DISCOVER"
        )
    if request.override is not MockSource.DISCOVER and not isinstance(
        request.override, PurePath
    ):
        _logger.debug("Using supplied %s for %s", request.key, logical_name)
        return to_unit(request.override)

    for candidate in request.candidates:
        unit = try_load(candidate, identifier)
        if unit is not LoadSentinel.NOT_LOADABLE:
            _logger.debug("Loaded %s from %s", request.key, candidate)
            return unit
    raise MockNotFoundError(logical_name, request.candidates)
