"""
Naming conventions for discovered units.

A file or directory name follows ``<identifier>.<lifetime tag>.<extension>``.
The lifetime tag is optional; a trailing token that is not a known tag is
kept as part of the identifier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Final, Mapping, Sequence

import inflection

from packinject.container import Lifetime

LIFETIME_TAGS: Final[Mapping[str, Lifetime]] = {
    "singleton": Lifetime.SINGLETON,
    "si": Lifetime.SINGLETON,
    "transient": Lifetime.TRANSIENT,
    "tr": Lifetime.TRANSIENT,
    "scoped": Lifetime.SCOPED,
    "sc": Lifetime.SCOPED,
}

_WORD_SEPARATORS: Final = re.compile(r"[\s\-_:;.]")


@dataclass(frozen=True, kw_only=True, slots=True)
class NamingInfo:
    identifier: str
    extension: str
    lifetime: Lifetime | None
    """``None`` when the name carries no recognized lifetime tag."""


def parse(
    base_name: str,
    *,
    is_directory: bool = False,
    lifetime_tags: Mapping[str, Lifetime] = LIFETIME_TAGS,
) -> NamingInfo:
    """
    Split a base name into identifier, extension and lifetime tag.

    >>> parse("widget.transient.py")
    NamingInfo(identifier='widget', extension='.py', lifetime=<Lifetime.TRANSIENT: 'transient'>)
    >>> parse("widget.xyz.py").identifier
    'widget.xyz'
    """
    if is_directory:
        stem, extension = base_name, ""
    else:
        pure = PurePath(base_name)
        stem, extension = pure.stem, pure.suffix
    head, dot, tag = stem.rpartition(".")
    if dot and head and tag in lifetime_tags:
        return NamingInfo(
            identifier=head, extension=extension, lifetime=lifetime_tags[tag]
        )
    return NamingInfo(identifier=stem, extension=extension, lifetime=None)


def singular(word: str) -> str:
    """
    Return the singular form of ``word``.

    Only the last word of a compound such as ``user_repositories`` changes.
    Words that are already singular, including ``address`` and ``status``,
    are returned unchanged.
    """
    return inflection.singularize(word)


def _joined(name: str, ancestors: Sequence[str]) -> str:
    return "_".join((name, *ancestors))


def scoped_name(name: str, ancestors: Sequence[str]) -> str:
    """
    Logical name of a unit loaded at the given depth.

    Only the immediate children of a top-level directory get a
    repository-style name: ``repositories/user.py`` becomes
    ``user_repository``. Top-level entries and anything nested deeper keep
    their own name.
    """
    if len(ancestors) != 1:
        return name
    return singular(_joined(name, ancestors))


def aggregate_name(name: str, ancestors: Sequence[str]) -> str:
    """Logical name of a directory aggregated from its children."""
    return singular(_joined(name, ancestors))


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def camel_case(text: str) -> str:
    first, *rest = _WORD_SEPARATORS.split(text)
    return first + "".join(capitalize(word) for word in rest)


def pascal_case(text: str) -> str:
    return capitalize(camel_case(text))
