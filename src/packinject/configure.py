"""
One-call container set-up for an application.

:func:`configure_container` registers the project's own metadata, its
declared dependencies and selected standard-library modules as values, then
packs the source tree on top of them::

    create_container = configure_container("./src", stdlib_modules=("json",))
    container = create_container()
    test_container = create_container({"mockUserRepository": MockSource.DISCOVER})
"""

from __future__ import annotations

import importlib
import logging
import re
import time
import tomllib
from importlib.metadata import packages_distributions
from pathlib import Path
from typing import Any, Callable, Collection, Final, Iterable, Mapping

from packinject.assembler import assemble
from packinject.construction import ConstructionKind
from packinject.container import Container, Lifetime, Registration
from packinject.naming import camel_case
from packinject.packer import PackingOptions, pack_tree

_logger: Final[logging.Logger] = logging.getLogger(__name__)

_REQUIREMENT_NAME: Final = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def _value(payload: object) -> Registration:
    return Registration(
        kind=ConstructionKind.VALUE, lifetime=Lifetime.SINGLETON, payload=payload
    )


def normalize_distribution_name(name: str) -> str:
    return re.sub(r"[-_.]+", "-", name).lower()


def read_project(project_file: Path) -> Mapping[str, Any]:
    """Return the ``[project]`` table of a ``pyproject.toml`` file."""
    with project_file.open("rb") as file:
        return tomllib.load(file).get("project", {})


def requirement_names(requirements: Iterable[str]) -> list[str]:
    names: list[str] = []
    for requirement in requirements:
        match = _REQUIREMENT_NAME.match(requirement)
        if match is not None:
            names.append(normalize_distribution_name(match.group(1)))
    return names


def import_names(distributions: Collection[str]) -> list[str]:
    """Map distribution names to the public top-level modules they install."""
    wanted = frozenset(normalize_distribution_name(name) for name in distributions)
    modules = (
        module
        for module, owners in packages_distributions().items()
        if not module.startswith("_")
        and any(normalize_distribution_name(owner) in wanted for owner in owners)
    )
    return sorted(set(modules))


def select_modules(
    modules: Iterable[str],
    *,
    include: Collection[str] = (),
    exclude: Collection[str] = (),
) -> list[str]:
    selected = list(dict.fromkeys(modules))
    if include:
        selected = [module for module in selected if module in include]
    if exclude:
        selected = [module for module in selected if module not in exclude]
    return selected


def module_registrations(
    modules: Iterable[str], *, rename: Mapping[str, str] | None = None
) -> dict[str, Registration]:
    """Import each module and register it as a value under its camel-cased name."""
    rename = rename or {}
    registrations: dict[str, Registration] = {}
    for module_name in modules:
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            _logger.warning("Could not import %r; not registering it", module_name)
            continue
        registrations[camel_case(rename.get(module_name, module_name))] = _value(
            module
        )
    return registrations


def configure_container(
    source_dir: str | Path = "./src",
    *,
    project_file: str | Path | None = "pyproject.toml",
    extensions: Iterable[str] = ("py", "json", "toml"),
    mock: str = "mock",
    test: str = "test",
    default_lifetime: Lifetime = Lifetime.SINGLETON,
    skip_dependencies: bool = False,
    skip_dev_dependencies: bool = False,
    include_dependencies: Collection[str] = (),
    exclude_dependencies: Collection[str] = (),
    rename_dependencies: Mapping[str, str] | None = None,
    include_dev_dependencies: Collection[str] = (),
    exclude_dev_dependencies: Collection[str] = (),
    rename_dev_dependencies: Mapping[str, str] | None = None,
    dev_extras: Collection[str] = ("test", "dev"),
    stdlib_modules: Iterable[str] = (),
    rename_stdlib_modules: Mapping[str, str] | None = None,
    packing_stats: bool = True,
) -> Callable[..., Container]:
    """
    Capture the set-up and return a factory taking the caller's mock map.

    Dependency filters and renames are keyed by import name. Dependencies
    come from ``[project].dependencies``; development dependencies from the
    ``dev_extras`` groups of ``[project.optional-dependencies]``.
    """
    extensions = tuple(extensions)
    stdlib_modules = tuple(stdlib_modules)

    def create_container(mocks: Mapping[str, object] | None = None) -> Container:
        start = time.perf_counter()
        registrations: dict[str, Registration] = {}

        if project_file is not None:
            project = read_project(Path(project_file))
            registrations[camel_case(project["name"])] = _value(project)

            if not skip_dependencies:
                modules = import_names(
                    requirement_names(project.get("dependencies", ()))
                )
                registrations.update(
                    module_registrations(
                        select_modules(
                            modules,
                            include=include_dependencies,
                            exclude=exclude_dependencies,
                        ),
                        rename=rename_dependencies,
                    )
                )

            if not skip_dev_dependencies:
                groups = project.get("optional-dependencies", {})
                modules = import_names(
                    requirement_names(
                        requirement
                        for extra in dev_extras
                        for requirement in groups.get(extra, ())
                    )
                )
                registrations.update(
                    module_registrations(
                        select_modules(
                            modules,
                            include=include_dev_dependencies,
                            exclude=exclude_dev_dependencies,
                        ),
                        rename=rename_dev_dependencies,
                    )
                )

        if stdlib_modules:
            registrations.update(
                module_registrations(stdlib_modules, rename=rename_stdlib_modules)
            )

        options = PackingOptions.create(
            source_dir,
            extensions=extensions,
            mock=mock,
            test=test,
            default_lifetime=default_lifetime,
            mocks=mocks,
        )
        registrations.update(assemble(pack_tree(options), default_lifetime))

        container = Container().register_bulk(registrations)
        if packing_stats:
            _logger.info(
                "Container packed in %.1f seconds", time.perf_counter() - start
            )
        return container

    return create_container
