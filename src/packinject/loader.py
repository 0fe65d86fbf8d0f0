"""
Loading units from the filesystem.

Python files and packages are executed from their path as standalone
modules, independent of ``sys.path``. JSON and TOML documents are parsed into
values. Whatever cannot be loaded is reported as
:attr:`LoadSentinel.NOT_LOADABLE` rather than raised.
"""

from __future__ import annotations

import importlib.util
import json
import logging
import re
import sys
import tomllib
from enum import Enum, auto
from pathlib import Path
from types import ModuleType
from typing import Callable, Final, Mapping

from packinject.construction import Unit, to_unit
from packinject.naming import camel_case, pascal_case

_logger: Final[logging.Logger] = logging.getLogger(__name__)

_MODULE_NAME_PREFIX: Final = "_packinject_unit"
_NON_IDENTIFIER: Final = re.compile(r"\W")


class LoadSentinel(Enum):
    NOT_LOADABLE = auto()


def _module_name(path: Path) -> str:
    return f"{_MODULE_NAME_PREFIX}_{_NON_IDENTIFIER.sub('_', str(path))}"


def _execute_module(path: Path) -> ModuleType:
    if path.is_dir():
        location = path / "__init__.py"
        if not location.is_file():
            raise ImportError(f"Directory is not a package: {path}")
        spec = importlib.util.spec_from_file_location(
            _module_name(path), location, submodule_search_locations=[str(path)]
        )
    else:
        spec = importlib.util.spec_from_file_location(_module_name(path), path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot create a module spec for {path}")
    module = importlib.util.module_from_spec(spec)
    # Registered before execution so that relative imports inside a package resolve.
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(spec.name, None)
        raise
    return module


def module_unit(module: ModuleType, identifier: str) -> object:
    """
    Find the attribute ``module`` exposes as its unit.

    The identifier is tried as written, camel-cased and Pascal-cased, then
    a single-name ``__all__`` is consulted.
    """
    for candidate in dict.fromkeys(
        (identifier, camel_case(identifier), pascal_case(identifier))
    ):
        if candidate.isidentifier() and hasattr(module, candidate):
            return getattr(module, candidate)
    exported = getattr(module, "__all__", ())
    if len(exported) == 1:
        return getattr(module, exported[0])
    raise LookupError(f"Module {module.__name__!r} does not expose {identifier!r}")


def _load_python(path: Path, identifier: str) -> object:
    return module_unit(_execute_module(path), identifier)


def _load_json(path: Path, identifier: str) -> object:
    with path.open(encoding="utf-8") as file:
        return json.load(file)


def _load_toml(path: Path, identifier: str) -> object:
    with path.open("rb") as file:
        return tomllib.load(file)


LOADERS: Final[Mapping[str, Callable[[Path, str], object]]] = {
    ".py": _load_python,
    ".json": _load_json,
    ".toml": _load_toml,
}


def try_load(path: Path, identifier: str) -> Unit | LoadSentinel:
    """
    Load the unit at ``path``.

    Directories load through their ``__init__.py``. Any failure, whatever
    its cause, yields :attr:`LoadSentinel.NOT_LOADABLE`.
    """
    loader = _load_python if path.is_dir() else LOADERS.get(path.suffix)
    if loader is None:
        _logger.debug("No loader for %s", path)
        return LoadSentinel.NOT_LOADABLE
    try:
        return to_unit(loader(path, identifier))
    except Exception:
        _logger.debug("Could not load %s", path, exc_info=True)
        return LoadSentinel.NOT_LOADABLE
