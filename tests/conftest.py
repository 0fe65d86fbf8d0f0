"""Test utilities and fixtures for packinject tests."""

import textwrap
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from packinject import Lifetime, PackingOptions

# Fixture source trees contain test-named files that must never be collected.
collect_ignore = ["fixtures"]

FIXTURES_PATH = Path(__file__).parent / "fixtures"


@pytest.fixture
def app_root() -> Path:
    return FIXTURES_PATH / "app"


@pytest.fixture
def app_options(app_root: Path) -> PackingOptions:
    return PackingOptions.create(app_root, default_lifetime=Lifetime.SINGLETON)


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Mapping[str, str]], Path]:
    """Test utility: write ``{relative path: source}`` under a fresh root."""
    root = tmp_path / "src"
    root.mkdir()

    def write(files: Mapping[str, str]) -> Path:
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content), encoding="utf-8")
        return root

    return write
