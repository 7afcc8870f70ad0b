"""
Structure lint tests.

Every component follows the same skeleton so entry points, ports and
implementation live in predictable places.
"""

import importlib
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
COMPONENTS_DIR = PROJECT_ROOT / "smart_redirects" / "components"
COMPONENTS = sorted(p.name for p in COMPONENTS_DIR.iterdir() if (p / "__init__.py").is_file())


class TestProjectStructure:
    def test_expected_components(self) -> None:
        assert COMPONENTS == [
            "executor",
            "health",
            "not_found",
            "redirects",
            "resolver",
            "watcher",
        ]

    @pytest.mark.parametrize("name", COMPONENTS)
    def test_component_has_impl(self, name: str) -> None:
        assert (COMPONENTS_DIR / name / "_impl.py").is_file()

    @pytest.mark.parametrize("name", COMPONENTS)
    def test_component_exports_are_real(self, name: str) -> None:
        module = importlib.import_module(f"smart_redirects.components.{name}")

        assert module.__all__
        for export in module.__all__:
            assert hasattr(module, export), f"{name} exports missing {export}"

    def test_migrations_have_down_sections(self) -> None:
        files = sorted((PROJECT_ROOT / "migrations").glob("*.sql"))

        assert files
        for path in files:
            assert "-- Down" in path.read_text(), f"{path.name} has no Down section"

    def test_rules_file_exists(self) -> None:
        assert (PROJECT_ROOT / "rules.yaml").is_file()
