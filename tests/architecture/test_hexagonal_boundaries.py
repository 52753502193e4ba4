"""Tests to enforce hexagonal architecture boundaries."""

import ast
from pathlib import Path
from typing import List, Set

import pytest


class ImportVisitor(ast.NodeVisitor):
    """AST visitor to collect import statements, excluding TYPE_CHECKING blocks."""

    def __init__(self):
        self.imports: Set[str] = set()

    def visit_If(self, node):
        if isinstance(node.test, ast.Name) and node.test.id == "TYPE_CHECKING":
            return
        self.generic_visit(node)

    def visit_Import(self, node):
        for alias in node.names:
            self.imports.add(alias.name)

    def visit_ImportFrom(self, node):
        if node.module:
            self.imports.add(node.module)


def get_imports_from_file(file_path: Path) -> Set[str]:
    """Extract imports from a Python file."""
    tree = ast.parse(file_path.read_text(encoding="utf-8"))
    visitor = ImportVisitor()
    visitor.visit(tree)
    return visitor.imports


def get_python_files(directory: Path) -> List[Path]:
    """Get all Python files in a directory recursively."""
    return sorted(directory.rglob("*.py"))


def find_violations(directory: Path, root: Path, forbidden, allowed=()) -> List[str]:
    violations = []
    for file_path in get_python_files(directory):
        for import_stmt in get_imports_from_file(file_path):
            if any(import_stmt.startswith(prefix) for prefix in allowed):
                continue
            if any(import_stmt == f or import_stmt.startswith(f + ".") for f in forbidden):
                violations.append(f"{file_path.relative_to(root)}: imports {import_stmt}")
    return violations


@pytest.fixture(scope="module")
def project_root() -> Path:
    return Path(__file__).parent.parent.parent / "app"


class TestHexagonalBoundaries:
    """Test hexagonal architecture boundary violations."""

    def test_domain_layer_purity(self, project_root):
        """Domain code depends on nothing but itself and structlog."""
        violations = find_violations(
            project_root / "domain",
            project_root,
            forbidden={
                "app.application",
                "app.infrastructure",
                "app.models",
                "app.core",
                "httpx",
                "pydantic",
                "pydantic_settings",
            },
        )

        if violations:
            pytest.fail("Domain layer boundary violations found:\n" + "\n".join(violations))

    def test_application_layer_uses_providers(self, project_root):
        """Application code reaches infrastructure only through providers."""
        violations = find_violations(
            project_root / "application",
            project_root,
            forbidden={"app.infrastructure", "app.models", "httpx"},
            allowed=("app.infrastructure.providers",),
        )

        if violations:
            pytest.fail("Application layer boundary violations found:\n" + "\n".join(violations))

    def test_models_are_transport_only(self, project_root):
        violations = find_violations(
            project_root / "models",
            project_root,
            forbidden={"app.application", "app.infrastructure", "app.domain"},
        )

        if violations:
            pytest.fail("Model layer boundary violations found:\n" + "\n".join(violations))

    def test_adapters_do_not_depend_on_application(self, project_root):
        violations = find_violations(
            project_root / "infrastructure" / "adapters",
            project_root,
            forbidden={"app.application", "app.infrastructure.providers"},
        )

        if violations:
            pytest.fail("Adapter boundary violations found:\n" + "\n".join(violations))


class TestDomainModelPurity:
    """Test domain model purity and isolation."""

    def test_value_objects_are_frozen_dataclasses(self, project_root):
        tree = ast.parse((project_root / "domain" / "value_objects.py").read_text(encoding="utf-8"))
        not_frozen = []

        for node in ast.walk(tree):
            if not isinstance(node, ast.ClassDef):
                continue
            for decorator in node.decorator_list:
                if isinstance(decorator, ast.Call) and getattr(decorator.func, "id", None) == "dataclass":
                    frozen = any(
                        kw.arg == "frozen" and getattr(kw.value, "value", False) is True
                        for kw in decorator.keywords
                    )
                    if not frozen:
                        not_frozen.append(node.name)
                elif isinstance(decorator, ast.Name) and decorator.id == "dataclass":
                    not_frozen.append(node.name)

        assert not_frozen == []

    def test_adapters_implement_domain_interfaces(self, project_root):
        adapters_dir = project_root / "infrastructure" / "adapters"
        implementers = {
            path.name
            for path in get_python_files(adapters_dir)
            if "app.domain.interfaces" in get_imports_from_file(path)
        }

        assert {"suggestion_cache_adapter.py", "directory_search_adapter.py"} <= implementers
