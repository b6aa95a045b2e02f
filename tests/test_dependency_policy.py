"""Tests enforcing dependency pinning policy for the distribution."""

from __future__ import annotations

from pathlib import Path

import tomllib

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_all_dependencies_are_pinned() -> None:
    """Project dependencies must be pinned to exact versions."""

    data = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))
    dependencies = data["project"]["dependencies"]
    optional = data["project"].get("optional-dependencies", {})

    for requirement in dependencies:
        assert "==" in requirement, f"Core dependency not pinned: {requirement}"

    for group, requirements in optional.items():
        for requirement in requirements:
            assert "==" in requirement, (
                f"Optional dependency '{group}' not pinned: {requirement}"
            )


def test_runtime_stack_is_declared() -> None:
    """Every third-party runtime import is declared as a dependency."""

    data = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))
    names = {
        requirement.split("==", 1)[0].lower()
        for requirement in data["project"]["dependencies"]
    }
    assert {"pydantic", "pydantic-settings", "pyyaml"} <= names
