"""
Shared pytest fixtures and configuration for ssm-document tests.

This module provides:
- Location-based auto-marking (unit / integration)
- Settings and logging isolation between tests
- Descriptor factories and an in-memory registry
- A scratch documents tree on disk

Usage:
    Fixtures are auto-discovered by pytest. Simply use them as function
    arguments (pytest injects them automatically).

    def test_something(fake_registry, make_descriptor):
        ...
"""

import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

# Ensure ssm_document package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ssm_document.core.settings import reset_settings
from ssm_document.documents.models import DocumentDescriptor
from tests._support.fake_registry import FakeRegistry


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop cached settings and any SSM_DOCUMENT_* / AWS profile variables."""
    import os

    for key in list(os.environ):
        if key.startswith("SSM_DOCUMENT_") or key in {"AWS_PROFILE", "AWS_DEFAULT_PROFILE", "AWS_DEBUG"}:
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore structlog defaults so no test logs into a closed stream."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def make_descriptor() -> Callable[..., DocumentDescriptor]:
    """Factory for inline-content descriptors.

    Example:
        make_descriptor("demo", accountIds="111,222", tags={"Env": "dev"})
    """

    def _make(name: str = "demo", **overrides: Any) -> DocumentDescriptor:
        data: dict[str, Any] = {
            "name": name,
            "content": {"schemaVersion": "2.2", "description": name, "mainSteps": []},
        }
        data.update(overrides)
        return DocumentDescriptor.model_validate(data)

    return _make


@pytest.fixture
def documents_tree(tmp_path: Path) -> Path:
    """A directory with two documents: a shell script one and an inline one."""
    demo = tmp_path / "docs" / "demo"
    demo.mkdir(parents=True)
    (demo / "script.sh").write_text("echo hello\necho world")
    (demo / "document.yml").write_text(
        "name: demo\n"
        "description: Demo document\n"
        "format: SHELL\n"
        "file: script.sh\n"
        "accountIds: \"111,222\"\n"
        "tags:\n"
        "  Env: dev\n"
    )

    inline = tmp_path / "docs" / "inline"
    inline.mkdir()
    (inline / "document.yml").write_text(
        "name: inline-doc\n"
        "content:\n"
        "  schemaVersion: '2.2'\n"
        "  description: Inline\n"
        "  mainSteps: []\n"
    )
    (inline / "README.md").write_text("not a document")
    return tmp_path / "docs"
