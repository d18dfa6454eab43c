"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from jshint_mode.core.config import ConfigCache
from jshint_mode.core.javascript import JSLINT_DEFAULTS, JavaScriptLinter

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def javascript_parser() -> Parser:
    """Return a tree-sitter parser for JavaScript."""
    return get_parser("javascript")


@pytest.fixture
def jshint() -> JavaScriptLinter:
    return JavaScriptLinter("jshint")


@pytest.fixture
def jslint() -> JavaScriptLinter:
    return JavaScriptLinter("jslint", JSLINT_DEFAULTS)


@pytest.fixture
def config_cache() -> ConfigCache:
    return ConfigCache()
