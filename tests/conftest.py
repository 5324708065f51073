from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tests._fixtures.source_builder import SourceBuilder


@pytest.fixture
def sources(tmp_path: Path) -> SourceBuilder:
    """Provide a JSON source builder rooted at the pytest tmp_path."""
    return SourceBuilder(tmp_path)


@pytest.fixture
def module_name(request: pytest.FixtureRequest):
    """Unique module name for compiled contexts, removed from sys.modules afterwards."""
    name = f"jsoncontext_test_{request.node.name}".replace("[", "_").replace("]", "_").replace("-", "_")
    yield name
    sys.modules.pop(name, None)
