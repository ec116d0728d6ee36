"""Shared pytest configuration for stylekit examples.

Provides the ``example_app`` fixture: it runs the ``app.py`` next to the
requesting test and exposes the resulting globals as attributes, so every
test starts from a fresh compilation pass.
"""

import runpy
from pathlib import Path
from types import SimpleNamespace

import pytest


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> SimpleNamespace:
    """Run the sibling app.py and return its module globals."""
    app_path = Path(request.path).parent / "app.py"
    namespace = runpy.run_path(str(app_path), run_name=f"example_{app_path.parent.name}")
    return SimpleNamespace(**namespace)
