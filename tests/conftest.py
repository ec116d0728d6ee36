"""Pytest configuration and fixtures for stylekit tests."""

from pathlib import Path

import pytest

from stylekit import ComponentCompiler, create_environment, terminal

TITLE_DEFINITION = "tag: h1\nstyle: color: red;\n"

CARD_DEFINITION = """\
# A bordered box
tag: div
style:
  border: 1px solid #ccc;
  padding: 1rem;
"""


def write_component(directory: Path, stem: str, source: str) -> Path:
    """Write one definition file into ``directory``."""
    path = directory / f"{stem}.component"
    path.write_text(source, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def no_colors(monkeypatch):
    """Keep diagnostics free of ANSI codes regardless of the terminal."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def components_dir(tmp_path: Path) -> Path:
    """A definitions directory holding Title and Card."""
    directory = tmp_path / "components"
    directory.mkdir()
    write_component(directory, "title", TITLE_DEFINITION)
    write_component(directory, "card", CARD_DEFINITION)
    return directory


@pytest.fixture
def stylesheet_path(tmp_path: Path) -> Path:
    return tmp_path / "assets" / "css" / "components.css"


@pytest.fixture
def compiler(components_dir: Path, stylesheet_path: Path) -> ComponentCompiler:
    return ComponentCompiler(components_dir, stylesheet_path)


@pytest.fixture
def registry(compiler: ComponentCompiler):
    return compiler.compile()


@pytest.fixture
def env(registry):
    """Jinja2 environment with the compiled Title and Card components."""
    return create_environment(registry)


def normalize_css(text: str) -> str:
    """Collapse whitespace so rule blocks compare on one line."""
    return " ".join(text.split())
