"""Configuration for a component build.

Example:
    >>> config = ComponentConfig.from_environ()
    >>> config.definitions_dir
    PosixPath('components')

Environment variables:
    STYLEKIT_COMPONENTS   definitions directory (default: components)
    STYLEKIT_STYLESHEET   stylesheet output path (default: assets/css/components.css)
    STYLEKIT_PREFIX       CSS class prefix (default: psc-)
    STYLEKIT_EXTENSION    definition file extension (default: .component)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from stylekit.loader import DEFAULT_EXTENSION
from stylekit.naming import DEFAULT_PREFIX, validate_prefix

DEFAULT_DEFINITIONS_DIR = Path("components")
DEFAULT_STYLESHEET_PATH = Path("assets/css/components.css")

_ENV_KEYS = {
    "definitions_dir": "STYLEKIT_COMPONENTS",
    "stylesheet_path": "STYLEKIT_STYLESHEET",
    "class_prefix": "STYLEKIT_PREFIX",
    "extension": "STYLEKIT_EXTENSION",
}


@dataclass(frozen=True, slots=True)
class ComponentConfig:
    """Where definitions live, where the stylesheet goes, and how classes are named."""

    definitions_dir: Path = field(default=DEFAULT_DEFINITIONS_DIR)
    stylesheet_path: Path = field(default=DEFAULT_STYLESHEET_PATH)
    class_prefix: str = DEFAULT_PREFIX
    extension: str = DEFAULT_EXTENSION
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        object.__setattr__(self, "definitions_dir", Path(self.definitions_dir))
        object.__setattr__(self, "stylesheet_path", Path(self.stylesheet_path))
        validate_prefix(self.class_prefix)
        if not self.extension.startswith("."):
            object.__setattr__(self, "extension", f".{self.extension}")

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> ComponentConfig:
        """Build a config from ``STYLEKIT_*`` variables, defaulting the rest."""
        env = os.environ if environ is None else environ
        values = {attr: env[key] for attr, key in _ENV_KEYS.items() if env.get(key)}
        return cls(**values)

    def override(self, **changes: Any) -> ComponentConfig:
        """Return a copy with the non-None ``changes`` applied (CLI flags)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
