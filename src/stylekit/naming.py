"""Scoped CSS class names for components.

A class name is a fixed short prefix concatenated with the component name:

    >>> class_name("Title")
    'psc-Title'

Readable names show up unchanged in browser developer tools. Component
names are developer-chosen identifiers, so a prefix is enough to keep them
apart from hand-written classes; distinct names always give distinct
classes as long as the prefix is fixed for the pass.
"""

from __future__ import annotations

import re

DEFAULT_PREFIX = "psc-"

# Component names follow the capitalized-tag convention used in templates
COMPONENT_NAME_RE = re.compile(r"[A-Z]\w*")

# Prefixes must keep the generated class a valid CSS identifier
_PREFIX_RE = re.compile(r"[A-Za-z_-][\w-]*")


def is_component_name(name: str) -> bool:
    """Return True if ``name`` can be referenced as ``<Name>`` in a template."""
    return COMPONENT_NAME_RE.fullmatch(name) is not None


def validate_prefix(prefix: str) -> str:
    """Return ``prefix`` unchanged, or raise ValueError if it is not CSS-safe."""
    if not _PREFIX_RE.fullmatch(prefix):
        raise ValueError(f"Invalid CSS class prefix {prefix!r}")
    return prefix


def class_name(name: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Derive the scoped CSS class for component ``name``."""
    return f"{prefix}{name}"


def component_name_from_stem(stem: str) -> str:
    """Convert a definition file stem to a component name.

    Snake and kebab case become CamelCase, one definition file per
    component:

        >>> component_name_from_stem("page_header")
        'PageHeader'
        >>> component_name_from_stem("Title")
        'Title'
    """
    parts = [part for part in re.split(r"[-_\s]+", stem) if part]
    return "".join(part[:1].upper() + part[1:] for part in parts)
