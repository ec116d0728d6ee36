"""Compiled in-memory representation of one component."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ComponentDescriptor:
    """One component as loaded from its definition file.

    Descriptors are rebuilt wholesale on every compilation pass; nothing
    is patched in place.

    Attributes:
        name: Component name referenced from templates as ``<Name>``.
        tag: HTML element the component renders as.
        raw_style: CSS property text, possibly multi-line or empty.
        class_name: Scoped CSS class derived from ``name``.
        filename: Definition file the descriptor came from, if file-backed.
    """

    name: str
    tag: str
    raw_style: str
    class_name: str
    filename: str | None = None
