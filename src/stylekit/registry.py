"""Render dispatch for compiled components.

The registry maps component names to render functions. It is built once
per compilation pass from the full descriptor set and never mutated; a
rebuild produces a new registry.

Example:
    >>> registry = RenderRegistry.from_descriptors(descriptors)
    >>> registry.render("Title", "Hello")
    Markup('<h1 class="psc-Title">Hello</h1>')
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from markupsafe import Markup

from stylekit.component import ComponentDescriptor
from stylekit.exceptions import ComponentLookupError

RenderFunction = Callable[[Any], Markup]

_ELEMENT = Markup('<{tag} class="{cls}">{children}</{tag}>')


def make_render_function(tag: str, css_class: str) -> RenderFunction:
    """Build a render function that wraps children in ``tag`` with ``css_class``.

    Children that are already ``Markup`` pass through unchanged; plain
    strings are HTML-escaped.
    """

    def render(children: Any = "") -> Markup:
        return _ELEMENT.format(tag=tag, cls=css_class, children=children)

    render.__name__ = f"render_{css_class.replace('-', '_')}"
    return render


class RenderRegistry(Mapping[str, RenderFunction]):
    """Immutable mapping of component name -> render function.

    Lookups of unknown names raise ComponentLookupError, which is also a
    LookupError, so template errors surface instead of rendering nothing.
    """

    __slots__ = ("_descriptors", "_functions")

    def __init__(
        self,
        functions: Mapping[str, RenderFunction],
        descriptors: Mapping[str, ComponentDescriptor] | None = None,
    ):
        self._functions = MappingProxyType(dict(functions))
        self._descriptors = MappingProxyType(dict(descriptors or {}))

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[ComponentDescriptor]) -> RenderRegistry:
        functions: dict[str, RenderFunction] = {}
        by_name: dict[str, ComponentDescriptor] = {}
        for descriptor in descriptors:
            functions[descriptor.name] = make_render_function(descriptor.tag, descriptor.class_name)
            by_name[descriptor.name] = descriptor
        return cls(functions, by_name)

    @classmethod
    def empty(cls) -> RenderRegistry:
        return cls({})

    def __getitem__(self, name: str) -> RenderFunction:
        try:
            return self._functions[name]
        except KeyError:
            raise ComponentLookupError(name, frozenset(self._functions)) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def get(self, name: str, default: RenderFunction | None = None) -> RenderFunction | None:
        return self._functions.get(name, default)

    def __repr__(self) -> str:
        return f"<RenderRegistry {sorted(self._functions)}>"

    def descriptor(self, name: str) -> ComponentDescriptor:
        """Return the descriptor a render function was built from."""
        try:
            return self._descriptors[name]
        except KeyError:
            raise ComponentLookupError(name, frozenset(self._functions)) from None

    def render(self, name: str, children: Any = "") -> Markup:
        """Render component ``name`` around ``children``.

        Raises:
            ComponentLookupError: If ``name`` is not registered.
        """
        return self[name](children)
