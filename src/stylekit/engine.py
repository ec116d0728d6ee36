"""Jinja2 integration for compiled components.

``ComponentExtension`` hooks the preprocessor into Jinja2's ``preprocess``
step (once per template source, before compilation) and installs the
``render_component`` global that call blocks produced by the rewrite
dispatch through.

Example:
    >>> compiler = ComponentCompiler("components", "assets/css/components.css")
    >>> env = create_environment(compiler.compile(), loader=FileSystemLoader("templates"))
    >>> env.from_string("<Title>Hi</Title>").render()
    '<h1 class="psc-Title">Hi</h1>'

The registry is bound explicitly with ``create_environment`` or
``bind_registry``; after a recompilation, bind the new registry. Compiled
templates keep working because components are looked up by name at render
time.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from jinja2 import BaseLoader, Environment, StrictUndefined
from jinja2.ext import Extension
from markupsafe import Markup

from stylekit.exceptions import ComponentLookupError
from stylekit.preprocessor import DISPATCH_NAME, referenced_components, rewrite
from stylekit.registry import RenderRegistry


class ComponentExtension(Extension):
    """Rewrite capitalized component tags and dispatch them to the registry.

    Environment attributes added:
        component_registry: RenderRegistry consulted at render time.
        component_strict: Reject unmatched or misnested component tags.
    """

    def __init__(self, environment: Environment):
        super().__init__(environment)
        environment.extend(
            component_registry=RenderRegistry.empty(),
            component_strict=True,
        )

        def render_component(name: str, attrs: str | None = None, caller: Any = None) -> Markup:
            render = environment.component_registry[name]
            if caller is None:
                return render("")
            # caller() output is rendered template text, final in any escaping mode
            return render(Markup(caller()))

        environment.globals[DISPATCH_NAME] = render_component

    def preprocess(self, source: str, name: str | None, filename: str | None = None) -> str:
        return rewrite(source, filename or name, strict=self.environment.component_strict)


def create_environment(
    registry: RenderRegistry,
    loader: BaseLoader | None = None,
    *,
    strict: bool = True,
    **options: Any,
) -> Environment:
    """Create an autoescaping Jinja2 environment with components enabled.

    Args:
        registry: Registry from a compilation pass.
        loader: Jinja2 template loader.
        strict: Reject unmatched or misnested component tags.
        **options: Extra Environment options (``undefined`` defaults to
            StrictUndefined, ``autoescape`` to True).
    """
    options.setdefault("autoescape", True)
    options.setdefault("undefined", StrictUndefined)
    extensions = list(options.pop("extensions", ()))
    extensions.append(ComponentExtension)
    env = Environment(loader=loader, extensions=extensions, **options)
    env.component_strict = strict
    bind_registry(env, registry)
    return env


def bind_registry(environment: Environment, registry: RenderRegistry) -> None:
    """Point ``environment`` at a freshly compiled registry."""
    environment.component_registry = registry


def check_templates(environment: Environment, names: Iterable[str] | None = None) -> int:
    """Verify templates only reference registered components.

    Run at build time to surface unknown components before any render.
    Returns the number of templates checked.

    Raises:
        ComponentLookupError: For the first unknown component found.
        RewriteAmbiguityError: If a template's component tags do not nest.
    """
    if environment.loader is None:
        raise TypeError("Environment has no loader to read templates from")
    registry: RenderRegistry = environment.component_registry
    checked = 0
    for name in names if names is not None else environment.list_templates():
        source, filename, _ = environment.loader.get_source(environment, name)
        rewrite(source, filename or name, strict=environment.component_strict)
        for component in sorted(referenced_components(source)):
            if component not in registry:
                raise ComponentLookupError(component, frozenset(registry), template=filename or name)
        checked += 1
    return checked
