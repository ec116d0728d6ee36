"""stylekit: compile-time styled components for Jinja2 templates.

Components are small declarative definition files, one per component:

    # components/title.component
    tag: h1
    style:
      color: DeepPink;
      font-weight: 600;

Compiling the directory generates a uniquely named CSS class per
component, writes every rule to one stylesheet, and builds a registry of
render functions. Templates then use capitalized tags as a shortcut for
calling those functions:

    <Title>Styled components</Title>

Quickstart:
    >>> from jinja2 import FileSystemLoader
    >>> from stylekit import ComponentCompiler, create_environment
    >>> compiler = ComponentCompiler("components", "assets/css/components.css")
    >>> env = create_environment(compiler.compile(), loader=FileSystemLoader("templates"))
    >>> env.from_string("<Title>Hi</Title>").render()
    '<h1 class="psc-Title">Hi</h1>'

Architecture:
Definitions → Loader → Descriptors → {Class names, Stylesheet} → Registry
Template source → Preprocessor → Jinja2 → render_component(name) → Registry

Development loop:
    >>> if compiler.should_recompile():
    ...     bind_registry(env, compiler.compile())
"""

from stylekit.compiler import CompilationResult, ComponentCompiler, StalenessTracker
from stylekit.component import ComponentDescriptor
from stylekit.config import ComponentConfig
from stylekit.engine import ComponentExtension, bind_registry, check_templates, create_environment
from stylekit.exceptions import (
    CompilationError,
    ComponentError,
    ComponentLookupError,
    DefinitionError,
    ErrorCode,
    RewriteAmbiguityError,
)
from stylekit.loader import DictLoader, DirectoryLoader, load_definitions, parse_definition
from stylekit.naming import DEFAULT_PREFIX, class_name
from stylekit.preprocessor import referenced_components, rewrite, rewrite_file
from stylekit.registry import RenderRegistry
from stylekit.styles import emit_rule, format_style, render_stylesheet

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_PREFIX",
    "CompilationError",
    "CompilationResult",
    "ComponentCompiler",
    "ComponentConfig",
    "ComponentDescriptor",
    "ComponentError",
    "ComponentExtension",
    "ComponentLookupError",
    "DefinitionError",
    "DictLoader",
    "DirectoryLoader",
    "ErrorCode",
    "RenderRegistry",
    "RewriteAmbiguityError",
    "StalenessTracker",
    "bind_registry",
    "check_templates",
    "class_name",
    "create_environment",
    "emit_rule",
    "format_style",
    "load_definitions",
    "parse_definition",
    "referenced_components",
    "render_stylesheet",
    "rewrite",
    "rewrite_file",
]
