"""Compilation of a component definition set.

One pass:
1. List the definitions the loader provides.
2. Parse every definition; the first failure aborts the pass.
3. Check that component names and CSS classes are unique.
4. Render the stylesheet from scratch and replace the output file.
5. Bind a render function per component into a new RenderRegistry.

The registry and stylesheet of a pass are published together, and only
when every step succeeded.

Staleness:
    ``should_recompile()`` compares the definitions directory mtime with
    the value recorded by the previous call. The first call only records
    (the initial pass already covered the current contents) and returns
    False. Granularity is the whole directory: any change recompiles every
    component.

Thread-Safety:
    ``compile()``, ``should_recompile()`` and ``recompile_if_stale()``
    serialize on one lock owned by the compiler, so two watchers cannot
    both observe staleness and rewrite the stylesheet concurrently.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from stylekit.component import ComponentDescriptor
from stylekit.config import ComponentConfig
from stylekit.exceptions import DefinitionError, ErrorCode
from stylekit.loader import DEFAULT_EXTENSION, DefinitionLoader, DirectoryLoader, load_definitions
from stylekit.naming import DEFAULT_PREFIX, validate_prefix
from stylekit.registry import RenderRegistry
from stylekit.styles import render_stylesheet, write_stylesheet

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StalenessTracker:
    """Last-seen modification time of the definition set.

    Two states: uninitialized (``last_mtime is None``) and tracking.
    """

    last_mtime: int | None = None

    @property
    def tracking(self) -> bool:
        return self.last_mtime is not None

    def check(self, current: int) -> bool:
        """Record ``current`` and report whether it differs from the last value.

        Always False while uninitialized.
        """
        previous = self.last_mtime
        self.last_mtime = current
        if previous is None:
            return False
        return previous != current


@dataclass(frozen=True, slots=True)
class CompilationResult:
    """Everything one compilation pass produced."""

    registry: RenderRegistry
    descriptors: tuple[ComponentDescriptor, ...]
    stylesheet: str
    stylesheet_path: Path | None
    compiled_at: datetime


def check_unique(descriptors: list[ComponentDescriptor]) -> None:
    """Raise DefinitionError if two descriptors share a name or CSS class."""
    seen_names: dict[str, ComponentDescriptor] = {}
    seen_classes: dict[str, ComponentDescriptor] = {}
    for descriptor in descriptors:
        for key, seen in ((descriptor.name, seen_names), (descriptor.class_name, seen_classes)):
            other = seen.get(key)
            if other is not None:
                raise DefinitionError(
                    f"Component '{descriptor.name}' collides with the one defined in "
                    f"{other.filename or other.name} ({key!r})",
                    filename=descriptor.filename,
                    code=ErrorCode.DUPLICATE_COMPONENT,
                    suggestion="Rename one of the definition files or change its 'name:'",
                )
            seen[key] = descriptor


class ComponentCompiler:
    """Build coordinator for one component definition set.

    Owns the loader, the stylesheet output path and the staleness state.

    Example:
        >>> compiler = ComponentCompiler("components", "assets/css/components.css")
        >>> registry = compiler.compile()
        >>> registry.render("Title", "Hello")
        Markup('<h1 class="psc-Title">Hello</h1>')
        >>> compiler.should_recompile()  # first check only records the mtime
        False

    Args:
        loader: A DefinitionLoader, or a directory path for a DirectoryLoader.
        stylesheet_path: Where to write the stylesheet; None keeps it in memory.
        prefix: CSS class prefix.
        extension: Definition file extension when ``loader`` is a path.
        encoding: Encoding for definition files and the stylesheet.
    """

    def __init__(
        self,
        loader: DefinitionLoader | str | Path,
        stylesheet_path: str | Path | None = None,
        *,
        prefix: str = DEFAULT_PREFIX,
        extension: str = DEFAULT_EXTENSION,
        encoding: str = "utf-8",
    ):
        if isinstance(loader, (str, Path)):
            loader = DirectoryLoader(loader, extension=extension, encoding=encoding)
        self.loader: DefinitionLoader = loader
        self.stylesheet_path = Path(stylesheet_path) if stylesheet_path is not None else None
        self.prefix = validate_prefix(prefix)
        self.encoding = encoding
        self.staleness = StalenessTracker()
        self._lock = threading.RLock()
        self._result: CompilationResult | None = None

    @classmethod
    def from_config(cls, config: ComponentConfig) -> ComponentCompiler:
        return cls(
            config.definitions_dir,
            config.stylesheet_path,
            prefix=config.class_prefix,
            extension=config.extension,
            encoding=config.encoding,
        )

    @property
    def result(self) -> CompilationResult | None:
        """Result of the last successful pass, or None before the first."""
        return self._result

    @property
    def registry(self) -> RenderRegistry | None:
        return self._result.registry if self._result is not None else None

    def build(self) -> CompilationResult:
        """Run one full compilation pass and publish its result."""
        with self._lock:
            descriptors = load_definitions(self.loader, self.prefix)
            check_unique(descriptors)

            compiled_at = datetime.now(UTC)
            stylesheet = render_stylesheet(descriptors, now=compiled_at)
            if self.stylesheet_path is not None:
                write_stylesheet(self.stylesheet_path, stylesheet, self.encoding)

            registry = RenderRegistry.from_descriptors(descriptors)
            self._result = CompilationResult(
                registry=registry,
                descriptors=tuple(descriptors),
                stylesheet=stylesheet,
                stylesheet_path=self.stylesheet_path,
                compiled_at=compiled_at,
            )
            logger.info(
                "Compiled %d component(s) -> %s",
                len(descriptors),
                self.stylesheet_path or "<memory>",
            )
            return self._result

    def compile(self) -> RenderRegistry:
        """Run one compilation pass and return its registry."""
        return self.build().registry

    def should_recompile(self) -> bool:
        """Report whether the definition set changed since the previous check."""
        with self._lock:
            stale = self.staleness.check(self.loader.mtime())
            if stale:
                logger.info("Component definitions changed; recompilation required")
            return stale

    def recompile_if_stale(self) -> RenderRegistry | None:
        """Recompile when ``should_recompile()`` says so.

        Returns the new registry, or None when nothing changed.
        """
        with self._lock:
            if not self.should_recompile():
                return None
            return self.compile()
