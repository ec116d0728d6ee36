"""Component definition loading.

Definitions are small declarative files, one per component, read by a
dedicated parser. Nothing in a definition is executed.

Format:
    ```
    # components/title.component
    tag: h1
    style:
      color: DeepPink;
      font-weight: 600;
    ```

- ``tag`` (required): the HTML element to render.
- ``style`` (optional): CSS properties, inline on the same line or as a
  block of indented lines following ``style:`` (or ``style: |``).
- ``name`` (optional): overrides the component name derived from the file
  stem (``page_header.component`` -> ``PageHeader``).

Lines starting with ``#`` outside a style block are comments.

Loaders provide definition sources. They implement ``list_definitions()``,
``get_source(name)`` returning ``(source, filename)``, and ``mtime()``
returning the staleness signal for the whole definition set.

Built-in Loaders:
- `DirectoryLoader`: one ``*.component`` file per component in a directory
- `DictLoader`: in-memory mapping of stem -> source (testing/embedded)
"""

from __future__ import annotations

import logging
import re
import textwrap
from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from stylekit.component import ComponentDescriptor
from stylekit.exceptions import CompilationError, DefinitionError, ErrorCode
from stylekit.naming import DEFAULT_PREFIX, class_name, component_name_from_stem, is_component_name

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".component"

_KEYS = frozenset({"tag", "style", "name"})
_BLOCK_MARKERS = frozenset({"", "|"})

_KEY_LINE_RE = re.compile(r"(?P<key>[A-Za-z_][\w-]*)\s*:(?P<value>.*)")
_TAG_RE = re.compile(r"[A-Za-z][A-Za-z0-9-]*")


class DefinitionLoader(Protocol):
    """Source of component definitions for one compilation pass."""

    def list_definitions(self) -> list[str]: ...

    def get_source(self, name: str) -> tuple[str, str | None]: ...

    def mtime(self) -> int: ...


class DirectoryLoader:
    """Load component definitions from a directory.

    Every file directly inside ``path`` whose name ends with ``extension``
    is one component. Definitions are listed in sorted filename order so
    repeated passes emit rules in the same order.

    Example:
            >>> loader = DirectoryLoader("lib/web/components")
            >>> loader.list_definitions()
        ['card', 'title']
            >>> source, filename = loader.get_source("title")

    Raises:
        CompilationError: If the directory or a definition cannot be read

    """

    __slots__ = ("_encoding", "_extension", "_path")

    def __init__(
        self,
        path: str | Path,
        extension: str = DEFAULT_EXTENSION,
        encoding: str = "utf-8",
    ):
        self._path = Path(path)
        self._extension = extension if extension.startswith(".") else f".{extension}"
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def list_definitions(self) -> list[str]:
        """List definition stems in the directory, sorted."""
        try:
            entries = list(self._path.iterdir())
        except OSError as exc:
            raise CompilationError(
                "Cannot read components directory",
                path=str(self._path),
                code=ErrorCode.DEFINITIONS_UNREADABLE,
            ) from exc
        return sorted(
            entry.name[: -len(self._extension)]
            for entry in entries
            if entry.name.endswith(self._extension) and entry.is_file()
        )

    def get_source(self, name: str) -> tuple[str, str]:
        """Read one definition file."""
        path = self._path / f"{name}{self._extension}"
        try:
            return path.read_text(self._encoding), str(path)
        except OSError as exc:
            raise CompilationError(
                "Cannot read component definition",
                path=str(path),
                code=ErrorCode.DEFINITIONS_UNREADABLE,
            ) from exc

    def mtime(self) -> int:
        """Modification time of the directory itself, in nanoseconds.

        Adding, removing or renaming a definition bumps the directory
        mtime. Editing a file in place only does so on filesystems that
        propagate it, or when the editor replaces the file.
        """
        try:
            return self._path.lstat().st_mtime_ns
        except OSError as exc:
            raise CompilationError(
                "Cannot stat components directory",
                path=str(self._path),
                code=ErrorCode.DEFINITIONS_UNREADABLE,
            ) from exc


class DictLoader:
    """Load component definitions from an in-memory mapping.

    Maps definition stems to source strings. Useful for testing and
    embedded component sets.

    Example:
            >>> loader = DictLoader({"title": "tag: h1\\nstyle: color: red;"})
            >>> loader.list_definitions()
            ['title']

    Note:
        ``mtime()`` returns a fingerprint of the mapping contents, so
        mutating the mapping is reported as a change.

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def list_definitions(self) -> list[str]:
        return sorted(self._mapping)

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            raise CompilationError(f"Component definition '{name}' not found")
        return self._mapping[name], None

    def mtime(self) -> int:
        return hash(tuple(sorted(self._mapping.items())))


def parse_definition(
    source: str,
    stem: str,
    *,
    filename: str | None = None,
    prefix: str = DEFAULT_PREFIX,
) -> ComponentDescriptor:
    """Parse one definition source into a ComponentDescriptor.

    Args:
        source: Definition file contents.
        stem: File stem the component name is derived from.
        filename: Path used in error messages.
        prefix: CSS class prefix for the pass.

    Raises:
        DefinitionError: If the definition is malformed or has no ``tag``.
    """
    display_name = filename or f"{stem}{DEFAULT_EXTENSION}"

    def fail(message: str, code: ErrorCode, lineno: int | None = None, suggestion: str | None = None):
        return DefinitionError(
            message,
            filename=display_name,
            lineno=lineno,
            source=source,
            suggestion=suggestion,
            code=code,
        )

    values: dict[str, str] = {}
    key_lines: dict[str, int] = {}
    lines = source.splitlines()
    i = 0
    while i < len(lines):
        line = lines[i]
        lineno = i + 1
        stripped = line.strip()
        i += 1
        if not stripped or stripped.startswith("#"):
            continue
        if line[0].isspace():
            raise fail(
                "Unexpected indented line outside a style block",
                ErrorCode.MALFORMED_LINE,
                lineno,
                "Indented lines are only allowed after 'style:'",
            )

        match = _KEY_LINE_RE.fullmatch(line.rstrip())
        if match is None:
            raise fail(
                f"Expected 'key: value', got {stripped!r}",
                ErrorCode.MALFORMED_LINE,
                lineno,
            )
        key = match["key"]
        value = match["value"].strip()

        if key not in _KEYS:
            close = get_close_matches(key, sorted(_KEYS), n=1)
            hint = f"Did you mean '{close[0]}'?" if close else f"Known keys: {', '.join(sorted(_KEYS))}"
            raise fail(f"Unknown key '{key}'", ErrorCode.UNKNOWN_KEY, lineno, hint)
        if key in values:
            raise fail(
                f"Duplicate key '{key}' (first declared on line {key_lines[key]})",
                ErrorCode.DUPLICATE_KEY,
                lineno,
            )

        if key == "style" and value in _BLOCK_MARKERS:
            block: list[str] = []
            while i < len(lines) and (not lines[i].strip() or lines[i][0].isspace()):
                block.append(lines[i])
                i += 1
            value = textwrap.dedent("\n".join(block)).strip()

        values[key] = value
        key_lines[key] = lineno

    tag = values.get("tag")
    if not tag:
        raise fail(
            "Component definition has no 'tag' declaration",
            ErrorCode.MISSING_TAG,
            key_lines.get("tag"),
            "Add a line such as 'tag: h1'",
        )
    if not _TAG_RE.fullmatch(tag):
        raise fail(f"Invalid HTML tag {tag!r}", ErrorCode.INVALID_TAG, key_lines["tag"])

    name = values.get("name") or component_name_from_stem(stem)
    if not is_component_name(name):
        raise fail(
            f"Invalid component name {name!r}",
            ErrorCode.INVALID_NAME,
            key_lines.get("name"),
            "Component names start with an uppercase letter, e.g. 'Title'",
        )

    return ComponentDescriptor(
        name=name,
        tag=tag,
        raw_style=values.get("style", ""),
        class_name=class_name(name, prefix),
        filename=filename,
    )


def load_definitions(
    loader: DefinitionLoader,
    prefix: str = DEFAULT_PREFIX,
) -> list[ComponentDescriptor]:
    """Load every definition the loader lists, in listing order.

    The first failing definition raises; no partial list is returned.
    """
    descriptors: list[ComponentDescriptor] = []
    for stem in loader.list_definitions():
        source, filename = loader.get_source(stem)
        descriptor = parse_definition(source, stem, filename=filename, prefix=prefix)
        logger.debug("Loaded component %s <%s> from %s", descriptor.name, descriptor.tag, filename or stem)
        descriptors.append(descriptor)
    return descriptors
