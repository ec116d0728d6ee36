"""Template preprocessing for capitalized component tags.

Rewrites custom tags into Jinja2 call blocks before the template is
compiled:

    <Title>Styled components</Title>

becomes

    {% call render_component("Title") %}Styled components{% endcall %}

so the children are rendered lazily by the call block's ``caller()`` and
nesting is handled by Jinja2 itself. Attribute text on an opening tag is
passed through verbatim as a string (``attrs='...'``); render functions
ignore it. ``<Title />`` becomes an empty call block.

The rewrite is lexical: tags are found with regular expressions, not an
HTML parser. Capitalized tags inside comments or ``{% raw %}`` sections
are rewritten too, and uppercase HTML tags such as ``<DIV>`` are taken
for components.

Strict mode (the default) tracks open tags and raises
RewriteAmbiguityError for a closing tag with no open tag, a closing tag
that does not match the innermost open tag, or an opening tag that is
never closed. ``strict=False`` rewrites without checking.

Thread-Safety:
    ``rewrite`` is a pure function; templates can be preprocessed in
    parallel.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from stylekit.exceptions import ErrorCode, RewriteAmbiguityError

DISPATCH_NAME = "render_component"

# <Title attrs> and </Title>
_COMPONENT_TAG_RE = re.compile(
    r"<(?:/(?P<close>[A-Z]\w*)|(?P<open>[A-Z]\w*)(?P<attrs>[^>]*))>"
)

END_MARKER = "{% endcall %}"


@dataclass(frozen=True, slots=True)
class ComponentTag:
    """One capitalized tag found in template source.

    Attributes:
        name: Component name.
        closing: True for ``</Name>``.
        attrs: Raw attribute text of an opening tag, without a self-closing slash.
        self_closing: True for ``<Name />``.
        start: Offset of ``<`` in the source.
        end: Offset just past ``>``.
    """

    name: str
    closing: bool
    attrs: str
    self_closing: bool
    start: int
    end: int

    def position(self, source: str) -> tuple[int, int]:
        """Return (1-based line, 0-based column) of the tag in ``source``."""
        lineno = source.count("\n", 0, self.start) + 1
        column = self.start - (source.rfind("\n", 0, self.start) + 1)
        return lineno, column


def scan_tags(source: str) -> Iterator[ComponentTag]:
    """Yield every capitalized opening and closing tag in source order."""
    for match in _COMPONENT_TAG_RE.finditer(source):
        if match["close"] is not None:
            yield ComponentTag(match["close"], True, "", False, match.start(), match.end())
            continue
        attrs = match["attrs"]
        self_closing = attrs.rstrip().endswith("/")
        if self_closing:
            attrs = attrs.rstrip()[:-1].rstrip()
        yield ComponentTag(match["open"], False, attrs, self_closing, match.start(), match.end())


def referenced_components(source: str) -> frozenset[str]:
    """Names of all components a template refers to."""
    return frozenset(tag.name for tag in scan_tags(source) if not tag.closing)


def open_marker(name: str, attrs: str = "", self_closing: bool = False) -> str:
    """Build the call-block opening for one component tag."""
    args = f'"{name}"'
    if attrs:
        args += f", attrs={attrs!r}"
    marker = f"{{% call {DISPATCH_NAME}({args}) %}}"
    if self_closing:
        marker += END_MARKER
    # Keep template line numbers aligned with the unrewritten template
    newlines = attrs.count("\n")
    if newlines:
        marker += "{#" + "\n" * newlines + "#}"
    return marker


def _check_nesting(source: str, tags: list[ComponentTag], name: str | None) -> None:
    stack: list[ComponentTag] = []

    def fail(tag: ComponentTag, message: str, code: ErrorCode, suggestion: str) -> RewriteAmbiguityError:
        lineno, column = tag.position(source)
        return RewriteAmbiguityError(
            message,
            filename=name,
            lineno=lineno,
            column=column,
            source=source,
            suggestion=suggestion,
            code=code,
        )

    for tag in tags:
        if tag.self_closing:
            continue
        if not tag.closing:
            stack.append(tag)
            continue
        if not stack:
            raise fail(
                tag,
                f"Closing tag </{tag.name}> has no matching <{tag.name}>",
                ErrorCode.UNMATCHED_CLOSE,
                f"Remove </{tag.name}> or add an opening <{tag.name}> before it",
            )
        top = stack[-1]
        if top.name != tag.name:
            raise fail(
                tag,
                f"Closing tag </{tag.name}> does not match open <{top.name}>",
                ErrorCode.MISMATCHED_CLOSE,
                f"Close <{top.name}> before </{tag.name}>",
            )
        stack.pop()

    if stack:
        tag = stack[-1]
        raise fail(
            tag,
            f"Component tag <{tag.name}> is never closed",
            ErrorCode.UNCLOSED_TAG,
            f"Add </{tag.name}>, or write <{tag.name} /> for an empty component",
        )


def rewrite(source: str, name: str | None = None, *, strict: bool = True) -> str:
    """Rewrite capitalized component tags in ``source`` into call blocks.

    Args:
        source: Raw template source.
        name: Template name or path, used in error messages.
        strict: Raise on unmatched or misnested component tags.

    Raises:
        RewriteAmbiguityError: In strict mode, if component tags do not nest.
    """
    tags = list(scan_tags(source))
    if not tags:
        return source
    if strict:
        _check_nesting(source, tags, name)

    parts: list[str] = []
    pos = 0
    for tag in tags:
        parts.append(source[pos : tag.start])
        if tag.closing:
            parts.append(END_MARKER)
        else:
            parts.append(open_marker(tag.name, tag.attrs, tag.self_closing))
        pos = tag.end
    parts.append(source[pos:])
    return "".join(parts)


def rewrite_file(path: str | Path, *, encoding: str = "utf-8", strict: bool = True) -> str:
    """Read a template file and return its rewritten source."""
    path = Path(path)
    return rewrite(path.read_text(encoding), str(path), strict=strict)
