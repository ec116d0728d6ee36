"""Stylesheet emission for compiled components.

Each component contributes one rule scoped to its class:

    .psc-Title {
      color: DeepPink;
      font-weight: 600;
    }

The stylesheet is rendered in full on every compilation pass and replaces
the previous file, so rules from deleted components never linger.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from stylekit.component import ComponentDescriptor
from stylekit.exceptions import CompilationError, ErrorCode

INDENT = "  "

HEADER_PREFIX = "/* generated at "


def format_style(raw_style: str) -> str:
    """Trim the raw style text and indent each line by two spaces."""
    text = raw_style.strip()
    if not text:
        return ""
    return "\n".join(f"{INDENT}{line}" for line in text.split("\n"))


def emit_rule(descriptor: ComponentDescriptor) -> str:
    """Render the CSS rule block for one component."""
    body = format_style(descriptor.raw_style)
    if not body:
        return f".{descriptor.class_name} {{\n}}\n"
    return f".{descriptor.class_name} {{\n{body}\n}}\n"


def generated_header(now: datetime | None = None) -> str:
    """Return the one-line generation comment that starts every stylesheet."""
    stamp = (now or datetime.now(UTC)).isoformat()
    return f"{HEADER_PREFIX}{stamp} */\n"


def render_stylesheet(
    descriptors: Iterable[ComponentDescriptor],
    *,
    now: datetime | None = None,
) -> str:
    """Render the complete stylesheet text, one rule per descriptor, in order."""
    blocks = [generated_header(now)]
    blocks.extend(emit_rule(descriptor) for descriptor in descriptors)
    return "\n".join(blocks)


def strip_header(stylesheet: str) -> str:
    """Drop the generation comment, leaving only the rule blocks."""
    if stylesheet.startswith(HEADER_PREFIX):
        _, _, rest = stylesheet.partition("\n")
        return rest
    return stylesheet


def write_stylesheet(path: str | Path, text: str, encoding: str = "utf-8") -> Path:
    """Replace the stylesheet at ``path`` with ``text``.

    The text goes to a temporary file in the same directory which is then
    renamed over ``path``; readers see either the old or the new file.

    Raises:
        CompilationError: If the stylesheet cannot be written.
    """
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding=encoding, newline="\n") as fh:
                fh.write(text)
            # mkstemp creates 0600 files; stylesheets are served to browsers
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise CompilationError(
            "Cannot write component stylesheet",
            path=str(target),
            code=ErrorCode.STYLESHEET_UNWRITABLE,
        ) from exc
    return target
