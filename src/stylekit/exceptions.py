"""Exceptions for the stylekit component system.

Exception Hierarchy:
ComponentError (base)
├── DefinitionError           # Definition file missing `tag`, malformed, or duplicated
├── CompilationError          # Definitions unreadable / stylesheet unwritable
├── ComponentLookupError      # Template references an undeclared component (also a LookupError)
└── RewriteAmbiguityError     # Custom tags unmatched or improperly nested

No component error is ever swallowed: a failing definition aborts the whole
compilation pass, and a failing lookup propagates out of template rendering.

Example:
    ```
    S-DEF-001: Component definition has no 'tag' declaration
      --> components/title.component
       |
    >  1 | style: color: red;
       |
      Hint: Add a line such as 'tag: h1'
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum

from stylekit import terminal


class ErrorCode(Enum):
    """Searchable error codes for component build and render failures.

    Format: S-{CATEGORY}-{NUMBER}
    Categories: DEF (definition), CMP (compilation), RUN (render), RWR (rewrite)
    """

    # Definition errors (S-DEF-xxx)
    MISSING_TAG = "S-DEF-001"
    INVALID_TAG = "S-DEF-002"
    INVALID_NAME = "S-DEF-003"
    UNKNOWN_KEY = "S-DEF-004"
    DUPLICATE_KEY = "S-DEF-005"
    MALFORMED_LINE = "S-DEF-006"
    DUPLICATE_COMPONENT = "S-DEF-007"

    # Compilation errors (S-CMP-xxx)
    DEFINITIONS_UNREADABLE = "S-CMP-001"
    STYLESHEET_UNWRITABLE = "S-CMP-002"

    # Render errors (S-RUN-xxx)
    UNKNOWN_COMPONENT = "S-RUN-001"

    # Rewrite errors (S-RWR-xxx)
    UNMATCHED_CLOSE = "S-RWR-001"
    MISMATCHED_CLOSE = "S-RWR-002"
    UNCLOSED_TAG = "S-RWR-003"

    @property
    def category(self) -> str:
        """Error category (e.g., 'definition', 'render')."""
        prefix = self.value.split("-")[1]
        return {
            "DEF": "definition",
            "CMP": "compilation",
            "RUN": "render",
            "RWR": "rewrite",
        }.get(prefix, "unknown")


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional 0-based column offset for a caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format the snippet in a compiler-diagnostic style."""
        parts: list[str] = [terminal.dim_text("   |")]
        caret_written = False
        for lineno, content in self.lines:
            is_error = lineno == self.error_line
            parts.append(terminal.format_source_line(lineno, content, is_error=is_error))
            if is_error and self.column is not None:
                caret = " " * (self.column + 2) + "^"
                parts.append(f"{terminal.dim_text('   |')} {terminal.error_line(caret)}")
                caret_written = True
        if not caret_written:
            parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet for ``error_line`` (1-based) of ``source``."""
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


def _location(filename: str | None, lineno: int | None, column: int | None = None) -> str:
    loc = filename or "<source>"
    if lineno:
        loc += f":{lineno}"
        if column is not None:
            loc += f":{column + 1}"
    return loc


class ComponentError(Exception):
    """Base exception for all component system errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a short diagnostic for terminal display.

        Consumers such as the command line print this instead of a
        Python traceback.
        """
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class _LocatedError(ComponentError):
    """Component error pointing at a line of a definition or template file."""

    label = "Error"

    def __init__(
        self,
        message: str,
        *,
        filename: str | None = None,
        lineno: int | None = None,
        column: int | None = None,
        source: str | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.filename = filename
        self.lineno = lineno
        self.column = column
        self.source = source
        self.suggestion = suggestion
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    @property
    def source_snippet(self) -> SourceSnippet | None:
        if self.source and self.lineno:
            return build_source_snippet(self.source, self.lineno, column=self.column)
        return None

    def _format_message(self) -> str:
        parts = [f"{self.label}: {self.message}"]
        parts.append(f"  --> {terminal.location(_location(self.filename, self.lineno, self.column))}")
        snippet = self.source_snippet
        if snippet is not None:
            parts.append(snippet.format())
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)

    def format_compact(self) -> str:
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  --> {terminal.location(_location(self.filename, self.lineno, self.column))}",
        ]
        snippet = self.source_snippet
        if snippet is not None:
            parts.append(snippet.format())
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class DefinitionError(_LocatedError):
    """A component definition file is invalid.

    Raised when a definition is missing its ``tag`` declaration, contains a
    line the definition format does not accept, declares an invalid tag or
    component name, or collides with another component. Aborts the whole
    compilation pass.
    """

    label = "Definition Error"
    code: ErrorCode | None = ErrorCode.MALFORMED_LINE


class RewriteAmbiguityError(_LocatedError):
    """Custom component tags in a template are unmatched or improperly nested.

    Example:
            >>> rewrite("<Card><Title>Hi</Card>", "page.html")
        RewriteAmbiguityError: Closing tag </Card> does not match open <Title>
          --> page.html:1:16

    """

    label = "Rewrite Error"
    code: ErrorCode | None = ErrorCode.UNCLOSED_TAG


class CompilationError(ComponentError):
    """The compilation pass could not read definitions or write the stylesheet."""

    code: ErrorCode | None = ErrorCode.DEFINITIONS_UNREADABLE

    def __init__(self, message: str, *, path: str | None = None, code: ErrorCode | None = None):
        self.message = message
        self.path = path
        if code is not None:
            self.code = code
        super().__init__(f"{message}: {path}" if path else message)

    def format_compact(self) -> str:
        header = terminal.format_error_header(self.code.value if self.code else None, self.message)
        if self.path:
            header += f"\n  --> {terminal.location(self.path)}"
        if self.__cause__ is not None:
            header += f"\n  {terminal.dim_text('Caused by:')} {self.__cause__}"
        return header


class ComponentLookupError(ComponentError, LookupError):
    """A template referenced a component name absent from the registry.

    Includes a "Did you mean?" suggestion when a registered name is close.

    Example:
            >>> registry.render("Titel", "Hi")
        ComponentLookupError: Unknown component 'Titel'. Did you mean 'Title'?

    """

    code: ErrorCode | None = ErrorCode.UNKNOWN_COMPONENT

    def __init__(
        self,
        name: str,
        available: frozenset[str] | None = None,
        template: str | None = None,
    ):
        self.name = name
        self.available = available or frozenset()
        self.template = template
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Unknown component '{self.name}'"
        if self.template:
            msg += f" in {terminal.location(self.template)}"
        matches = get_close_matches(self.name, sorted(self.available), n=1, cutoff=0.6)
        if matches:
            msg += f". Did you mean '{terminal.suggestion(matches[0])}'?"
        elif self.available:
            msg += f". Registered: {', '.join(sorted(self.available)[:10])}"
        else:
            msg += ". No components are registered"
        return msg

    def format_compact(self) -> str:
        hint_text = f"Add a '{self.name}' definition to the components directory"
        return "\n".join(
            [
                terminal.format_error_header(self.code.value if self.code else None, str(self)),
                f"  {terminal.hint('Hint:')} {hint_text}",
            ]
        )
