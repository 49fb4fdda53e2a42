"""Exceptions for the Liquor template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError       # Parse-time syntax error (ParseError)
├── RenderError               # Any failure during a render call
│   └── UndefinedError        # Undefined variable (strict_variables only)
├── FilterError               # Raised inside a filter
└── TagError                  # Raised inside a tag executor
    └── TemplateNotFoundError # include/render target could not be loaded

A render call never leaks a FilterError or TagError: the render boundary
wraps every evaluation failure in a single RenderError and chains the
original as ``__cause__``. Nothing is retried and no partial output is
returned.

Example:
    ```
    L-RUN-002: Division by zero
      Location: invoice.liquid:12
       |
     11 | <td>{{ line.qty }}</td>
    >12 | <td>{{ line.total | divided_by: line.qty }}</td>
       |
      Caused by: FilterError in 'divided_by'
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from liquor.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes for Liquor errors.

    Format: L-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), RUN (runtime), TPL (template loading)
    """

    # Lexer errors (L-LEX-xxx)
    UNCLOSED_TAG = "L-LEX-001"
    UNCLOSED_STRING = "L-LEX-002"
    UNEXPECTED_CHARACTER = "L-LEX-003"

    # Parser errors (L-PAR-xxx)
    UNEXPECTED_TOKEN = "L-PAR-001"
    UNCLOSED_BLOCK = "L-PAR-002"
    INVALID_EXPRESSION = "L-PAR-003"
    INVALID_FILTER = "L-PAR-004"
    UNKNOWN_TAG = "L-PAR-005"

    # Runtime errors (L-RUN-xxx)
    UNDEFINED_VARIABLE = "L-RUN-001"
    FILTER_ERROR = "L-RUN-002"
    TAG_ERROR = "L-RUN-003"
    UNKNOWN_FILTER = "L-RUN-004"
    UNKNOWN_RENDER_TAG = "L-RUN-005"
    INCLUDE_DEPTH = "L-RUN-006"
    RUNTIME_ERROR = "L-RUN-007"

    # Template loading errors (L-TPL-xxx)
    TEMPLATE_NOT_FOUND = "L-TPL-001"
    SYNTAX_ERROR = "L-TPL-002"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'lexer', 'parser', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


def format_template_stack(stack: list[tuple[str, int]] | None) -> str:
    """Format the include/render chain for error messages.

    Example:
        >>> print(format_template_stack([("page.liquid", 4), ("card.liquid", 2)]))
        Template stack:
          • page.liquid:4
          • card.liquid:2
    """
    if not stack:
        return ""

    lines = [terminal.dim_text("Template stack:")]
    for template_name, line_num in stack:
        lines.append(f"  • {terminal.location(f'{template_name}:{line_num}')}")
    return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines surrounding an error.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional 0-based column for a caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format the snippet in a compiler-diagnostic style."""
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
            if lineno == self.error_line and self.column is not None:
                caret = " " * self.column + "^"
                parts.append(f"{terminal.dim_text('   |')} {terminal.colorize(caret, 'bright_red')}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TemplateError(Exception):
    """Base exception for all Liquor errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a short, traceback-free diagnostic."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateSyntaxError(TemplateError):
    """Parse-time syntax error in template source.

    When ``source`` and ``lineno`` are provided the message includes the
    offending line, and a caret when ``col_offset`` is known.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.filename = filename
        self.source = source
        self.col_offset = col_offset
        self.suggestion = suggestion
        super().__init__(self._format_message())

    @property
    def column(self) -> int | None:
        """1-based column, for callers that count columns from one."""
        return None if self.col_offset is None else self.col_offset + 1

    @property
    def snippet(self) -> str | None:
        """The offending source line, if the source is known."""
        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                return lines[self.lineno - 1]
        return None

    def _location(self) -> str:
        location = self.filename or self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"
        return location

    def _format_message(self) -> str:
        msg = f"Syntax Error: {self.message}\n  --> {self._location()}"

        snippet = self.snippet
        if snippet is not None:
            msg += f"\n   |\n{self.lineno:>3} | {snippet}"
            if self.col_offset is not None:
                msg += f"\n   | {' ' * self.col_offset}^"

        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, self.message)]
        parts.append(f"  --> {terminal.location(self._location())}")
        if self.source and self.lineno:
            parts.append(
                build_source_snippet(self.source, self.lineno, column=self.col_offset).format()
            )
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class RenderError(TemplateError):
    """Render-time failure, wrapping whatever went wrong underneath.

    Output Format:
            ```
            Render Error: Unknown filter 'bogus'
              Location: <template>:1
               |
            >  1 | {{ x | bogus }}
               |
            ```

    Attributes:
        message: Error description
        template_name: Name of the template being rendered
        lineno: Line number in template source
        source_snippet: Source lines around the failing node
        template_stack: Include/render chain, outermost first
        suggestion: Actionable fix suggestion
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
        source_snippet: SourceSnippet | None = None,
        template_stack: list[tuple[str, int]] | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.suggestion = suggestion
        self.source_snippet = source_snippet
        self.template_stack = template_stack or []
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    @property
    def cause(self) -> BaseException | None:
        """The underlying FilterError, TagError or exception, if any."""
        return self.__cause__

    def _location(self) -> str | None:
        if not (self.template_name or self.lineno):
            return None
        loc = self.template_name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
        return loc

    def _format_message(self) -> str:
        parts = [f"Render Error: {self.message}"]
        loc = self._location()
        if loc:
            parts.append(f"  Location: {terminal.location(loc)}")
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.template_stack:
            parts.append("")
            parts.append(format_template_stack(self.template_stack))
        if self.suggestion:
            parts.append(f"\n  {terminal.hint('Suggestion:')} {self.suggestion}")
        return "\n".join(parts)

    def format_compact(self) -> str:
        parts = [terminal.format_error_header(self.code.value if self.code else None, self.message)]
        loc = self._location()
        if loc:
            parts.append(f"  Location: {terminal.location(loc)}")
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.template_stack:
            parts.append("")
            parts.append(format_template_stack(self.template_stack))
        if self.__cause__ is not None:
            parts.append(f"  Caused by: {type(self.__cause__).__name__}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class UndefinedError(RenderError):
    """Raised for an undefined variable when ``strict_variables`` is enabled.

    If ``available_names`` is provided, a "Did you mean?" suggestion is
    included when a close match is found.

    Example:
            >>> env = Environment(strict_variables=True)
            >>> env.from_string("{{ titl }}").render(title="x")
        UndefinedError: Undefined variable 'titl'. Did you mean 'title'?
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        name: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        available_names: frozenset[str] | None = None,
    ):
        self.name = name
        message = f"Undefined variable '{name}'"
        if available_names:
            from difflib import get_close_matches

            matches = get_close_matches(name, available_names, n=1, cutoff=0.6)
            if matches:
                message += f". Did you mean '{terminal.suggestion(matches[0])}'?"
        super().__init__(
            message,
            template_name=template_name,
            lineno=lineno,
            suggestion=f"Use {{{{ {name} | default: '' }}}} for optional variables",
        )


class FilterError(TemplateError):
    """Raised inside a filter, e.g. division by zero or a malformed escape.

    Attributes:
        message: What went wrong
        filter_name: Name of the failing filter (set by the renderer when
            the filter itself did not provide one)
    """

    code: ErrorCode | None = ErrorCode.FILTER_ERROR

    def __init__(self, message: str, filter_name: str | None = None):
        self.message = message
        self.filter_name = filter_name
        super().__init__(message)

    def __str__(self) -> str:
        if self.filter_name:
            return f"{self.message} (in filter '{self.filter_name}')"
        return self.message


class TagError(TemplateError):
    """Raised inside a tag executor, e.g. a malformed for-loop.

    Attributes:
        message: What went wrong
        tag_name: Name of the failing tag
    """

    code: ErrorCode | None = ErrorCode.TAG_ERROR

    def __init__(self, message: str, tag_name: str | None = None):
        self.message = message
        self.tag_name = tag_name
        super().__init__(message)

    def __str__(self) -> str:
        if self.tag_name:
            return f"{self.message} (in tag '{self.tag_name}')"
        return self.message


class TemplateNotFoundError(TagError):
    """An include/render target could not be resolved by the loader.

    Example:
            >>> env.get_template("missing.liquid")
        TemplateNotFoundError: Template 'missing.liquid' not found
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(self, message: str, tag_name: str | None = None, name: str | None = None):
        self.name = name
        super().__init__(message, tag_name)
