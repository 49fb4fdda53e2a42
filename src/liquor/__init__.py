"""Liquor: a Liquid-style template engine in pure Python.

Template source is parsed into an immutable AST, then interpreted by a
tree-walking renderer against a per-call variable context, through a
filter pipeline and a set of flow-control tags.

Quickstart:
    >>> import liquor
    >>> liquor.render("Dear {{ user.firstName | capitalize }},", {"user": {"firstName": "john"}})
    'Dear John,'

Compile once, render many times:
    >>> template = liquor.compile("{% for x in items %}{{ x }}{% endfor %}")
    >>> liquor.render_compiled(template, {"items": [1, 2, 3]})
    '123'

Shared configuration:
    >>> from liquor import Environment, DictLoader
    >>> env = Environment(loader=DictLoader({"card": "[{{ title }}]"}))
    >>> env.from_string("{% render 'card', title: 'Hi' %}").render()
    '[Hi]'

Architecture:
Template Source → Lexer → Parser → Liquor AST → Renderer → str

Pipeline stages:
1. **Lexer**: Splits source into text, ``{{ }}`` and ``{% %}`` tokens,
   applying whitespace-trim markers
2. **Parser**: Builds the immutable AST, matching block tags to end tags
3. **Renderer**: Walks the AST with O(1) dispatch by node type, appending
   fragments to a list buffer joined once at the end

Error Handling:
Every failure during a render call surfaces as a single RenderError that
names the template and line, with the underlying FilterError, TagError or
exception chained as ``__cause__``. Syntax errors raise TemplateSyntaxError
with line, column and the offending source line.

Thread-Safety:
Compiled templates, environments and their filter/tag tables may be shared
across threads. Each render call builds its own Context, which is never
shared.

"""

from collections.abc import Callable, Mapping
from typing import Any

from liquor._types import Token, TokenType
from liquor.environment import (
    BUILTIN_FILTERS,
    ChoiceLoader,
    CustomTag,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FilterError,
    FunctionLoader,
    Loader,
    RenderError,
    SourceSnippet,
    TagError,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from liquor.context import Context
from liquor.parser import ParseError
from liquor.render_context import RenderContext, get_render_context
from liquor.template import BLANK, EMPTY, UNDEFINED, LoopContext, Template

__version__ = "0.1.0"


def compile(
    source: str,
    *,
    filters: Mapping[str, Callable[..., Any]] | None = None,
    tags: Mapping[str, Any] | None = None,
    loader: Loader | None = None,
    name: str | None = None,
) -> Template:
    """Parse ``source`` into a reusable Template with its own Environment.

    Args:
        source: Template source text
        filters: Host filters, checked before the built-ins
        tags: Host tags (callables or CustomTag), checked before built-ins
        loader: Resolves ``include``/``render`` targets
        name: Template name for error messages

    Raises:
        TemplateSyntaxError: On any syntax error, with line and column
    """
    env = Environment(loader=loader, filters=filters, tags=tags)
    return env.from_string(source, name=name)


def render(source: str, context: Mapping[str, Any] | None = None, **options: Any) -> str:
    """Compile and render ``source`` in one step.

    ``options`` are passed to ``compile`` (``filters``, ``tags``,
    ``loader``, ``name``).

    Raises:
        TemplateSyntaxError: If ``source`` does not parse
        RenderError: If rendering fails
    """
    return compile(source, **options).render(context)


def render_compiled(template: Template, context: Mapping[str, Any] | None = None) -> str:
    """Render a compiled Template against a fresh context."""
    return template.render(context)


__all__ = [
    "BLANK",
    "BUILTIN_FILTERS",
    "EMPTY",
    "UNDEFINED",
    "ChoiceLoader",
    "Context",
    "CustomTag",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FilterError",
    "FunctionLoader",
    "Loader",
    "LoopContext",
    "ParseError",
    "RenderContext",
    "RenderError",
    "SourceSnippet",
    "TagError",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "UndefinedError",
    "__version__",
    "build_source_snippet",
    "compile",
    "get_render_context",
    "render",
    "render_compiled",
]
