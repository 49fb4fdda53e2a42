"""Liquor Environment package: configuration, loaders, filters and errors.

Re-exports the public symbols so that ``from liquor.environment import
Environment`` works without knowing the module layout.

"""

from liquor.environment.exceptions import (
    ErrorCode,
    FilterError,
    RenderError,
    SourceSnippet,
    TagError,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from liquor.environment.loaders import (
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    FunctionLoader,
    Loader,
)
from liquor.environment.filters import BUILTIN_FILTERS
from liquor.environment.registry import CustomTag, FilterRegistry, TagRegistry
from liquor.environment.core import Environment

__all__ = [
    "BUILTIN_FILTERS",
    "ChoiceLoader",
    "CustomTag",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FilterError",
    "FilterRegistry",
    "FunctionLoader",
    "Loader",
    "RenderError",
    "SourceSnippet",
    "TagError",
    "TagRegistry",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "UndefinedError",
    "build_source_snippet",
]
