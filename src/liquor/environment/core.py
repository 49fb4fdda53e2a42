"""Liquor Environment: the configuration hub for parsing and rendering.

An Environment owns everything templates share: the loader, the filter
and tag tables, globals, strict-mode and include-depth settings, and a
bounded LRU cache of templates loaded by name.

Thread-Safety:
    Filter and tag tables are copy-on-write, and the template cache is
    guarded by a lock, so one Environment may serve renders on many
    threads. Registering filters or tags while renders are in flight is
    safe; a render in progress keeps the table it started with.

Example:
    >>> env = Environment(loader=DictLoader({"card": "[{{ title }}]"}))
    >>> env.add_filter("shout", lambda s: f"{s}!")
    >>> env.from_string("{{ 'hi' | shout }} {% render 'card', title: 'x' %}").render()
    'hi! [x]'

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from liquor.environment.exceptions import TemplateNotFoundError
from liquor.environment.filters import BUILTIN_FILTERS
from liquor.environment.loaders import Loader
from liquor.environment.registry import CustomTag, FilterRegistry, TagRegistry
from liquor.lexer import Lexer
from liquor.nodes import Template as TemplateNode
from liquor.parser import Parser
from liquor.renderer import Renderer
from liquor.template.core import Template
from liquor.utils.lru_cache import LRUCache

logger = logging.getLogger(__name__)


class Environment:
    """Central configuration for Liquor templates.

    Args:
        loader: Resolves template names for ``get_template``, ``include``
            and ``render``
        filters: Host filters, checked before the built-ins
        tags: Host tags (plain callables or CustomTag), checked before the
            built-ins at parse time
        globals: Variables visible to every template, read-only
        strict_variables: Raise UndefinedError for unknown top-level names
        max_include_depth: Maximum include/render nesting
        cache_size: Maximum number of named templates kept compiled
    """

    def __init__(
        self,
        loader: Loader | None = None,
        filters: Mapping[str, Callable[..., Any]] | None = None,
        tags: Mapping[str, Any] | None = None,
        globals: Mapping[str, Any] | None = None,
        strict_variables: bool = False,
        max_include_depth: int = 50,
        cache_size: int = 400,
    ):
        self.loader = loader
        self.globals: dict[str, Any] = dict(globals) if globals else {}
        self.strict_variables = strict_variables
        self.max_include_depth = max_include_depth

        self._filters: dict[str, Callable[..., Any]] = {}
        self._tags: dict[str, CustomTag] = {}
        if filters:
            self.filters.update(filters)
        if tags:
            self.tags.update(tags)

        self._cache: LRUCache[str, Template] = LRUCache(maxsize=cache_size, name="templates")
        self._renderer: Renderer | None = None

    # ------------------------------------------------------------------
    # Registries
    # ------------------------------------------------------------------

    @property
    def filters(self) -> FilterRegistry:
        """Filter table: host overrides first, then built-ins."""
        return FilterRegistry(self, "_filters", BUILTIN_FILTERS)

    @property
    def tags(self) -> TagRegistry:
        """Host tag table."""
        return TagRegistry(self, "_tags")

    def add_filter(self, name: str, func: Callable[..., Any]) -> None:
        """Register a filter; the last registration of a name wins.

        The filter is called as ``func(value, *args, **kwargs)``.
        """
        self.filters[name] = func

    def add_tag(self, name: str, func: Callable[..., Any], block: bool = False) -> None:
        """Register a host tag.

        ``func(args, body, context, render)`` receives the evaluated
        arguments, the body nodes (empty unless ``block``), the Context and
        a ``render(nodes, context) -> str`` callback, and returns the tag's
        output. Block tags are closed by ``{% end<name> %}``.

        Tags are resolved at parse time, so register them before parsing
        templates that use them.
        """
        self.tags[name] = CustomTag(name, func, block)

    @property
    def renderer(self) -> Renderer:
        if self._renderer is None:
            self._renderer = Renderer(self)
        return self._renderer

    # ------------------------------------------------------------------
    # Parsing and loading
    # ------------------------------------------------------------------

    def parse(
        self,
        source: str,
        name: str | None = None,
        filename: str | None = None,
    ) -> TemplateNode:
        """Parse source into an AST without wrapping it in a Template.

        Raises:
            TemplateSyntaxError: On any lexing or parsing failure
        """
        tokens = Lexer(source, name).tokenize()
        parser = Parser(tokens, name=name, filename=filename, source=source, tags=self._tags)
        return parser.parse()

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Compile a template from a source string (not cached).

        Example:
            >>> env.from_string("Hello, {{ name }}!").render(name="World")
            'Hello, World!'
        """
        return Template(self, self.parse(source, name), name=name, source=source)

    def get_template(self, name: str) -> Template:
        """Load a template by name through the loader, cached.

        Raises:
            TemplateNotFoundError: If there is no loader or it cannot
                resolve ``name``
            TemplateSyntaxError: If the template source is invalid
        """
        return self._cache.get_or_set(name, lambda: self._load_template(name))

    def _load_template(self, name: str) -> Template:
        if self.loader is None:
            raise TemplateNotFoundError(
                f"Template '{name}' not found (no loader configured)", name=name
            )

        source, filename = self.loader.get_source(name)
        ast = self.parse(source, name=name, filename=filename)
        logger.debug("Compiled template %s (%s)", name, filename or "no file")
        return Template(self, ast, name=name, filename=filename, source=source)

    def render(self, name: str, /, *args: Any, **kwargs: Any) -> str:
        """Shortcut for ``get_template(name).render(*args, **kwargs)``."""
        return self.get_template(name).render(*args, **kwargs)

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        """Drop every cached template, e.g. after the loader's sources change."""
        self._cache.clear()
        logger.debug("Template cache cleared")

    def cache_info(self) -> dict[str, int | str]:
        """Hit/miss statistics of the template cache."""
        return self._cache.stats()

    def __repr__(self) -> str:
        return (
            f"<Environment loader={type(self.loader).__name__ if self.loader else None} "
            f"filters={len(self._filters)} tags={len(self._tags)}>"
        )
