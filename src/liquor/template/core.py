"""Liquor Template: a parsed template ready for rendering.

A Template pairs the immutable AST with its source and name, and renders
it through the owning Environment's renderer. Templates are reusable and
safe to render from many threads at once: every call builds its own
Context and its own RenderContext, and nothing one call binds is visible
to another.

Architecture:
    ```
    Template
    ├── _env: Environment           # filters, tags, loader, globals
    ├── _ast: nodes.Template        # immutable AST root
    ├── _source: str | None         # for error snippets
    └── _name, _filename            # for error messages
    ```

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from liquor.context import Context
from liquor.environment.exceptions import RenderError
from liquor.render_context import render_context
from liquor.renderer.errors import enhance_error

if TYPE_CHECKING:
    from liquor.environment.core import Environment
    from liquor.nodes import Template as TemplateNode


class Template:
    """Compiled template ready for rendering.

    Created by ``Environment.from_string()``, ``Environment.get_template()``
    or ``liquor.compile()``; not usually constructed directly.

    Example:
        >>> template = env.from_string("Hello, {{ name }}!")
        >>> template.render(name="World")
        'Hello, World!'
        >>> template.render({"name": "World"})
        'Hello, World!'
    """

    __slots__ = ("_ast", "_env", "_filename", "_name", "_source")

    def __init__(
        self,
        env: Environment,
        ast: TemplateNode,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
    ):
        self._env = env
        self._ast = ast
        self._name = name
        self._filename = filename
        self._source = source

    @property
    def env(self) -> Environment:
        return self._env

    @property
    def ast(self) -> TemplateNode:
        """The immutable AST root."""
        return self._ast

    @property
    def name(self) -> str | None:
        """Template name."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Source filename."""
        return self._filename

    @property
    def source(self) -> str | None:
        return self._source

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render the template with the given variables.

        The caller's mapping is never mutated: ``assign`` and ``capture``
        bind into a scope that belongs to this call only.

        Args:
            *args: At most one mapping of variables
            **kwargs: Variables as keyword arguments (override the mapping)

        Returns:
            The complete rendered output

        Raises:
            RenderError: On any evaluation failure (UndefinedError in
                strict mode); the underlying error is chained as ``__cause__``
            TypeError: For more than one positional argument, or a
                positional argument that is not a mapping
        """
        data: dict[str, Any] = {}
        if args:
            if len(args) == 1 and (args[0] is None or isinstance(args[0], Mapping)):
                data.update(args[0] or {})
            else:
                raise TypeError(
                    f"render() takes at most 1 positional argument (a mapping), got {len(args)}"
                )
        data.update(kwargs)

        env = self._env
        ctx = Context(data, env.globals, strict=env.strict_variables)

        with render_context(
            template_name=self._name,
            filename=self._filename,
            source=self._source,
            max_include_depth=env.max_include_depth,
        ) as render_ctx:
            try:
                return env.renderer.render(self._ast.body, ctx)
            except RenderError:
                raise
            except Exception as e:
                raise enhance_error(e, render_ctx) from e

    async def render_async(self, *args: Any, **kwargs: Any) -> str:
        """Async wrapper for synchronous render.

        Runs the synchronous ``render()`` method in a worker thread so the
        event loop is not blocked.
        """
        import asyncio

        return await asyncio.to_thread(self.render, *args, **kwargs)

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"
