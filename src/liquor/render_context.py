"""Liquor RenderContext: per-render state kept out of user data.

The template name, current line, include depth and template stack live in
a ContextVar instead of in the variable scope, so a user variable named
``template`` or ``line`` can never collide with engine bookkeeping.

Thread Safety:
    ContextVars are thread-local. Each thread/async task has its
    own RenderContext, and ``asyncio.to_thread`` copies the current one
    into the worker thread.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field


@dataclass
class RenderContext:
    """Per-render state isolated from the template's variables.

    Attributes:
        template_name: Current template name for error messages
        filename: Source file path for error messages
        source: Template source for runtime error snippets
        line: Line of the node being rendered
        include_depth: Current include/render depth
        max_include_depth: Maximum allowed include/render depth
        template_stack: Stack of (template_name, line) for error traces
    """

    template_name: str | None = None
    filename: str | None = None
    source: str | None = None

    line: int = 0

    include_depth: int = 0
    max_include_depth: int = 50

    template_stack: list[tuple[str, int]] = field(default_factory=list)

    def check_include_depth(self, template_name: str) -> None:
        """Raise RenderError if another include would exceed the limit."""
        if self.include_depth >= self.max_include_depth:
            from liquor.environment.exceptions import ErrorCode, RenderError

            raise RenderError(
                f"Maximum include depth exceeded ({self.max_include_depth}) "
                f"when including '{template_name}'",
                template_name=self.template_name,
                lineno=self.line or None,
                template_stack=self.template_stack,
                suggestion="Check for circular includes: A → B → A",
                code=ErrorCode.INCLUDE_DEPTH,
            )

    def child_context(
        self,
        template_name: str | None = None,
        source: str | None = None,
    ) -> RenderContext:
        """Create the context for an included template, one level deeper.

        The current location is appended to ``template_stack`` so errors
        inside the child report the whole include chain.
        """
        new_stack = self.template_stack.copy()
        if self.template_name and self.line > 0:
            new_stack.append((self.template_name, self.line))

        return RenderContext(
            template_name=template_name or self.template_name,
            filename=None,
            source=source,
            line=0,
            include_depth=self.include_depth + 1,
            max_include_depth=self.max_include_depth,
            template_stack=new_stack,
        )


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Get current render context (None if not in render)."""
    return _render_context.get()


@contextmanager
def render_context(
    template_name: str | None = None,
    filename: str | None = None,
    source: str | None = None,
    max_include_depth: int = 50,
) -> Iterator[RenderContext]:
    """Context manager for render-scoped state.

    Creates a new RenderContext, makes it current for the duration of the
    with block, and restores the previous one on exit.

    Example:
        with render_context(template_name="page.liquid") as ctx:
            html = renderer.render(template.body, context)
            # ctx.line is updated as nodes are rendered
    """
    ctx = RenderContext(
        template_name=template_name,
        filename=filename,
        source=source,
        max_include_depth=max_include_depth,
    )
    token = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)


def set_render_context(ctx: RenderContext) -> Token[RenderContext | None]:
    """Set a RenderContext and return the reset token.

    Used by include/render, which must restore the caller's context
    after the child template finishes.
    """
    return _render_context.set(ctx)


def reset_render_context(token: Token[RenderContext | None]) -> None:
    """Reset render context using a token from set_render_context."""
    _render_context.reset(token)
