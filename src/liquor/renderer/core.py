"""Liquor Renderer: tree-walking interpreter over the immutable AST.

Each node is dispatched in O(1) by its class name to a handler that
appends output fragments to a shared list buffer. The buffer is joined
once at the end (StringBuilder pattern), so output is produced in
document order and node N+1 never starts before node N's subtree is
done.

Handlers for tag nodes live in ``liquor.tags``; text and output nodes
are handled here.

Failure Semantics:
    Unknown filters and tags raise RenderError directly. FilterError,
    TagError and any other exception propagate to the nearest template
    boundary (``Template.render`` or an include/render tag), where
    ``enhance_error`` wraps them in a single positioned RenderError.
    The partial buffer is discarded with the exception.

"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from liquor.environment.exceptions import ErrorCode, RenderError
from liquor.nodes import Node, Output, Tag, Text
from liquor.render_context import get_render_context
from liquor.renderer.errors import render_error
from liquor.renderer.expressions import ExpressionEvaluationMixin
from liquor.tags import BUILTIN_TAGS, render_custom_tag
from liquor.template.helpers import to_str

if TYPE_CHECKING:
    from liquor.context import Context
    from liquor.environment.core import Environment

NodeHandler = Callable[[Any, Any, "Context", list[str]], None]


class Renderer(ExpressionEvaluationMixin):
    """Render AST nodes against a Context.

    A Renderer holds no per-call state beyond references to the
    environment's tables, so one instance serves a whole render call,
    nested include/render tags included.

    Args:
        env: Environment supplying filters, tags, loader and globals

    Example:
        >>> renderer = Renderer(env)
        >>> renderer.render(env.parse("Hi {{ name }}").body, Context({"name": "Ada"}))
        'Hi Ada'
    """

    def __init__(self, env: Environment):
        self.env = env
        self._filters = env.filters
        self._tags = env.tags
        self._dispatch = self._get_node_dispatch()
        self._expr_dispatch = self._get_expr_dispatch()

    def _get_node_dispatch(self) -> dict[str, NodeHandler]:
        """Node class name → handler."""
        return {
            "Text": Renderer._render_text,
            "Output": Renderer._render_output,
            "Tag": Renderer._render_tag,
            **BUILTIN_TAGS,
        }

    def render(self, nodes: Sequence[Node], ctx: Context) -> str:
        """Render ``nodes`` and return the output string."""
        buf: list[str] = []
        self.render_into(nodes, ctx, buf)
        return "".join(buf)

    def render_into(self, nodes: Sequence[Node], ctx: Context, buf: list[str]) -> None:
        """Render ``nodes`` appending fragments to ``buf``."""
        render_ctx = get_render_context()
        dispatch = self._dispatch
        for node in nodes:
            if render_ctx is not None:
                render_ctx.line = node.lineno
            handler = dispatch.get(type(node).__name__)
            if handler is None:
                raise self._render_error(
                    f"No renderer for {type(node).__name__} node",
                    code=ErrorCode.UNKNOWN_RENDER_TAG,
                )
            handler(self, node, ctx, buf)

    def _render_text(self, node: Text, ctx: Context, buf: list[str]) -> None:
        buf.append(node.value)

    def _render_output(self, node: Output, ctx: Context, buf: list[str]) -> None:
        if node.expr is None:
            return
        value = self.evaluate_filtered(node.expr, node.filters, ctx)
        buf.append(to_str(value))

    def _render_tag(self, node: Tag, ctx: Context, buf: list[str]) -> None:
        tag = self._tags.get(node.name)
        if tag is None:
            raise self._render_error(
                f"Unknown tag '{node.name}'",
                code=ErrorCode.UNKNOWN_RENDER_TAG,
                suggestion="Register it with Environment.add_tag() before rendering",
            )
        render_custom_tag(self, node, tag, ctx, buf)

    def _render_error(
        self,
        message: str,
        code: ErrorCode | None = None,
        suggestion: str | None = None,
    ) -> RenderError:
        return render_error(message, code=code, suggestion=suggestion)
