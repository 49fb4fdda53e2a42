"""Scope binding executors: assign and capture."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from liquor.context import Context
    from liquor.nodes import Assign, Capture
    from liquor.renderer.core import Renderer


def render_assign(renderer: Renderer, node: Assign, ctx: Context, buf: list[str]) -> None:
    ctx.assign(node.name, renderer.evaluate_filtered(node.value, node.filters, ctx))


def render_capture(renderer: Renderer, node: Capture, ctx: Context, buf: list[str]) -> None:
    """Render the body into its own buffer and bind the resulting string."""
    ctx.assign(node.name, renderer.render(node.body, ctx))
