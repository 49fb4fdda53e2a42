"""Control flow executors: if, unless, for, case, break, continue.

Loop control is signalled with private exceptions raised by ``break`` and
``continue`` and caught by the innermost ``for`` executor. Fragments
already appended to the shared buffer stay there, so output produced
before a ``break`` is kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from liquor.template.helpers import equals, is_truthy, to_int, to_list
from liquor.template.loop_context import LoopContext

if TYPE_CHECKING:
    from liquor.context import Context
    from liquor.nodes import Break, Case, Continue, For, If, Unless
    from liquor.renderer.core import Renderer


class BreakLoop(Exception):
    """Raised by ``{% break %}``; caught by the enclosing for loop."""


class ContinueLoop(Exception):
    """Raised by ``{% continue %}``; caught by the enclosing for loop."""


def render_if(renderer: Renderer, node: If, ctx: Context, buf: list[str]) -> None:
    if is_truthy(renderer.evaluate(node.test, ctx)):
        renderer.render_into(node.body, ctx, buf)
        return
    _render_branches(renderer, node, ctx, buf)


def render_unless(renderer: Renderer, node: Unless, ctx: Context, buf: list[str]) -> None:
    if not is_truthy(renderer.evaluate(node.test, ctx)):
        renderer.render_into(node.body, ctx, buf)
        return
    _render_branches(renderer, node, ctx, buf)


def _render_branches(renderer: Renderer, node: If | Unless, ctx: Context, buf: list[str]) -> None:
    # elsif tests are positive under both if and unless
    for test, body in node.elif_:
        if is_truthy(renderer.evaluate(test, ctx)):
            renderer.render_into(body, ctx, buf)
            return
    renderer.render_into(node.else_, ctx, buf)


def render_for(renderer: Renderer, node: For, ctx: Context, buf: list[str]) -> None:
    """Render a for loop.

    The collection is sliced by ``offset`` first, then ``limit``, then
    reversed. Each iteration rebinds the loop variable and ``forloop`` in
    a child frame that is popped when the loop ends.
    """
    items = to_list(renderer.evaluate(node.iter, ctx))

    if node.offset is not None:
        offset = max(0, to_int(renderer.evaluate(node.offset, ctx)))
        items = items[offset:]
    if node.limit is not None:
        limit = max(0, to_int(renderer.evaluate(node.limit, ctx)))
        items = items[:limit]
    if node.reversed:
        items = items[::-1]

    if not items:
        renderer.render_into(node.else_, ctx, buf)
        return

    parent = ctx.lookup("forloop")
    loop = LoopContext(len(items), parent if isinstance(parent, LoopContext) else None)

    with ctx.push() as frame:
        frame["forloop"] = loop
        for index, item in enumerate(items):
            loop.advance(index)
            frame[node.target] = item
            try:
                renderer.render_into(node.body, ctx, buf)
            except ContinueLoop:
                continue
            except BreakLoop:
                break


def render_case(renderer: Renderer, node: Case, ctx: Context, buf: list[str]) -> None:
    subject = renderer.evaluate(node.subject, ctx)
    for when in node.whens:
        if any(equals(subject, renderer.evaluate(value, ctx)) for value in when.values):
            renderer.render_into(when.body, ctx, buf)
            return
    renderer.render_into(node.else_, ctx, buf)


def render_break(renderer: Renderer, node: Break, ctx: Context, buf: list[str]) -> None:
    raise BreakLoop


def render_continue(renderer: Renderer, node: Continue, ctx: Context, buf: list[str]) -> None:
    raise ContinueLoop
