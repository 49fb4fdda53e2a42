"""Executor for host-registered tags."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from liquor.environment.exceptions import TagError, TemplateError
from liquor.tags.control_flow import BreakLoop, ContinueLoop
from liquor.template.helpers import to_str

if TYPE_CHECKING:
    from liquor.context import Context
    from liquor.environment.registry import CustomTag
    from liquor.nodes import Node, Tag
    from liquor.renderer.core import Renderer


def render_custom_tag(
    renderer: Renderer, node: Tag, tag: CustomTag, ctx: Context, buf: list[str]
) -> None:
    """Call a host tag and append its output to ``buf``.

    The tag function receives ``(args, body, context, render)``: the
    evaluated arguments, the body nodes (empty for non-block tags), the
    active Context and a ``render(nodes, context) -> str`` callback.

    A ``break`` or ``continue`` inside the body stops body rendering. The
    callback returns the output produced so far, the tag's result is
    appended, and the signal is then passed on to the enclosing loop.

    Raises:
        TagError: When the tag function fails (other exceptions are wrapped)
    """
    args = [renderer.evaluate(arg, ctx) for arg in node.args]
    pending: list[BreakLoop | ContinueLoop] = []

    def render_body(nodes: Sequence[Node], context: Context) -> str:
        if pending:
            return ""
        body_buf: list[str] = []
        try:
            renderer.render_into(nodes, context, body_buf)
        except (BreakLoop, ContinueLoop) as signal:
            pending.append(signal)
        return "".join(body_buf)

    try:
        result = tag.func(args, node.body, ctx, render_body)
    except TagError as e:
        if e.tag_name is None:
            e.tag_name = tag.name
        raise
    except (TemplateError, BreakLoop, ContinueLoop):
        raise
    except Exception as e:
        raise TagError(f"{type(e).__name__}: {e}", tag.name) from e
    buf.append(to_str(result))
    if pending:
        raise pending[0]
