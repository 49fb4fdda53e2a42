"""Template structure executors: include, render, comment, raw.

``include`` renders a sub-template against the caller's scope, so the
sub-template sees (and may assign into) the caller's variables.
``render`` gives the sub-template an isolated Context holding only the
environment globals and the explicit bindings.

Each sub-template runs under its own child RenderContext. A failure
inside it is wrapped at this boundary, while the child context is still
current, so the resulting RenderError names the sub-template and line
where it happened along with the include chain.
"""

from __future__ import annotations

import logging
import posixpath
from typing import TYPE_CHECKING, Any

from liquor.environment.exceptions import RenderError, TemplateNotFoundError
from liquor.render_context import (
    RenderContext,
    get_render_context,
    reset_render_context,
    set_render_context,
)
from liquor.renderer.errors import enhance_error
from liquor.template.helpers import to_list, to_str
from liquor.template.loop_context import LoopContext

if TYPE_CHECKING:
    from liquor.context import Context
    from liquor.nodes import Comment, Include, Raw, Render
    from liquor.renderer.core import Renderer
    from liquor.template.core import Template

logger = logging.getLogger(__name__)


def render_include(renderer: Renderer, node: Include, ctx: Context, buf: list[str]) -> None:
    """Render a sub-template in the caller's scope.

    ``with value [as alias]`` binds one value; ``for items [as alias]``
    renders the sub-template once per item. Keyword bindings are visible
    for the duration of the include only.
    """
    template = _load(renderer, node, ctx, "include")
    alias = node.alias or _default_alias(template.name)
    bindings = _evaluate_bindings(renderer, node, ctx)

    if node.for_ is not None:
        items = to_list(renderer.evaluate(node.for_, ctx))
        loop = LoopContext(len(items))
        with ctx.push(bindings) as frame:
            frame["forloop"] = loop
            for index, item in enumerate(items):
                loop.advance(index)
                frame[alias] = item
                _render_child(renderer, template, ctx, buf)
        return

    if node.with_ is not None:
        bindings[alias] = renderer.evaluate(node.with_, ctx)
    with ctx.push(bindings):
        _render_child(renderer, template, ctx, buf)


def render_render(renderer: Renderer, node: Render, ctx: Context, buf: list[str]) -> None:
    """Render a sub-template in an isolated scope.

    Nothing from the caller's scope is visible inside, and nothing the
    sub-template assigns leaks back out.
    """
    template = _load(renderer, node, ctx, "render")
    bindings = _evaluate_bindings(renderer, node, ctx)
    if node.with_ is not None:
        bindings[node.alias or _default_alias(template.name)] = renderer.evaluate(node.with_, ctx)
    _render_child(renderer, template, ctx.isolated(bindings), buf)


def render_comment(renderer: Renderer, node: Comment, ctx: Context, buf: list[str]) -> None:
    pass


def render_raw(renderer: Renderer, node: Raw, ctx: Context, buf: list[str]) -> None:
    buf.append(node.value)


# =============================================================================
# Helpers
# =============================================================================


def _load(renderer: Renderer, node: Include | Render, ctx: Context, keyword: str) -> Template:
    name = to_str(renderer.evaluate(node.template, ctx))
    render_ctx = get_render_context()
    if render_ctx is not None:
        render_ctx.check_include_depth(name)
    try:
        return renderer.env.get_template(name)
    except TemplateNotFoundError as e:
        if e.tag_name is None:
            e.tag_name = keyword
        raise


def _evaluate_bindings(renderer: Renderer, node: Include | Render, ctx: Context) -> dict[str, Any]:
    return {key: renderer.evaluate(value, ctx) for key, value in node.bindings}


def _default_alias(name: str | None) -> str:
    """``"cards/product.liquid"`` → ``"product"``."""
    if not name:
        return "include"
    return posixpath.basename(name).split(".", 1)[0]


def _render_child(renderer: Renderer, template: Template, ctx: Context, buf: list[str]) -> None:
    parent = get_render_context()
    if parent is not None:
        child = parent.child_context(template.name, template.source)
    else:
        child = RenderContext(template_name=template.name, source=template.source)

    logger.debug("Rendering %s at depth %d", template.name, child.include_depth)
    token = set_render_context(child)
    try:
        renderer.render_into(template.ast.body, ctx, buf)
    except RenderError:
        raise
    except Exception as e:
        raise enhance_error(e, child) from e
    finally:
        reset_render_context(token)
