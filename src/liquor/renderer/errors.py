"""Positioned RenderError construction for the Liquor renderer.

Both helpers read the current RenderContext, so errors name the template
and line that were being rendered, plus the include chain that led there.
"""

from __future__ import annotations

import logging

from liquor.environment.exceptions import (
    ErrorCode,
    RenderError,
    SourceSnippet,
    TemplateError,
    build_source_snippet,
)
from liquor.render_context import RenderContext, get_render_context

logger = logging.getLogger(__name__)


def _snippet(render_ctx: RenderContext) -> SourceSnippet | None:
    if render_ctx.source and render_ctx.line:
        return build_source_snippet(render_ctx.source, render_ctx.line)
    return None


def render_error(
    message: str,
    code: ErrorCode | None = None,
    suggestion: str | None = None,
) -> RenderError:
    """Build a RenderError positioned at the node being rendered."""
    render_ctx = get_render_context()
    if render_ctx is None:
        return RenderError(message, suggestion=suggestion, code=code)
    return RenderError(
        message,
        template_name=render_ctx.template_name,
        lineno=render_ctx.line or None,
        suggestion=suggestion,
        source_snippet=_snippet(render_ctx),
        template_stack=render_ctx.template_stack,
        code=code,
    )


def enhance_error(error: BaseException, render_ctx: RenderContext | None) -> RenderError:
    """Wrap a render-time failure in a positioned RenderError.

    RenderError (UndefinedError included) is returned unchanged. Anything
    else becomes a RenderError carrying the template name, line, source
    snippet and include stack; the caller chains the original with
    ``raise ... from error``.
    """
    if isinstance(error, RenderError):
        return error

    if isinstance(error, TemplateError):
        code = error.code or ErrorCode.RUNTIME_ERROR
        message = str(error)
    else:
        code = ErrorCode.RUNTIME_ERROR
        message = f"{type(error).__name__}: {error}"

    if render_ctx is None:
        return RenderError(message, code=code)

    logger.debug(
        "Render failed in %s:%s: %s",
        render_ctx.template_name or "<template>",
        render_ctx.line,
        message,
    )
    return RenderError(
        message,
        template_name=render_ctx.template_name,
        lineno=render_ctx.line or None,
        source_snippet=_snippet(render_ctx),
        template_stack=render_ctx.template_stack,
        code=code,
    )
