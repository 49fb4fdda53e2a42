"""Tag executors for the Liquor renderer.

Every executor has the signature ``(renderer, node, ctx, buf) -> None``
and appends its output to ``buf``. ``BUILTIN_TAGS`` maps node class
names to executors and is merged into the renderer's dispatch table.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from liquor.tags.control_flow import (
    BreakLoop,
    ContinueLoop,
    render_break,
    render_case,
    render_continue,
    render_for,
    render_if,
    render_unless,
)
from liquor.tags.custom import render_custom_tag
from liquor.tags.structure import render_comment, render_include, render_raw, render_render
from liquor.tags.variables import render_assign, render_capture

BUILTIN_TAGS: Mapping[str, Callable[..., Any]] = MappingProxyType(
    {
        "If": render_if,
        "Unless": render_unless,
        "For": render_for,
        "Case": render_case,
        "Break": render_break,
        "Continue": render_continue,
        "Assign": render_assign,
        "Capture": render_capture,
        "Comment": render_comment,
        "Raw": render_raw,
        "Include": render_include,
        "Render": render_render,
    }
)

__all__ = [
    "BUILTIN_TAGS",
    "BreakLoop",
    "ContinueLoop",
    "render_custom_tag",
]
