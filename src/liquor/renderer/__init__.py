"""Liquor renderer: tree-walking interpretation of the AST."""

from liquor.renderer.core import Renderer
from liquor.renderer.errors import enhance_error, render_error

__all__ = ["Renderer", "enhance_error", "render_error"]
