"""Liquor AST node definitions.

Immutable, frozen dataclass nodes produced by the parser and consumed by
the renderer. Every node carries ``lineno`` and ``col_offset``.

Node Categories:
    **Template Structure**: Template, Include, Render, Tag
    **Control Flow**: If, Unless, For, Case, When, Break, Continue
    **Output**: Text, Output, Raw, Comment
    **Variables**: Assign, Capture
    **Expressions**: Const, Name, Getattr, Getitem, Range, Compare,
        Contains, BoolOp, FilterCall

"""

from liquor.nodes.base import Node
from liquor.nodes.control_flow import Break, Case, Continue, For, If, Unless, When
from liquor.nodes.expressions import (
    BoolOp,
    Compare,
    Const,
    Contains,
    Expr,
    FilterCall,
    Getattr,
    Getitem,
    Name,
    Range,
)
from liquor.nodes.output import Comment, Output, Raw, Text
from liquor.nodes.structure import Include, Render, Tag, Template
from liquor.nodes.variables import Assign, Capture

__all__ = [
    "Assign",
    "BoolOp",
    "Break",
    "Capture",
    "Case",
    "Comment",
    "Compare",
    "Const",
    "Contains",
    "Continue",
    "Expr",
    "FilterCall",
    "For",
    "Getattr",
    "Getitem",
    "If",
    "Include",
    "Name",
    "Node",
    "Output",
    "Range",
    "Raw",
    "Render",
    "Tag",
    "Template",
    "Text",
    "Unless",
    "When",
]
