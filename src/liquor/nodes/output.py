"""Output and text nodes for Liquor AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from liquor.nodes.base import Node
from liquor.nodes.expressions import Expr, FilterCall


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text between template constructs."""

    value: str


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Output expression: {{ expr | filter: arg }}

    ``expr`` is None for an empty ``{{ }}``, which renders nothing.
    """

    expr: Expr | None
    filters: Sequence[FilterCall] = ()
    trim_left: bool = False
    trim_right: bool = False


@dataclass(frozen=True, slots=True)
class Raw(Node):
    """Verbatim text: {% raw %}...{% endraw %}"""

    value: str


@dataclass(frozen=True, slots=True)
class Comment(Node):
    """Comment body, never rendered: {% comment %}...{% endcomment %} or {% # ... %}"""

    text: str
