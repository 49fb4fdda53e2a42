"""Variable binding nodes for Liquor AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from liquor.nodes.base import Node
from liquor.nodes.expressions import Expr, FilterCall


@dataclass(frozen=True, slots=True)
class Assign(Node):
    """Scope binding: {% assign x = expr | filter %}"""

    name: str
    value: Expr
    filters: Sequence[FilterCall] = ()


@dataclass(frozen=True, slots=True)
class Capture(Node):
    """Bind rendered body text: {% capture x %}...{% endcapture %}"""

    name: str
    body: Sequence[Node]
