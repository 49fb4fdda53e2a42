"""Control flow nodes for Liquor AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from liquor.nodes.base import Node
from liquor.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {% if cond %}...{% elsif cond %}...{% else %}...{% endif %}"""

    test: Expr
    body: Sequence[Node]
    elif_: Sequence[tuple[Expr, Sequence[Node]]] = ()
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class Unless(Node):
    """Negated conditional: {% unless cond %}...{% else %}...{% endunless %}"""

    test: Expr
    body: Sequence[Node]
    elif_: Sequence[tuple[Expr, Sequence[Node]]] = ()
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class For(Node):
    """For loop: {% for x in items limit: 2 offset: 1 reversed %}...{% else %}...{% endfor %}"""

    target: str
    iter: Expr
    body: Sequence[Node]
    else_: Sequence[Node] = ()
    limit: Expr | None = None
    offset: Expr | None = None
    reversed: bool = False


@dataclass(frozen=True, slots=True)
class When(Node):
    """One branch of a case: {% when "a", "b" %}"""

    values: Sequence[Expr]
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Case(Node):
    """Case/when: {% case x %}{% when 1 %}...{% else %}...{% endcase %}"""

    subject: Expr
    whens: Sequence[When]
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class Break(Node):
    """Break out of the innermost loop: {% break %}"""


@dataclass(frozen=True, slots=True)
class Continue(Node):
    """Skip to the next iteration of the innermost loop: {% continue %}"""
