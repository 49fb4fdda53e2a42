"""Template structure nodes for Liquor AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from liquor.nodes.base import Node
from liquor.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node: a parsed template body."""

    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Include(Node):
    """Include sharing the caller's scope.

    {% include "card" %}
    {% include "card" with product as item %}
    {% include "card" for products as item %}
    {% include "card", title: "Hi", count: 3 %}
    """

    template: Expr
    with_: Expr | None = None
    alias: str | None = None
    for_: Expr | None = None
    bindings: Sequence[tuple[str, Expr]] = ()


@dataclass(frozen=True, slots=True)
class Render(Node):
    """Render in an isolated scope: {% render "card", title: "Hi" %}

    Only globals, ``with`` and keyword bindings are visible inside.
    """

    template: Expr
    with_: Expr | None = None
    alias: str | None = None
    bindings: Sequence[tuple[str, Expr]] = ()


@dataclass(frozen=True, slots=True)
class Tag(Node):
    """Host-registered tag: {% name arg1, arg2 %}...{% endname %}

    ``args`` are evaluated at render time and handed to the registered
    function together with ``body`` (empty for non-block tags).
    """

    name: str
    args: Sequence[Expr] = ()
    body: Sequence[Node] = ()
    markup: str = ""
