"""Expression nodes for Liquor AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from liquor.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """Literal value: string, number, true/false, nil, empty or blank."""

    value: object


@dataclass(frozen=True, slots=True)
class Name(Expr):
    """Variable reference: {{ user }}"""

    name: str


@dataclass(frozen=True, slots=True)
class Getattr(Expr):
    """Dotted segment: user.name (also items.first, items.size)"""

    obj: Expr
    attr: str


@dataclass(frozen=True, slots=True)
class Getitem(Expr):
    """Bracketed segment: items[0], map["key"], map[key]"""

    obj: Expr
    key: Expr


@dataclass(frozen=True, slots=True)
class Range(Expr):
    """Inclusive integer range: (1..5), (1..n)"""

    start: Expr
    end: Expr


@dataclass(frozen=True, slots=True)
class Compare(Expr):
    """Binary comparison: a == b, a <> b, a >= b"""

    left: Expr
    op: Literal["==", "!=", "<", ">", "<=", ">="]
    right: Expr


@dataclass(frozen=True, slots=True)
class Contains(Expr):
    """Membership test: title contains "x", tags contains tag"""

    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class BoolOp(Expr):
    """Boolean operator: a and b, a or b

    Liquid gives ``and`` and ``or`` equal precedence and groups them from
    the right, so ``a or b and c`` is ``a or (b and c)`` and
    ``a and b or c`` is ``a and (b or c)``.
    """

    op: Literal["and", "or"]
    left: Expr
    right: Expr


@dataclass(frozen=True, slots=True)
class FilterCall(Node):
    """One filter application: | name: arg1, arg2, key: value"""

    name: str
    args: Sequence[Expr] = ()
    kwargs: Sequence[tuple[str, Expr]] = ()
