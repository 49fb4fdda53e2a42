"""Base node class for Liquor AST."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    All nodes track their source location for error reporting.
    Nodes are immutable, so one parsed template can be rendered
    concurrently from many threads.

    """

    lineno: int
    col_offset: int
