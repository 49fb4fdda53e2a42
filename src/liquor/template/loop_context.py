"""Loop iteration metadata for Liquor ``{% for %}`` blocks."""

from __future__ import annotations

from typing import Any


class LoopContext:
    """Loop iteration metadata accessible as `forloop` inside `{% for %}` blocks.

    All properties are computed on access from the current position.

    Properties:
        index: 1-based iteration count (1, 2, 3, ...)
        index0: 0-based iteration count (0, 1, 2, ...)
        rindex: Reverse 1-based index (counts down to 1)
        rindex0: Reverse 0-based index (counts down to 0)
        first: True on the first iteration
        last: True on the final iteration
        length: Number of items after offset/limit/reversed
        parentloop: The enclosing loop's forloop, or nil

    Example:
            ```liquid
            {% for item in items %}
                {{ forloop.index }}/{{ forloop.length }}: {{ item }}
                {% if forloop.last %}(last){% endif %}
            {% endfor %}
            ```

    """

    __slots__ = ("_index", "_length", "parentloop")

    def __init__(self, length: int, parentloop: LoopContext | None = None) -> None:
        self._length = length
        self._index = 0
        self.parentloop = parentloop

    def advance(self, index: int) -> None:
        """Move to the 0-based position ``index``."""
        self._index = index

    @property
    def index(self) -> int:
        """1-based iteration count."""
        return self._index + 1

    @property
    def index0(self) -> int:
        """0-based iteration count."""
        return self._index

    @property
    def rindex(self) -> int:
        return self._length - self._index

    @property
    def rindex0(self) -> int:
        return self._length - self._index - 1

    @property
    def first(self) -> bool:
        return self._index == 0

    @property
    def last(self) -> bool:
        return self._index == self._length - 1

    @property
    def length(self) -> int:
        return self._length

    def to_dict(self) -> dict[str, Any]:
        """Snapshot of the current position, used when the loop is output."""
        return {
            "index": self.index,
            "index0": self.index0,
            "rindex": self.rindex,
            "rindex0": self.rindex0,
            "first": self.first,
            "last": self.last,
            "length": self.length,
        }

    def __str__(self) -> str:
        from liquor.template.helpers import to_str

        return to_str(self.to_dict())

    def __repr__(self) -> str:
        return f"LoopContext(index={self.index}/{self._length})"
