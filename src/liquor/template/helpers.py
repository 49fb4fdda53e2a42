"""Pure value helpers shared by the renderer, tags and filters.

These functions define how template values behave: truthiness, output
stringification, numeric coercion, equality, ordering, membership, and
path-segment lookup. None of them touch Environment or Context state.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any


class _Undefined:
    """Marker for a name or path segment that resolved to nothing.

    Renders as ``""`` and is falsy, like ``nil``.
    """

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()


class _EmptyLiteral:
    """The ``empty`` and ``blank`` literals, usable only in comparisons.

    ``x == empty`` holds for ``""``, ``[]`` and ``{}``; ``x == blank`` also
    holds for nil, false and whitespace-only strings.
    """

    __slots__ = ("_name",)

    def __init__(self, name: str):
        self._name = name

    def matches(self, value: Any) -> bool:
        if self._name == "blank":
            if value is None or value is UNDEFINED or value is False:
                return True
            if isinstance(value, str):
                return not value.strip()
        if isinstance(value, (str, Mapping)) or is_sequence(value):
            return len(value) == 0
        return False

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return self._name.upper()


EMPTY: Any = _EmptyLiteral("empty")
BLANK: Any = _EmptyLiteral("blank")


# =============================================================================
# Type predicates
# =============================================================================


def is_sequence(value: Any) -> bool:
    """True for list-like values (not strings, bytes or mappings)."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def is_nil(value: Any) -> bool:
    """True for None and UNDEFINED."""
    return value is None or value is UNDEFINED


def is_truthy(value: Any) -> bool:
    """Liquid truthiness.

    Falsy: ``false``, ``nil``, undefined and ``""``. Everything else,
    ``0`` and ``[]`` included, is truthy.
    """
    if value is None or value is False or value is UNDEFINED:
        return False
    if isinstance(value, str):
        return bool(value)
    if isinstance(value, _EmptyLiteral):
        return False
    return True


def is_empty(value: Any) -> bool:
    """True for nil, undefined, ``""`` and empty arrays/objects."""
    if is_nil(value):
        return True
    if isinstance(value, (str, Mapping)) or is_sequence(value):
        return len(value) == 0
    return False


# =============================================================================
# Coercions
# =============================================================================


def to_str(value: Any) -> str:
    """Stringify a value for output.

    nil and undefined render as ``""``; booleans as ``true``/``false``;
    arrays as the concatenation of their stringified items; objects as
    compact JSON; dates in ISO form.
    """
    if isinstance(value, str):
        return value
    if value is None or value is UNDEFINED or isinstance(value, _EmptyLiteral):
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    if is_sequence(value) or isinstance(value, (set, frozenset)):
        return "".join(to_str(item) for item in value)
    return str(value)


def to_number(value: Any) -> int | float | None:
    """Coerce to a finite number, or None when the value is not numeric."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def to_int(value: Any, default: int = 0) -> int:
    """Coerce to an int (truncating floats), falling back to ``default``."""
    number = to_number(value)
    if number is None:
        return default
    return int(number)


def to_list(value: Any) -> list[Any]:
    """Materialise a value as a list for iteration.

    nil/undefined give ``[]``; objects give ``[key, value]`` pairs; a string
    is a single item; other scalars give ``[]``.
    """
    if is_nil(value) or isinstance(value, _EmptyLiteral):
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        return [[k, v] for k, v in value.items()]
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, Iterable):
        return list(value)
    return []


# =============================================================================
# Operators
# =============================================================================


def _normalize(value: Any) -> Any:
    return None if value is UNDEFINED else value


def equals(left: Any, right: Any) -> bool:
    """Liquid ``==``.

    Booleans only equal booleans, so ``1 == true`` is false. nil and
    undefined are equal. ``empty``/``blank`` match by emptiness.
    """
    if isinstance(right, _EmptyLiteral):
        return right.matches(left)
    if isinstance(left, _EmptyLiteral):
        return left.matches(right)
    left, right = _normalize(left), _normalize(right)
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return bool(left == right)


def compare(left: Any, op: str, right: Any) -> bool:
    """Ordering comparison (``<``, ``>``, ``<=``, ``>=``).

    Numeric when both sides coerce to numbers, otherwise by string value.
    Any nil side compares false.
    """
    left, right = _normalize(left), _normalize(right)
    if left is None or right is None:
        return False
    a = to_number(left)
    b = to_number(right)
    if a is None or b is None:
        a, b = to_str(left), to_str(right)
    if op == "<":
        return a < b
    if op == ">":
        return a > b
    if op == "<=":
        return a <= b
    if op == ">=":
        return a >= b
    raise ValueError(f"Unknown comparison operator: {op!r}")


def contains(container: Any, item: Any) -> bool:
    """Liquid ``contains``: substring, array membership or object key."""
    if is_nil(container):
        return False
    if isinstance(container, str):
        return to_str(item) in container
    if isinstance(container, Mapping):
        try:
            return item in container
        except TypeError:
            return False
    if is_sequence(container) or isinstance(container, (set, frozenset)):
        return any(equals(element, item) for element in container)
    return False


# =============================================================================
# Path segments
# =============================================================================


def get_segment(obj: Any, key: Any) -> Any:
    """Resolve one path segment (``obj.key`` or ``obj[key]``).

    Supports mapping keys, sequence indexes (negative allowed), the
    ``size``/``first``/``last`` helpers, and public attributes of host
    objects. Anything missing resolves to UNDEFINED.
    """
    if is_nil(obj):
        return UNDEFINED

    if isinstance(obj, Mapping):
        try:
            if key in obj:
                return obj[key]
        except TypeError:
            return UNDEFINED
        if key == "size":
            return len(obj)
        return UNDEFINED

    if is_sequence(obj):
        if isinstance(key, int) and not isinstance(key, bool):
            try:
                return obj[key]
            except IndexError:
                return UNDEFINED
        if key == "size":
            return len(obj)
        if key == "first":
            return obj[0] if len(obj) else UNDEFINED
        if key == "last":
            return obj[-1] if len(obj) else UNDEFINED
        return UNDEFINED

    if isinstance(obj, str):
        if key == "size":
            return len(obj)
        return UNDEFINED

    if isinstance(key, str) and not key.startswith("_"):
        value = getattr(obj, key, UNDEFINED)
        # methods are not data
        return UNDEFINED if callable(value) else value
    return UNDEFINED
