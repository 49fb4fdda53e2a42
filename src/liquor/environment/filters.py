"""Built-in filters for Liquor templates.

Filters transform values in ``{{ value | filter: arg }}`` pipelines. Each
one is called as ``fn(value, *args, **kwargs)`` and is total over every
runtime value kind: strings, numbers, booleans, nil, undefined, arrays and
objects all produce a defined result. The only failures are the ones a
caller must see (division or modulo by zero, a malformed URL escape, an
arithmetic result too large for a float), and those raise FilterError.

Categories:
    **String**: upcase, downcase, capitalize, strip, lstrip, rstrip,
        strip_html, strip_newlines, newline_to_br, escape, escape_once,
        url_encode, url_decode, truncate, truncatewords, prepend, append,
        replace, replace_first, remove, remove_first, slice, split
    **Array**: first, last, join, size, sort, sort_natural, reverse, uniq,
        map, where, compact, concat
    **Arithmetic**: plus, minus, times, divided_by, modulo, round, ceil,
        floor, abs, at_least, at_most
    **Date**: date
    **Default**: default

The table is exposed read-only as ``BUILTIN_FILTERS``; host filters go
in the environment's override table, which is checked first.

"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from types import MappingProxyType
from typing import Any
from urllib.parse import quote, unquote

from liquor.environment.exceptions import FilterError
from liquor.template.helpers import (
    UNDEFINED,
    equals,
    get_segment,
    is_empty,
    is_nil,
    is_sequence,
    is_truthy,
    to_int,
    to_number,
    to_str,
)

# =============================================================================
# String filters
# =============================================================================

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)
_UNESCAPED_AMP_RE = re.compile(r"&(?!(?:[a-zA-Z][a-zA-Z0-9]*|#\d+|#[xX][0-9a-fA-F]+);)")
_STRIP_HTML_RE = re.compile(
    r"<script.*?</script>|<style.*?</style>|<!--.*?-->|<[^>]*>",
    re.DOTALL | re.IGNORECASE,
)
_BAD_PERCENT_RE = re.compile(r"%(?![0-9a-fA-F]{2})")


def _upcase(value: Any) -> str:
    return to_str(value).upper()


def _downcase(value: Any) -> str:
    return to_str(value).lower()


def _capitalize(value: Any) -> str:
    """Uppercase the first character, lowercase the rest."""
    s = to_str(value)
    return s[:1].upper() + s[1:].lower()


def _strip(value: Any) -> str:
    return to_str(value).strip()


def _lstrip(value: Any) -> str:
    return to_str(value).lstrip()


def _rstrip(value: Any) -> str:
    return to_str(value).rstrip()


def _strip_html(value: Any) -> str:
    return _STRIP_HTML_RE.sub("", to_str(value))


def _strip_newlines(value: Any) -> str:
    return to_str(value).replace("\r\n", "").replace("\n", "")


def _newline_to_br(value: Any) -> str:
    return to_str(value).replace("\r\n", "<br>").replace("\n", "<br>")


def _escape(value: Any) -> str:
    """HTML-escape ``& < > " '``."""
    return to_str(value).translate(_ESCAPE_TABLE)


def _escape_once(value: Any) -> str:
    """HTML-escape without double-escaping existing entities.

    ``escape_once(escape(s)) == escape(s)`` for every string.
    """
    s = _UNESCAPED_AMP_RE.sub("&amp;", to_str(value))
    return s.replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;").replace("'", "&#39;")


def _url_encode(value: Any) -> str:
    return quote(to_str(value), safe="-_.!~*'()")


def _url_decode(value: Any) -> str:
    """Decode percent-escapes. ``+`` is left as is.

    Raises:
        FilterError: On a ``%`` not followed by two hex digits, or on
            escapes that do not decode as UTF-8.
    """
    s = to_str(value)
    bad = _BAD_PERCENT_RE.search(s)
    if bad:
        raise FilterError(
            f"Malformed escape sequence at position {bad.start()}: {s[bad.start() : bad.start() + 3]!r}",
            "url_decode",
        )
    try:
        return unquote(s, errors="strict")
    except UnicodeDecodeError as e:
        raise FilterError(f"Escape sequence is not valid UTF-8: {e.reason}", "url_decode") from e


def _truncate(value: Any, length: Any = 50, ellipsis: Any = "...") -> str:
    """Shorten to ``length`` characters, ellipsis included."""
    s = to_str(value)
    limit = to_int(length, 50)
    if len(s) <= limit:
        return s
    tail = to_str(ellipsis)
    return s[: max(0, limit - len(tail))] + tail


def _truncatewords(value: Any, words: Any = 15, ellipsis: Any = "...") -> str:
    """Keep the first ``words`` words, then append the ellipsis."""
    s = to_str(value)
    count = to_int(words, 15)
    parts = s.split()
    if len(parts) <= count:
        return s
    return " ".join(parts[: max(0, count)]) + to_str(ellipsis)


def _prepend(value: Any, prefix: Any = "") -> str:
    return to_str(prefix) + to_str(value)


def _append(value: Any, suffix: Any = "") -> str:
    return to_str(value) + to_str(suffix)


def _replace(value: Any, search: Any = "", replacement: Any = "") -> str:
    return to_str(value).replace(to_str(search), to_str(replacement))


def _replace_first(value: Any, search: Any = "", replacement: Any = "") -> str:
    return to_str(value).replace(to_str(search), to_str(replacement), 1)


def _remove(value: Any, search: Any = "") -> str:
    return to_str(value).replace(to_str(search), "")


def _remove_first(value: Any, search: Any = "") -> str:
    return to_str(value).replace(to_str(search), "", 1)


def _slice(value: Any, offset: Any = 0, length: Any = None) -> Any:
    """Substring (or sub-array) starting at ``offset``; negative counts from the end."""
    start = to_int(offset)
    items: Any = list(value) if is_sequence(value) else to_str(value)
    if length is None or is_nil(length):
        return items[start:]
    end = start + max(0, to_int(length))
    if start < 0 <= end:
        return items[start:]
    return items[start:end]


def _split(value: Any, separator: Any = " ") -> list[str]:
    """Split a string; a single space splits on runs of whitespace."""
    if is_nil(value):
        return []
    s = to_str(value)
    sep = to_str(separator)
    if sep == " ":
        return s.split()
    if sep == "":
        return list(s)
    return s.split(sep)


# =============================================================================
# Array filters
# =============================================================================


def _as_items(value: Any) -> list[Any]:
    """Treat a value as a list: arrays as is, nil as [], anything else as [value]."""
    if is_nil(value):
        return []
    if is_sequence(value):
        return list(value)
    return [value]


def _property(item: Any, prop: Any) -> Any:
    return get_segment(item, to_str(prop))


def _first(value: Any) -> Any:
    if is_sequence(value) and len(value):
        return value[0]
    return None


def _last(value: Any) -> Any:
    if is_sequence(value) and len(value):
        return value[-1]
    return None


def _join(value: Any, separator: Any = ",") -> str:
    if not is_sequence(value):
        return to_str(value)
    return to_str(separator).join(to_str(item) for item in value)


def _size(value: Any) -> int:
    if isinstance(value, (str, Mapping)) or is_sequence(value):
        return len(value)
    return 0


def _sort_key(value: Any) -> tuple[int, Any]:
    # numbers, then strings, then nil
    if is_nil(value):
        return (2, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, to_str(value))


def _sort(value: Any, prop: Any = None) -> list[Any]:
    """Sort numbers numerically and strings by code point; nil sorts last."""
    items = _as_items(value)
    if prop is None or is_nil(prop):
        return sorted(items, key=_sort_key)
    return sorted(items, key=lambda item: _sort_key(_property(item, prop)))


def _natural_key(value: Any) -> tuple[int, str]:
    return (1, "") if is_nil(value) else (0, to_str(value).casefold())


def _sort_natural(value: Any, prop: Any = None) -> list[Any]:
    """Case-insensitive sort; nil sorts last."""
    items = _as_items(value)
    if prop is None or is_nil(prop):
        return sorted(items, key=_natural_key)
    return sorted(items, key=lambda item: _natural_key(_property(item, prop)))


def _reverse(value: Any) -> list[Any]:
    return _as_items(value)[::-1]


def _uniq_key(value: Any) -> Any:
    try:
        hash(value)
    except TypeError:
        return ("json", json.dumps(value, sort_keys=True, default=str))
    if isinstance(value, bool):
        return ("bool", value)
    return ("value", value)


def _uniq(value: Any, prop: Any = None) -> list[Any]:
    """Remove duplicates, keeping first occurrences in order."""
    seen: set[Any] = set()
    result: list[Any] = []
    for item in _as_items(value):
        key = _uniq_key(item if prop is None else _property(item, prop))
        if key not in seen:
            seen.add(key)
            result.append(item)
    return result


def _map(value: Any, prop: Any = "") -> list[Any]:
    """Pluck one property from every item; missing properties give nil."""
    result = []
    for item in _as_items(value):
        picked = _property(item, prop)
        result.append(None if picked is UNDEFINED else picked)
    return result


def _where(value: Any, prop: Any = "", target: Any = UNDEFINED) -> list[Any]:
    """Keep items whose property equals ``target`` (or is truthy when omitted)."""
    items = _as_items(value)
    if target is UNDEFINED:
        return [item for item in items if is_truthy(_property(item, prop))]
    return [item for item in items if equals(_property(item, prop), target)]


def _compact(value: Any, prop: Any = None) -> list[Any]:
    """Drop nil items (or items whose ``prop`` is nil)."""
    items = _as_items(value)
    if prop is None:
        return [item for item in items if not is_nil(item)]
    return [item for item in items if not is_nil(_property(item, prop))]


def _concat(value: Any, other: Any = None) -> list[Any]:
    return _as_items(value) + _as_items(other)


# =============================================================================
# Arithmetic filters
# =============================================================================


def _num(value: Any) -> int | float:
    number = to_number(value)
    return 0 if number is None else number


def _finite(result: int | float, name: str) -> int | float:
    if isinstance(result, float) and not math.isfinite(result):
        raise FilterError("Result is too large to represent", name)
    return result


def _plus(value: Any, operand: Any = 0) -> int | float:
    return _finite(_num(value) + _num(operand), "plus")


def _minus(value: Any, operand: Any = 0) -> int | float:
    return _finite(_num(value) - _num(operand), "minus")


def _times(value: Any, operand: Any = 1) -> int | float:
    return _finite(_num(value) * _num(operand), "times")


def _divided_by(value: Any, operand: Any = None) -> int | float:
    """Divide; integer operands use floor division.

    Raises:
        FilterError: If the divisor is zero (or not a number)
    """
    dividend, divisor = _num(value), _num(operand)
    if divisor == 0:
        raise FilterError("Division by zero", "divided_by")
    if isinstance(dividend, int) and isinstance(divisor, int):
        return dividend // divisor
    return _finite(dividend / divisor, "divided_by")


def _modulo(value: Any, operand: Any = None) -> int | float:
    """Remainder, with the sign of the divisor.

    Raises:
        FilterError: If the divisor is zero (or not a number)
    """
    dividend, divisor = _num(value), _num(operand)
    if divisor == 0:
        raise FilterError("Modulo by zero", "modulo")
    return dividend % divisor


_MAX_ROUND_PLACES = 400


def _round(value: Any, precision: Any = 0) -> int | float:
    """Round half away from zero; precision <= 0 returns an int."""
    number = Decimal(str(_num(value)))
    magnitude = max(number.adjusted(), 0)
    places = to_int(precision)
    # beyond these bounds the result no longer changes
    exponent = max(min(places, _MAX_ROUND_PLACES), -(magnitude + 2))
    with localcontext() as decimal_ctx:
        decimal_ctx.prec = max(decimal_ctx.prec, magnitude + max(exponent, 0) + 2)
        rounded = number.quantize(Decimal(1).scaleb(-exponent), rounding=ROUND_HALF_UP)
    if places <= 0:
        return int(rounded)
    return _finite(float(rounded), "round")


def _ceil(value: Any) -> int:
    return math.ceil(_num(value))


def _floor(value: Any) -> int:
    return math.floor(_num(value))


def _abs(value: Any) -> int | float:
    return abs(_num(value))


def _at_least(value: Any, minimum: Any = 0) -> int | float:
    return max(_num(value), _num(minimum))


def _at_most(value: Any, maximum: Any = 0) -> int | float:
    return min(_num(value), _num(maximum))


# =============================================================================
# Date filter
# =============================================================================

_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%B %d, %Y", "%b %d, %Y", "%d %B %Y")


def _parse_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    if isinstance(value, bool) or is_nil(value):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None

    text = to_str(value).strip()
    if text.lower() in ("now", "today"):
        return datetime.now()
    number = to_number(text)
    if number is not None:
        return _parse_date(number)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _date(value: Any, fmt: Any = "%Y-%m-%d") -> str:
    """Format a date with strftime directives.

    Accepts date/datetime values, ISO strings, Unix timestamps (as UTC) and
    ``"now"``/``"today"``. Unparseable input renders as ``""``.
    """
    if is_nil(fmt) or fmt == "":
        return to_str(value)
    parsed = _parse_date(value)
    if parsed is None:
        return ""
    return parsed.strftime(to_str(fmt))


# =============================================================================
# Default filter
# =============================================================================


def _default(value: Any, fallback: Any = "", allow_false: Any = False) -> Any:
    """Substitute ``fallback`` for nil, undefined, ``""``, ``[]`` and ``{}``.

    ``false`` is replaced too, unless ``allow_false: true`` is given.
    """
    if is_empty(value):
        return fallback
    if value is False and not is_truthy(allow_false):
        return fallback
    return value


# =============================================================================
# Registry
# =============================================================================

BUILTIN_FILTERS: Mapping[str, Callable[..., Any]] = MappingProxyType(
    {
        # String
        "upcase": _upcase,
        "downcase": _downcase,
        "capitalize": _capitalize,
        "strip": _strip,
        "lstrip": _lstrip,
        "rstrip": _rstrip,
        "strip_html": _strip_html,
        "strip_newlines": _strip_newlines,
        "newline_to_br": _newline_to_br,
        "escape": _escape,
        "escape_once": _escape_once,
        "url_encode": _url_encode,
        "url_decode": _url_decode,
        "truncate": _truncate,
        "truncatewords": _truncatewords,
        "prepend": _prepend,
        "append": _append,
        "replace": _replace,
        "replace_first": _replace_first,
        "remove": _remove,
        "remove_first": _remove_first,
        "slice": _slice,
        "split": _split,
        # Array
        "first": _first,
        "last": _last,
        "join": _join,
        "size": _size,
        "sort": _sort,
        "sort_natural": _sort_natural,
        "reverse": _reverse,
        "uniq": _uniq,
        "map": _map,
        "where": _where,
        "compact": _compact,
        "concat": _concat,
        # Arithmetic
        "plus": _plus,
        "minus": _minus,
        "times": _times,
        "divided_by": _divided_by,
        "modulo": _modulo,
        "round": _round,
        "ceil": _ceil,
        "floor": _floor,
        "abs": _abs,
        "at_least": _at_least,
        "at_most": _at_most,
        # Date
        "date": _date,
        # Default
        "default": _default,
    }
)
