"""Property-based tests for Liquor built-in filters.

Uses hypothesis to verify filter composition invariants that must hold
for all inputs:

- Idempotence (upcase of upcase == upcase, strip of strip == strip)
- Escaping (escape_once never double-escapes escaped text)
- Length consistency (size filter matches Python len)
- Sort correctness (sort filter produces sorted output)
- Default absorption (non-empty value ignores default)
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from liquor import Environment
from liquor.environment.filters import BUILTIN_FILTERS

from .strategies import (
    ascii_lowercase_text,
    safe_integer,
    sortable_int_list,
    string_filter_chain,
)

_env = Environment()


def _render(template: str, **ctx: object) -> str:
    """Compile and render a one-shot template."""
    return _env.from_string(template).render(**ctx)


class TestFilterProperties:
    """Algebraic properties of built-in filters."""

    @given(s=st.text(min_size=0, max_size=100))
    @settings(max_examples=200)
    def test_upcase_idempotence(self, s: str) -> None:
        once = _render("{{ s | upcase }}", s=s)
        twice = _render("{{ s | upcase | upcase }}", s=s)
        assert once == twice

    @given(s=st.text(min_size=0, max_size=100))
    @settings(max_examples=200)
    def test_strip_idempotence(self, s: str) -> None:
        once = _render("{{ s | strip }}", s=s)
        twice = _render("{{ s | strip | strip }}", s=s)
        assert once == twice

    @given(s=st.text(min_size=0, max_size=100))
    @settings(max_examples=200)
    def test_escape_once_after_escape(self, s: str) -> None:
        """escape_once(escape(s)) == escape(s)."""
        escaped = _render("{{ s | escape }}", s=s)
        assert _render("{{ s | escape | escape_once }}", s=s) == escaped
        assert "<" not in escaped
        assert ">" not in escaped

    @given(items=st.lists(st.integers(min_value=-100, max_value=100), max_size=20))
    @settings(max_examples=200)
    def test_size_consistency(self, items: list[int]) -> None:
        """size filter matches Python len()."""
        assert _render("{{ items | size }}", items=items) == str(len(items))

    @given(s=st.text(max_size=50))
    @settings(max_examples=100)
    def test_string_size(self, s: str) -> None:
        assert _render("{{ s | size }}", s=s) == str(len(s))

    @given(items=sortable_int_list)
    @settings(max_examples=200)
    def test_sort_correctness(self, items: list[int]) -> None:
        """sort filter produces a sorted list."""
        result = _render("{{ items | sort | join: ',' }}", items=items)
        assert result == ",".join(str(v) for v in sorted(items))

    @given(items=sortable_int_list)
    @settings(max_examples=200)
    def test_reverse_involution(self, items: list[int]) -> None:
        """reverse(reverse(items)) == items."""
        result = _render("{{ items | reverse | reverse | join: ',' }}", items=items)
        assert result == ",".join(str(v) for v in items)

    @given(items=sortable_int_list)
    @settings(max_examples=100)
    def test_uniq_preserves_first_occurrence(self, items: list[int]) -> None:
        result = _render("{{ items | uniq | join: ',' }}", items=items)
        assert result == ",".join(str(v) for v in dict.fromkeys(items))

    @given(s=st.text(min_size=1, max_size=30), fallback=st.text(max_size=10))
    @settings(max_examples=200)
    def test_default_absorption(self, s: str, fallback: str) -> None:
        """A non-empty value is never replaced by its default."""
        assert _render("{{ s | default: fallback }}", s=s, fallback=fallback) == s

    @given(fallback=st.text(max_size=10))
    @settings(max_examples=100)
    def test_default_for_missing(self, fallback: str) -> None:
        assert _render("{{ missing | default: fallback }}", fallback=fallback) == fallback


class TestFilterChains:
    """Template filter chains agree with direct function application."""

    @given(s=ascii_lowercase_text, chain=string_filter_chain)
    @settings(max_examples=200)
    def test_chain_matches_sequential_calls(self, s: str, chain: str) -> None:
        expected: object = s
        for name in chain.split(" | "):
            expected = BUILTIN_FILTERS[name](expected)
        assert _render(f"{{{{ s | {chain} }}}}", s=s) == expected

    @given(s=ascii_lowercase_text)
    @settings(max_examples=100)
    def test_upcase_downcase_roundtrip(self, s: str) -> None:
        assert _render("{{ s | upcase | downcase }}", s=s) == s


class TestArithmeticProperties:
    """Integer arithmetic filters follow Python integer semantics."""

    @given(a=safe_integer, b=safe_integer)
    @settings(max_examples=200)
    def test_plus_minus_inverse(self, a: int, b: int) -> None:
        assert _render("{{ a | plus: b | minus: b }}", a=a, b=b) == str(a)

    @given(a=safe_integer, b=safe_integer.filter(lambda n: n != 0))
    @settings(max_examples=200)
    def test_divmod_identity(self, a: int, b: int) -> None:
        quotient = int(_render("{{ a | divided_by: b }}", a=a, b=b))
        remainder = int(_render("{{ a | modulo: b }}", a=a, b=b))
        assert quotient * b + remainder == a

    @given(a=safe_integer, low=safe_integer)
    @settings(max_examples=100)
    def test_at_least(self, a: int, low: int) -> None:
        assert _render("{{ a | at_least: low }}", a=a, low=low) == str(max(a, low))
