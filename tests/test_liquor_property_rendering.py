"""Property-based tests for Liquor rendering.

- Text without delimiters renders to itself
- Output of any JSON-like value matches the stringification helper
- assign never leaks into the caller's mapping or the next render
- Integer comparisons agree with Python
- for loops visit every item once, in order
"""

from __future__ import annotations

from typing import Any

from hypothesis import given, settings
from hypothesis import strategies as st

from liquor import Environment
from liquor.template.helpers import to_str

from .strategies import (
    json_value,
    plain_text,
    safe_identifier,
    safe_integer,
)

_env = Environment()


class TestRenderProperties:
    """Invariants of a single render call."""

    @given(source=plain_text)
    @settings(max_examples=200)
    def test_plain_text_renders_verbatim(self, source: str) -> None:
        assert _env.from_string(source).render() == source

    @given(value=json_value)
    @settings(max_examples=200)
    def test_output_matches_to_str(self, value: Any) -> None:
        assert _env.from_string("{{ v }}").render(v=value) == to_str(value)

    @given(a=safe_integer, b=safe_integer)
    @settings(max_examples=200)
    def test_integer_comparisons(self, a: int, b: int) -> None:
        source = "{% if a < b %}lt{% elsif a == b %}eq{% else %}gt{% endif %}"
        expected = "lt" if a < b else "eq" if a == b else "gt"
        assert _env.from_string(source).render(a=a, b=b) == expected

    @given(items=st.lists(safe_integer, max_size=20))
    @settings(max_examples=200)
    def test_for_visits_each_item(self, items: list[int]) -> None:
        source = "{% for x in items %}{{ forloop.index0 }}={{ x }};{% endfor %}"
        expected = "".join(f"{i}={x};" for i, x in enumerate(items))
        assert _env.from_string(source).render(items=items) == expected


class TestIsolationProperties:
    """Render calls share nothing."""

    @given(name=safe_identifier, value=safe_integer)
    @settings(max_examples=100)
    def test_assign_does_not_leak(self, name: str, value: int) -> None:
        writer = _env.from_string(f"{{% assign {name} = {value} %}}{{{{ {name} }}}}")
        reader = _env.from_string(f"{{{{ {name} }}}}")
        data: dict[str, Any] = {}

        assert writer.render(data) == str(value)
        assert data == {}
        assert reader.render() == ""
        assert writer.render() == str(value)

    @given(original=safe_integer, value=safe_integer)
    @settings(max_examples=100)
    def test_assign_shadows_without_mutating(self, original: int, value: int) -> None:
        template = _env.from_string(f"{{% assign n = {value} %}}{{{{ n }}}}")
        data = {"n": original}
        assert template.render(data) == str(value)
        assert data == {"n": original}
