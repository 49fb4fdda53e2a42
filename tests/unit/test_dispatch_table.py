"""Tests for the keyword and node dispatch tables.

The parser maps tag keywords to method names and the renderer maps node
class names to handlers; both tables must stay in step with the node set.
"""

import pytest

from liquor import Environment, nodes
from liquor.parser import Parser
from liquor.parser.statements import (
    _BLOCK_PARSERS,
    _CONTINUATION_KEYWORDS,
    _END_KEYWORDS,
    _VALID_KEYWORDS,
)
from liquor.renderer import Renderer
from liquor.tags import BUILTIN_TAGS

_STATEMENT_NODES = {
    "Text",
    "Output",
    "Tag",
    "If",
    "Unless",
    "For",
    "Case",
    "Break",
    "Continue",
    "Assign",
    "Capture",
    "Comment",
    "Raw",
    "Include",
    "Render",
}

_EXPRESSION_NODES = {
    "Const",
    "Name",
    "Getattr",
    "Getitem",
    "Range",
    "Compare",
    "Contains",
    "BoolOp",
}


class TestDispatchTableStructure:
    """Verify dispatch table structure and completeness."""

    def test_block_parsers_maps_to_method_names(self):
        """All dispatch table values should be existing parser methods."""
        for keyword, method_name in _BLOCK_PARSERS.items():
            assert method_name.startswith("_parse_"), f"{keyword} -> {method_name}"
            assert callable(getattr(Parser, method_name, None)), f"Parser lacks {method_name}"

    def test_continuation_keywords(self):
        assert _CONTINUATION_KEYWORDS == frozenset({"elsif", "else", "when"})

    def test_end_keywords(self):
        assert isinstance(_END_KEYWORDS, frozenset)
        for block in ("if", "unless", "for", "case", "capture", "comment", "raw"):
            assert f"end{block}" in _END_KEYWORDS

    def test_valid_keywords_is_union(self):
        assert _VALID_KEYWORDS == frozenset(_BLOCK_PARSERS) | _CONTINUATION_KEYWORDS | _END_KEYWORDS

    def test_no_overlap_between_keyword_sets(self):
        """Block, continuation, and end keywords should not overlap."""
        block_keys = set(_BLOCK_PARSERS)
        assert block_keys.isdisjoint(_CONTINUATION_KEYWORDS)
        assert block_keys.isdisjoint(_END_KEYWORDS)
        assert _CONTINUATION_KEYWORDS.isdisjoint(_END_KEYWORDS)


class TestNodeDispatch:
    """Every renderable node class has a handler."""

    def test_builtin_tags_name_real_nodes(self):
        for name in BUILTIN_TAGS:
            assert isinstance(getattr(nodes, name), type), name

    def test_builtin_tags_are_read_only(self):
        with pytest.raises(TypeError):
            BUILTIN_TAGS["If"] = None  # type: ignore[index]

    def test_renderer_covers_statement_nodes(self):
        renderer = Renderer(Environment())
        assert set(renderer._dispatch) == _STATEMENT_NODES

    def test_renderer_covers_expression_nodes(self):
        renderer = Renderer(Environment())
        assert set(renderer._expr_dispatch) == _EXPRESSION_NODES

    def test_environment_reuses_renderer(self):
        env = Environment()
        assert env.renderer is env.renderer


class TestDispatchBehavior:
    """Each keyword parses and renders through its table entry."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("{% if true %}a{% endif %}", "a"),
            ("{% unless false %}b{% endunless %}", "b"),
            ("{% for i in (1..2) %}{{ i }}{% endfor %}", "12"),
            ("{% case 1 %}{% when 1 %}c{% endcase %}", "c"),
            ("{% for i in (1..3) %}{% if i == 2 %}{% break %}{% endif %}{{ i }}{% endfor %}", "1"),
            ("{% for i in (1..2) %}{% continue %}x{% endfor %}", ""),
            ("{% assign v = 'd' %}{{ v }}", "d"),
            ("{% capture v %}e{% endcapture %}{{ v }}", "e"),
            ("{% comment %}hidden{% endcomment %}f", "f"),
            ("{% raw %}{{ g }}{% endraw %}", "{{ g }}"),
            ("{% # note %}h", "h"),
        ],
    )
    def test_keyword_round_trip(self, source, expected):
        assert Environment().from_string(source).render() == expected

    def test_include_and_render_dispatch(self, env_with_loader):
        source = "{% include 'card', title: 'i' %}{% render 'card', title: 'r' %}"
        assert env_with_loader.from_string(source).render() == "[i][r]"
