"""Tests for the Liquor lexer.

Covers region splitting, expression tokens, whitespace-trim markers,
raw/comment bodies, positions, and lexer errors.
"""

from __future__ import annotations

import pytest

from liquor._types import TokenType
from liquor.environment.exceptions import ErrorCode
from liquor.lexer import Lexer, tokenize
from liquor.parser.errors import ParseError


def _types(source: str) -> list[TokenType]:
    return [t.type for t in tokenize(source)]


def _values(source: str) -> list[str]:
    return [t.value for t in tokenize(source) if t.type is not TokenType.EOF]


class TestRegions:
    """Text, output and tag regions."""

    def test_text_only(self):
        """Text without delimiters is a single DATA token."""
        assert _types("hello world") == [TokenType.DATA, TokenType.EOF]

    def test_empty_source(self):
        """Empty source produces only EOF."""
        assert _types("") == [TokenType.EOF]

    def test_output_region(self):
        """{{ name }} produces begin, name and end tokens."""
        assert _types("Hi {{ name }}") == [
            TokenType.DATA,
            TokenType.VARIABLE_BEGIN,
            TokenType.NAME,
            TokenType.VARIABLE_END,
            TokenType.EOF,
        ]

    def test_tag_region(self):
        """{% assign x = 1 %} tokenizes name, operator and literal."""
        assert _types("{% assign x = 1 %}") == [
            TokenType.BLOCK_BEGIN,
            TokenType.NAME,
            TokenType.NAME,
            TokenType.ASSIGN,
            TokenType.INTEGER,
            TokenType.BLOCK_END,
            TokenType.EOF,
        ]

    def test_lone_braces_are_text(self):
        """A single brace is ordinary text."""
        assert _values("a { b } c") == ["a { b } c"]


class TestExpressionTokens:
    """Literals, operators and names inside delimiters."""

    def test_string_literals(self):
        """Both quote styles produce STRING tokens without the quotes."""
        tokens = tokenize("{{ 'single' | append: \"double\" }}")
        strings = [t.value for t in tokens if t.type is TokenType.STRING]
        assert strings == ["single", "double"]

    def test_numbers(self):
        """Integers, floats and negative numbers."""
        tokens = tokenize("{{ 1 | plus: 2.5 | minus: -3 }}")
        numbers = [(t.type, t.value) for t in tokens if t.type in (TokenType.INTEGER, TokenType.FLOAT)]
        assert numbers == [
            (TokenType.INTEGER, "1"),
            (TokenType.FLOAT, "2.5"),
            (TokenType.INTEGER, "-3"),
        ]

    def test_range(self):
        """(1..5) lexes as LPAREN INTEGER RANGE INTEGER RPAREN."""
        assert _types("{{ (1..5) }}")[1:6] == [
            TokenType.LPAREN,
            TokenType.INTEGER,
            TokenType.RANGE,
            TokenType.INTEGER,
            TokenType.RPAREN,
        ]

    def test_dotted_index(self):
        """items.0 lexes the index as an INTEGER, not a float."""
        assert _types("{{ items.0 }}")[1:4] == [TokenType.NAME, TokenType.DOT, TokenType.INTEGER]

    def test_comparison_operators(self):
        """All comparison operators are recognised."""
        tokens = tokenize("{% if a == b and c != d or e <> f and g <= h or i >= j and k < l or m > n %}")
        ops = [t.type for t in tokens if t.type.name in ("EQ", "NE", "LT", "GT", "LTEQ", "GTEQ")]
        assert ops == [
            TokenType.EQ,
            TokenType.NE,
            TokenType.NE,
            TokenType.LTEQ,
            TokenType.GTEQ,
            TokenType.LT,
            TokenType.GT,
        ]

    def test_names_with_hyphen_and_question_mark(self):
        """Names may contain hyphens and end with '?'."""
        names = [t.value for t in tokenize("{{ product-title }}{{ empty? }}") if t.type is TokenType.NAME]
        assert names == ["product-title", "empty?"]

    def test_camel_case_name(self):
        names = [t.value for t in tokenize("{{ user.firstName }}") if t.type is TokenType.NAME]
        assert names == ["user", "firstName"]


class TestWhitespaceTrim:
    """Trim markers strip whitespace from adjoining text."""

    def test_trim_left_output(self):
        """{{- strips whitespace before the tag."""
        assert _values("a  \n {{- x }}")[0] == "a"

    def test_trim_right_output(self):
        """-}} strips whitespace after the tag."""
        assert _values("{{ x -}}  \n b")[-1] == "b"

    def test_trim_on_tags(self):
        """{%- and -%} behave the same way."""
        values = _values("a \n{%- assign x = 1 -%}\n b")
        assert values[0] == "a"
        assert values[-1] == "b"

    def test_trim_flag_recorded(self):
        """The trim flag is recorded on the delimiter token."""
        tokens = tokenize("{{- x -}}")
        assert tokens[0].trim is True
        assert tokens[2].trim is True

    def test_fully_trimmed_text_is_dropped(self):
        """Text that trims to nothing produces no DATA token."""
        assert TokenType.DATA not in _types("{{ a -}}   {{- b }}")

    def test_no_trim_without_marker(self):
        assert _values("a {{ x }} b") == ["a ", "{{", "x", "}}", " b"]


class TestRawAndComment:
    """Bodies that are never tokenised."""

    def test_raw_body_is_single_token(self):
        """{% raw %} keeps delimiters verbatim in one RAW token."""
        tokens = tokenize("{% raw %}{{ x }}{% if %}{% endraw %}")
        raw = [t for t in tokens if t.type is TokenType.RAW]
        assert len(raw) == 1
        assert raw[0].value == "{{ x }}{% if %}"

    def test_raw_end_tag_is_synthesized(self):
        """The endraw tag follows the RAW token."""
        values = _values("{% raw %}x{% endraw %}")
        assert values == ["{%", "raw", "%}", "x", "{%", "endraw", "%}"]

    def test_comment_nesting_counted(self):
        """Nested comment tags stay inside one comment body."""
        tokens = tokenize("{% comment %}a{% comment %}b{% endcomment %}c{% endcomment %}d")
        raw = [t.value for t in tokens if t.type is TokenType.RAW]
        assert raw == ["a{% comment %}b{% endcomment %}c"]
        assert tokens[-2].value == "d"

    def test_comment_body_may_contain_broken_syntax(self):
        """Anything goes inside a comment."""
        tokens = tokenize("{% comment %}{{ unclosed {% if %}{% endcomment %}")
        assert tokens[-1].type is TokenType.EOF

    def test_inline_comment(self):
        """{% # note %} emits a '#' NAME and the note as RAW."""
        tokens = tokenize("{% # a note %}")
        assert [t.type for t in tokens] == [
            TokenType.BLOCK_BEGIN,
            TokenType.NAME,
            TokenType.RAW,
            TokenType.BLOCK_END,
            TokenType.EOF,
        ]
        assert tokens[2].value == "a note"


class TestPositions:
    """Line and column tracking."""

    def test_first_token_position(self):
        token = tokenize("{{ x }}")[0]
        assert (token.lineno, token.col_offset) == (1, 0)

    def test_multiline_positions(self):
        """Positions count lines from 1 and columns from 0."""
        tokens = tokenize("line1\n  {{ x }}")
        begin = tokens[1]
        assert begin.type is TokenType.VARIABLE_BEGIN
        assert (begin.lineno, begin.col_offset) == (2, 2)

    def test_eof_position(self):
        eof = tokenize("a\nbc")[-1]
        assert (eof.lineno, eof.col_offset) == (2, 2)


class TestLexerErrors:
    """Malformed input raises ParseError with a code and position."""

    def test_unclosed_output(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize("Hello {{ name")
        assert exc_info.value.code is ErrorCode.UNCLOSED_TAG
        assert exc_info.value.lineno == 1
        assert exc_info.value.col_offset == 6

    def test_unclosed_tag(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize("{% if x")
        assert exc_info.value.code is ErrorCode.UNCLOSED_TAG

    def test_unterminated_string(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize("{{ 'abc }}")
        assert exc_info.value.code is ErrorCode.UNCLOSED_STRING

    def test_unexpected_character(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize("{{ x @ y }}")
        assert exc_info.value.code is ErrorCode.UNEXPECTED_CHARACTER
        assert "'@'" in str(exc_info.value)

    def test_unclosed_raw(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize("{% raw %}never closed")
        assert exc_info.value.code is ErrorCode.UNCLOSED_BLOCK

    def test_unclosed_comment(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize("{% comment %}{% comment %}{% endcomment %}")
        assert exc_info.value.code is ErrorCode.UNCLOSED_BLOCK

    def test_error_names_template(self):
        """The template name appears in the error location."""
        with pytest.raises(ParseError) as exc_info:
            Lexer("{{ x", name="page.liquid").tokenize()
        assert "page.liquid:1" in str(exc_info.value)

    def test_error_shows_source_line(self):
        with pytest.raises(ParseError) as exc_info:
            tokenize("ok\n{{ 'oops }}")
        message = str(exc_info.value)
        assert message.startswith("Parse Error:")
        assert "{{ 'oops }}" in message
