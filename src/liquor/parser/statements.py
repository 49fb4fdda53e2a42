"""Statement parsing for the Liquor parser.

Turns the token stream into body node lists and dispatches block tags
through ``_BLOCK_PARSERS``.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import TYPE_CHECKING

from liquor._types import TokenType
from liquor.environment.exceptions import ErrorCode
from liquor.nodes import Expr, FilterCall, Node, Output, Text
from liquor.parser.blocks.core import BlockStackMixin

if TYPE_CHECKING:
    from collections.abc import Mapping

    from liquor.environment.registry import CustomTag
    from liquor.nodes import Tag

# O(1) tag keyword → parser method dispatch
_BLOCK_PARSERS: dict[str, str] = {
    "if": "_parse_if",
    "unless": "_parse_unless",
    "for": "_parse_for",
    "case": "_parse_case",
    "break": "_parse_break",
    "continue": "_parse_continue",
    "assign": "_parse_assign",
    "capture": "_parse_capture",
    "comment": "_parse_comment",
    "raw": "_parse_raw",
    "#": "_parse_inline_comment",
    "include": "_parse_include",
    "render": "_parse_render",
}

# Branch keywords that end the current body without closing the block
_CONTINUATION_KEYWORDS: frozenset[str] = frozenset({"elsif", "else", "when"})

_END_KEYWORDS: frozenset[str] = frozenset(
    {"endif", "endunless", "endfor", "endcase", "endcapture", "endcomment", "endraw"}
)

_VALID_KEYWORDS: frozenset[str] = frozenset(_BLOCK_PARSERS) | _CONTINUATION_KEYWORDS | _END_KEYWORDS


class StatementParsingMixin(BlockStackMixin):
    """Mixin for parsing template bodies, output and tag dispatch.

    Required Host Attributes:
        - _tags: Mapping[str, CustomTag]
        - All from BlockStackMixin
        - _parse_primary, _parse_filters: methods
        - _parse_custom_tag: method
    """

    if TYPE_CHECKING:
        _tags: Mapping[str, CustomTag]

        def _parse_primary(self) -> Expr: ...
        def _parse_filters(self, end: TokenType) -> tuple[FilterCall, ...]: ...
        def _parse_custom_tag(self, tag: CustomTag) -> Tag: ...

    def _is_end_keyword(self, name: str) -> bool:
        """True for ``end*`` names that close a block rather than open a tag."""
        if name in _END_KEYWORDS:
            return True
        return name.startswith("end") and name not in self._tags and name not in _BLOCK_PARSERS

    def _parse_body(self) -> list[Node]:
        """Parse nodes until EOF, an end tag, or a branch keyword.

        The stopping tag is left unconsumed for the enclosing block parser.
        """
        nodes: list[Node] = []
        while True:
            token = self._current
            if token.type is TokenType.EOF:
                return nodes
            if token.type is TokenType.DATA:
                self._advance()
                nodes.append(Text(lineno=token.lineno, col_offset=token.col_offset, value=token.value))
            elif token.type is TokenType.VARIABLE_BEGIN:
                nodes.append(self._parse_output())
            elif token.type is TokenType.BLOCK_BEGIN:
                keyword = self._peek()
                if keyword.type is TokenType.NAME and (
                    keyword.value in _CONTINUATION_KEYWORDS or self._is_end_keyword(keyword.value)
                ):
                    return nodes
                self._advance()  # consume '{%'
                nodes.append(self._parse_tag())
            else:
                raise self._error(
                    f"Unexpected {token.value!r}",
                    code=ErrorCode.UNEXPECTED_TOKEN,
                )

    def _parse_output(self) -> Output:
        """Parse {{ expr | filter: args }} (an empty {{ }} outputs nothing)."""
        begin = self._expect(TokenType.VARIABLE_BEGIN)
        expr: Expr | None = None
        filters: tuple[FilterCall, ...] = ()
        if not self._match(TokenType.VARIABLE_END):
            expr = self._parse_primary()
            filters = self._parse_filters(TokenType.VARIABLE_END)
        end = self._expect(TokenType.VARIABLE_END)
        return Output(
            lineno=begin.lineno,
            col_offset=begin.col_offset,
            expr=expr,
            filters=filters,
            trim_left=begin.trim,
            trim_right=end.trim,
        )

    def _parse_tag(self) -> Node:
        """Dispatch on the tag keyword (cursor just after ``{%``)."""
        token = self._current
        if token.type is TokenType.BLOCK_END:
            raise self._error("Empty tag", code=ErrorCode.UNEXPECTED_TOKEN)
        if token.type is not TokenType.NAME:
            raise self._error(
                f"Expected a tag name, got {token.value!r}",
                code=ErrorCode.UNEXPECTED_TOKEN,
            )

        custom = self._tags.get(token.value)
        if custom is not None:
            return self._parse_custom_tag(custom)

        method = _BLOCK_PARSERS.get(token.value)
        if method is not None:
            return getattr(self, method)()

        candidates = sorted(set(_BLOCK_PARSERS) | set(self._tags))
        matches = get_close_matches(token.value, candidates, n=1, cutoff=0.6)
        raise self._error(
            f"Unknown tag '{token.value}'",
            suggestion=f"Did you mean '{matches[0]}'?" if matches else None,
            code=ErrorCode.UNKNOWN_TAG,
        )

    def _check_stray_tag(self) -> None:
        """At top level: anything left after the body is a stray end/branch tag."""
        if self._current.type is TokenType.EOF:
            return
        keyword = self._peek()
        if keyword.type is TokenType.NAME and keyword.value in _CONTINUATION_KEYWORDS:
            raise self._error(
                f"Unexpected '{keyword.value}' outside of a block",
                token=keyword,
                code=ErrorCode.UNEXPECTED_TOKEN,
            )
        raise self._error(
            f"Unexpected '{keyword.value}' without a matching opening tag",
            token=keyword,
            suggestion=f"Remove the stray {{% {keyword.value} %}}",
            code=ErrorCode.UNEXPECTED_TOKEN,
        )
