"""Template structure block parsing for the Liquor parser.

Provides mixin for parsing include, render, comment, raw, the inline
``{% # ... %}`` comment, and host-registered tags.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from liquor._types import Token, TokenType
from liquor.environment.exceptions import ErrorCode
from liquor.nodes import Comment, Expr, FilterCall, Include, Node, Raw, Render, Tag
from liquor.parser.blocks.core import BlockStackMixin

if TYPE_CHECKING:
    from liquor.environment.registry import CustomTag


class TemplateStructureBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing template structure blocks.

    Required Host Attributes:
        - All from BlockStackMixin
        - _parse_body, _parse_expression, _parse_primary: methods
        - _markup: method returning the source text between two tokens
    """

    if TYPE_CHECKING:

        def _parse_body(self) -> list[Node]: ...
        def _parse_expression(self) -> Expr: ...
        def _parse_primary(self) -> Expr: ...
        def _parse_filters(self, end: TokenType) -> tuple[FilterCall, ...]: ...
        def _markup(self, start: Token, end: Token) -> str: ...

    def _parse_include(self) -> Include:
        """Parse {% include "name" [with x [as y]] [for xs [as y]] [, key: value]* %}.

        The included template shares the caller's scope.
        """
        start = self._advance()  # consume 'include'
        template = self._parse_primary()
        with_, for_, alias, bindings = self._parse_include_options("include", allow_for=True)

        return Include(
            lineno=start.lineno,
            col_offset=start.col_offset,
            template=template,
            with_=with_,
            alias=alias,
            for_=for_,
            bindings=bindings,
        )

    def _parse_render(self) -> Render:
        """Parse {% render "name" [with x [as y]] [, key: value]* %}.

        The rendered template sees only globals and its own bindings.
        """
        start = self._advance()  # consume 'render'
        if not self._match(TokenType.STRING):
            raise self._error(
                "Expected a quoted template name after 'render'",
                suggestion="render only accepts a string literal: {% render \"card\" %}",
                code=ErrorCode.UNEXPECTED_TOKEN,
            )
        template = self._parse_primary()
        with_, _, alias, bindings = self._parse_include_options("render", allow_for=False)

        return Render(
            lineno=start.lineno,
            col_offset=start.col_offset,
            template=template,
            with_=with_,
            alias=alias,
            bindings=bindings,
        )

    def _parse_include_options(
        self, keyword: str, *, allow_for: bool
    ) -> tuple[Expr | None, Expr | None, str | None, tuple[tuple[str, Expr], ...]]:
        with_: Expr | None = None
        for_: Expr | None = None
        alias: str | None = None
        bindings: list[tuple[str, Expr]] = []

        while not self._match(TokenType.BLOCK_END):
            if self._match(TokenType.COMMA):
                self._advance()
            elif self._match(TokenType.NAME) and self._peek().type is TokenType.COLON:
                key = self._advance().value
                self._advance()  # consume ':'
                bindings.append((key, self._parse_primary()))
            elif self._match_name("with", "for"):
                option = self._advance()
                if option.value == "for" and not allow_for:
                    raise self._error(
                        f"'{keyword}' does not support 'for'",
                        token=option,
                        suggestion="Use {% include ... for items %} or loop around the render",
                        code=ErrorCode.UNEXPECTED_TOKEN,
                    )
                if with_ is not None or for_ is not None:
                    raise self._error(
                        "Only one of 'with' or 'for' may be given",
                        token=option,
                        code=ErrorCode.UNEXPECTED_TOKEN,
                    )
                value = self._parse_primary()
                if option.value == "with":
                    with_ = value
                else:
                    for_ = value
                if self._match_name("as"):
                    self._advance()
                    alias = self._expect_name("Expected a name after 'as'")
            else:
                raise self._error(
                    f"Unexpected {self._current.value!r} in '{keyword}' tag",
                    suggestion=f'{keyword} syntax: {{% {keyword} "name", key: value %}}',
                    code=ErrorCode.UNEXPECTED_TOKEN,
                )

        self._expect(TokenType.BLOCK_END)
        return with_, for_, alias, tuple(bindings)

    def _parse_comment(self) -> Comment:
        """Parse {% comment %}...{% endcomment %} (body is a single RAW token)."""
        start = self._advance()  # consume 'comment'
        self._push_block("comment", start)
        while not self._match(TokenType.BLOCK_END, TokenType.EOF):
            self._advance()
        self._expect(TokenType.BLOCK_END)
        text = self._expect(TokenType.RAW).value
        self._consume_end_tag("comment")
        return Comment(lineno=start.lineno, col_offset=start.col_offset, text=text)

    def _parse_raw(self) -> Raw:
        """Parse {% raw %}...{% endraw %} (body is a single RAW token)."""
        start = self._advance()  # consume 'raw'
        self._push_block("raw", start)
        self._expect(TokenType.BLOCK_END)
        value = self._expect(TokenType.RAW).value
        self._consume_end_tag("raw")
        return Raw(lineno=start.lineno, col_offset=start.col_offset, value=value)

    def _parse_inline_comment(self) -> Comment:
        """Parse {% # text %}."""
        start = self._advance()  # consume '#'
        text = self._expect(TokenType.RAW).value
        self._expect(TokenType.BLOCK_END)
        return Comment(lineno=start.lineno, col_offset=start.col_offset, text=text)

    def _parse_custom_tag(self, tag: CustomTag) -> Tag:
        """Parse a host-registered tag: {% name arg, arg %}[...{% endname %}].

        Arguments are comma-separated expressions, evaluated at render time.
        """
        start = self._advance()  # consume tag name
        first = self._current
        args: list[Expr] = []
        while not self._match(TokenType.BLOCK_END):
            if args:
                self._expect(TokenType.COMMA, f"Expected ',' between '{tag.name}' arguments")
            args.append(self._parse_expression())
        end = self._expect(TokenType.BLOCK_END)
        markup = self._markup(first, end) if args else ""

        body: list[Node] = []
        if tag.block:
            self._push_block(tag.name, start)
            body = self._parse_body()
            self._consume_end_tag(tag.name)

        return Tag(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=tag.name,
            args=tuple(args),
            body=tuple(body),
            markup=markup,
        )
