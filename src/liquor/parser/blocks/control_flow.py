"""Control flow block parsing for the Liquor parser.

Provides mixin for parsing control flow statements (if, unless, for, case,
break, continue).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from liquor._types import Token, TokenType
from liquor.environment.exceptions import ErrorCode
from liquor.nodes import Break, Case, Continue, Expr, For, If, Node, Unless, When
from liquor.parser.blocks.core import BlockStackMixin


class ControlFlowBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing control flow blocks.

    Required Host Attributes:
        - _loop_depth: int
        - All from BlockStackMixin
        - _parse_body: method
        - _parse_expression, _parse_primary: methods
    """

    if TYPE_CHECKING:
        _loop_depth: int

        def _parse_body(self) -> list[Node]: ...
        def _parse_expression(self) -> Expr: ...
        def _parse_primary(self) -> Expr: ...

    def _parse_conditional(
        self, keyword: str
    ) -> tuple[Token, Expr, list[Node], list[tuple[Expr, tuple[Node, ...]]], list[Node]]:
        """Shared body of if/unless: test, body, elsif branches, else body."""
        start = self._advance()  # consume keyword
        self._push_block(keyword, start)
        test = self._parse_expression()
        self._expect(TokenType.BLOCK_END)
        body = self._parse_body()

        elif_: list[tuple[Expr, tuple[Node, ...]]] = []
        else_: list[Node] = []
        while self._at_tag("elsif"):
            self._enter_continuation("elsif")
            branch_test = self._parse_expression()
            self._expect(TokenType.BLOCK_END)
            elif_.append((branch_test, tuple(self._parse_body())))

        if self._at_tag("else"):
            self._enter_continuation("else")
            self._expect(TokenType.BLOCK_END)
            else_ = self._parse_body()

        self._consume_end_tag(keyword)
        return start, test, body, elif_, else_

    def _parse_if(self) -> If:
        """Parse {% if cond %}...{% elsif cond %}...{% else %}...{% endif %}."""
        start, test, body, elif_, else_ = self._parse_conditional("if")
        return If(
            lineno=start.lineno,
            col_offset=start.col_offset,
            test=test,
            body=tuple(body),
            elif_=tuple(elif_),
            else_=tuple(else_),
        )

    def _parse_unless(self) -> Unless:
        """Parse {% unless cond %}...{% else %}...{% endunless %}."""
        start, test, body, elif_, else_ = self._parse_conditional("unless")
        return Unless(
            lineno=start.lineno,
            col_offset=start.col_offset,
            test=test,
            body=tuple(body),
            elif_=tuple(elif_),
            else_=tuple(else_),
        )

    def _parse_for(self) -> For:
        """Parse {% for x in items [limit: n] [offset: n] [reversed] %}...{% endfor %}.

        Modifiers may appear in any order. An optional {% else %} body
        renders when the collection is empty.
        """
        start = self._advance()  # consume 'for'
        self._push_block("for", start)

        target = self._expect_name("Expected loop variable name after 'for'")
        if not self._match_name("in"):
            raise self._error(
                "Expected 'in' after loop variable",
                suggestion="Loop syntax: {% for item in collection %}",
                code=ErrorCode.UNEXPECTED_TOKEN,
            )
        self._advance()  # consume 'in'
        iterable = self._parse_primary()

        limit: Expr | None = None
        offset: Expr | None = None
        reversed_ = False
        while not self._match(TokenType.BLOCK_END):
            if self._match(TokenType.COMMA):
                self._advance()
            elif self._match_name("reversed"):
                self._advance()
                reversed_ = True
            elif self._match_name("limit", "offset") and self._peek().type is TokenType.COLON:
                option = self._advance().value
                self._advance()  # consume ':'
                if option == "limit":
                    limit = self._parse_primary()
                else:
                    offset = self._parse_primary()
            else:
                raise self._error(
                    f"Unknown for-loop option {self._current.value!r}",
                    suggestion="Valid options: limit: n, offset: n, reversed",
                    code=ErrorCode.UNEXPECTED_TOKEN,
                )
        self._expect(TokenType.BLOCK_END)

        self._loop_depth += 1
        try:
            body = self._parse_body()
        finally:
            self._loop_depth -= 1

        else_: list[Node] = []
        if self._at_tag("else"):
            self._enter_continuation("else")
            self._expect(TokenType.BLOCK_END)
            else_ = self._parse_body()

        self._consume_end_tag("for")

        return For(
            lineno=start.lineno,
            col_offset=start.col_offset,
            target=target,
            iter=iterable,
            body=tuple(body),
            else_=tuple(else_),
            limit=limit,
            offset=offset,
            reversed=reversed_,
        )

    def _parse_case(self) -> Case:
        """Parse {% case x %}{% when a, b %}...{% when c or d %}...{% else %}...{% endcase %}.

        Text between {% case %} and the first {% when %} is discarded.
        """
        start = self._advance()  # consume 'case'
        self._push_block("case", start)
        subject = self._parse_primary()
        self._expect(TokenType.BLOCK_END)
        self._parse_body()

        whens: list[When] = []
        while self._at_tag("when"):
            when_token = self._enter_continuation("when")
            values = self._parse_when_values()
            self._expect(TokenType.BLOCK_END)
            whens.append(
                When(
                    lineno=when_token.lineno,
                    col_offset=when_token.col_offset,
                    values=values,
                    body=tuple(self._parse_body()),
                )
            )

        else_: Sequence[Node] = ()
        if self._at_tag("else"):
            self._enter_continuation("else")
            self._expect(TokenType.BLOCK_END)
            else_ = tuple(self._parse_body())

        self._consume_end_tag("case")

        return Case(
            lineno=start.lineno,
            col_offset=start.col_offset,
            subject=subject,
            whens=tuple(whens),
            else_=else_,
        )

    def _parse_when_values(self) -> tuple[Expr, ...]:
        values = [self._parse_primary()]
        while self._match(TokenType.COMMA) or self._match_name("or"):
            self._advance()
            values.append(self._parse_primary())
        return tuple(values)

    def _parse_loop_control(self, keyword: str) -> Token:
        token = self._advance()
        if self._loop_depth == 0:
            raise self._error(
                f"'{keyword}' outside of a for loop",
                token=token,
                code=ErrorCode.UNEXPECTED_TOKEN,
            )
        self._expect(TokenType.BLOCK_END)
        return token

    def _parse_break(self) -> Break:
        """Parse {% break %}."""
        token = self._parse_loop_control("break")
        return Break(lineno=token.lineno, col_offset=token.col_offset)

    def _parse_continue(self) -> Continue:
        """Parse {% continue %}."""
        token = self._parse_loop_control("continue")
        return Continue(lineno=token.lineno, col_offset=token.col_offset)
