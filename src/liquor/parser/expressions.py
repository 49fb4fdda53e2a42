"""Expression parsing for the Liquor parser.

Grammar (lowest precedence first):

    expression  := comparison (("and" | "or") expression)?
    comparison  := primary (("==" | "!=" | "<>" | "<" | ">" | "<=" | ">=" | "contains") primary)?
    primary     := literal | range | path
    range       := "(" primary ".." primary ")"
    path        := NAME ("." NAME | "." INTEGER | "[" expression "]")*
    filters     := ("|" NAME (":" argument ("," argument)*)?)*
    argument    := NAME ":" primary | primary

``and``/``or`` share one precedence level and group to the right, which is
how Liquid evaluates them.
"""

from __future__ import annotations

from liquor._types import Token, TokenType
from liquor.environment.exceptions import ErrorCode
from liquor.nodes import (
    BoolOp,
    Compare,
    Const,
    Contains,
    Expr,
    FilterCall,
    Getattr,
    Getitem,
    Name,
    Range,
)
from liquor.parser.tokens import TokenNavigationMixin
from liquor.template.helpers import BLANK, EMPTY

# O(1) comparison operator lookup (``<>`` is normalised to ``!=``)
_COMPARE_OPS: dict[TokenType, str] = {
    TokenType.EQ: "==",
    TokenType.NE: "!=",
    TokenType.LT: "<",
    TokenType.GT: ">",
    TokenType.LTEQ: "<=",
    TokenType.GTEQ: ">=",
}

_KEYWORD_LITERALS: dict[str, object] = {
    "true": True,
    "false": False,
    "nil": None,
    "null": None,
    "empty": EMPTY,
    "blank": BLANK,
}


class ExpressionParsingMixin(TokenNavigationMixin):
    """Mixin for parsing expressions and filter chains.

    Required Host Attributes:
        - All from TokenNavigationMixin
    """

    def _parse_expression(self) -> Expr:
        """Parse a full condition: comparisons joined by and/or."""
        left = self._parse_comparison()
        if self._match_name("and", "or"):
            op = self._advance()
            right = self._parse_expression()
            return BoolOp(
                lineno=op.lineno,
                col_offset=op.col_offset,
                op=op.value,  # type: ignore[arg-type]
                left=left,
                right=right,
            )
        return left

    def _parse_comparison(self) -> Expr:
        left = self._parse_primary()
        op = _COMPARE_OPS.get(self._current.type)
        if op is not None:
            token = self._advance()
            right = self._parse_primary()
            return Compare(
                lineno=token.lineno,
                col_offset=token.col_offset,
                left=left,
                op=op,  # type: ignore[arg-type]
                right=right,
            )
        if self._match_name("contains"):
            token = self._advance()
            right = self._parse_primary()
            return Contains(
                lineno=token.lineno,
                col_offset=token.col_offset,
                left=left,
                right=right,
            )
        return left

    def _parse_primary(self) -> Expr:
        """Parse a literal, a range, or a variable path."""
        token = self._current

        if token.type is TokenType.STRING:
            self._advance()
            return Const(lineno=token.lineno, col_offset=token.col_offset, value=token.value)

        if token.type is TokenType.INTEGER:
            self._advance()
            return Const(lineno=token.lineno, col_offset=token.col_offset, value=int(token.value))

        if token.type is TokenType.FLOAT:
            self._advance()
            return Const(lineno=token.lineno, col_offset=token.col_offset, value=float(token.value))

        if token.type is TokenType.LPAREN:
            return self._parse_range()

        if token.type is TokenType.NAME:
            if token.value in _KEYWORD_LITERALS and self._peek().type not in (
                TokenType.DOT,
                TokenType.LBRACKET,
            ):
                self._advance()
                return Const(
                    lineno=token.lineno,
                    col_offset=token.col_offset,
                    value=_KEYWORD_LITERALS[token.value],
                )
            return self._parse_path()

        raise self._error(
            f"Expected a value, got {token.value!r}" if token.value else "Expected a value",
            code=ErrorCode.INVALID_EXPRESSION,
        )

    def _parse_range(self) -> Range:
        start = self._expect(TokenType.LPAREN)
        low = self._parse_primary()
        self._expect(TokenType.RANGE, "Expected '..' in range, e.g. (1..5)")
        high = self._parse_primary()
        self._expect(TokenType.RPAREN, "Expected ')' to close range")
        return Range(lineno=start.lineno, col_offset=start.col_offset, start=low, end=high)

    def _parse_path(self) -> Expr:
        token = self._advance()
        node: Expr = Name(lineno=token.lineno, col_offset=token.col_offset, name=token.value)
        while True:
            if self._match(TokenType.DOT):
                dot = self._advance()
                if self._match(TokenType.NAME):
                    attr = self._advance().value
                    node = Getattr(lineno=dot.lineno, col_offset=dot.col_offset, obj=node, attr=attr)
                elif self._match(TokenType.INTEGER):
                    index = self._advance()
                    key = Const(lineno=index.lineno, col_offset=index.col_offset, value=int(index.value))
                    node = Getitem(lineno=dot.lineno, col_offset=dot.col_offset, obj=node, key=key)
                else:
                    raise self._error(
                        "Expected a property name after '.'",
                        code=ErrorCode.INVALID_EXPRESSION,
                    )
            elif self._match(TokenType.LBRACKET):
                bracket = self._advance()
                key = self._parse_expression()
                self._expect(TokenType.RBRACKET, "Expected ']' to close index")
                node = Getitem(lineno=bracket.lineno, col_offset=bracket.col_offset, obj=node, key=key)
            else:
                return node

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _parse_filters(self, end: TokenType) -> tuple[FilterCall, ...]:
        """Parse ``| name: args`` applications up to the ``end`` token."""
        filters: list[FilterCall] = []
        while self._match(TokenType.PIPE):
            self._advance()
            name_token = self._current
            if name_token.type is not TokenType.NAME:
                raise self._error(
                    "Expected filter name after '|'",
                    code=ErrorCode.INVALID_FILTER,
                )
            self._advance()
            args, kwargs = self._parse_filter_args(name_token)
            filters.append(
                FilterCall(
                    lineno=name_token.lineno,
                    col_offset=name_token.col_offset,
                    name=name_token.value,
                    args=args,
                    kwargs=kwargs,
                )
            )
            if not self._match(TokenType.PIPE, end):
                raise self._error(
                    f"Malformed arguments for filter '{name_token.value}'",
                    suggestion="Separate filter arguments with commas: | filter: a, b, key: c",
                    code=ErrorCode.INVALID_FILTER,
                )
        return tuple(filters)

    def _parse_filter_args(
        self, name_token: Token
    ) -> tuple[tuple[Expr, ...], tuple[tuple[str, Expr], ...]]:
        args: list[Expr] = []
        kwargs: list[tuple[str, Expr]] = []
        if not self._match(TokenType.COLON):
            return (), ()
        self._advance()
        while True:
            if self._match(TokenType.NAME) and self._peek().type is TokenType.COLON:
                key = self._advance().value
                self._advance()
                kwargs.append((key, self._parse_filter_value(name_token)))
            else:
                if kwargs:
                    raise self._error(
                        f"Positional argument after keyword argument in filter '{name_token.value}'",
                        code=ErrorCode.INVALID_FILTER,
                    )
                args.append(self._parse_filter_value(name_token))
            if not self._match(TokenType.COMMA):
                return tuple(args), tuple(kwargs)
            self._advance()

    def _parse_filter_value(self, name_token: Token) -> Expr:
        if self._match(TokenType.PIPE, TokenType.COMMA, TokenType.VARIABLE_END, TokenType.BLOCK_END):
            raise self._error(
                f"Expected an argument for filter '{name_token.value}'",
                code=ErrorCode.INVALID_FILTER,
            )
        return self._parse_primary()
