"""Token navigation for the Liquor parser.

Provides the cursor over the token list that every parsing mixin uses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from liquor._types import Token, TokenType
from liquor.parser.errors import ParseError

if TYPE_CHECKING:
    from liquor.environment.exceptions import ErrorCode


class TokenNavigationMixin:
    """Mixin for moving through the token list.

    Required Host Attributes:
        - _tokens: list[Token]
        - _pos: int
        - _source: str | None
        - _filename: str | None
    """

    _tokens: list[Token]
    _pos: int
    _source: str | None
    _filename: str | None

    @property
    def _current(self) -> Token:
        """Token under the cursor (EOF once the list is exhausted)."""
        return self._tokens[min(self._pos, len(self._tokens) - 1)]

    def _peek(self, offset: int = 1) -> Token:
        """Token ``offset`` positions ahead of the cursor."""
        return self._tokens[min(self._pos + offset, len(self._tokens) - 1)]

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._current
        if self._pos < len(self._tokens):
            self._pos += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        return self._current.type in types

    def _match_name(self, *values: str) -> bool:
        """True if the current token is a NAME with one of ``values``."""
        token = self._current
        return token.type is TokenType.NAME and token.value in values

    def _expect(self, type_: TokenType, message: str | None = None) -> Token:
        """Consume a token of ``type_`` or raise ParseError."""
        if self._current.type is not type_:
            raise self._error(message or f"Expected {_describe(type_)}, got {_describe_token(self._current)}")
        return self._advance()

    def _expect_name(self, message: str) -> str:
        if self._current.type is not TokenType.NAME:
            raise self._error(message)
        return self._advance().value

    def _error(
        self,
        message: str,
        token: Token | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ) -> ParseError:
        """Build a ParseError at ``token`` (default: the current token)."""
        return ParseError(
            message,
            token or self._current,
            source=self._source,
            filename=self._filename,
            suggestion=suggestion,
            code=code,
        )


_DESCRIPTIONS = {
    TokenType.BLOCK_END: "'%}'",
    TokenType.VARIABLE_END: "'}}'",
    TokenType.NAME: "a name",
    TokenType.STRING: "a string",
    TokenType.RPAREN: "')'",
    TokenType.RBRACKET: "']'",
    TokenType.COLON: "':'",
    TokenType.RANGE: "'..'",
    TokenType.ASSIGN: "'='",
    TokenType.EOF: "end of template",
}


def _describe(type_: TokenType) -> str:
    return _DESCRIPTIONS.get(type_, type_.value)


def _describe_token(token: Token) -> str:
    if token.type is TokenType.EOF:
        return "end of template"
    return repr(token.value)
