"""Liquor lexer: template source to a flat token list.

Three kinds of region are recognised:

- text (DATA tokens),
- output ``{{ ... }}`` (VARIABLE_BEGIN ... VARIABLE_END),
- tags ``{% ... %}`` (BLOCK_BEGIN ... BLOCK_END).

A ``-`` next to a delimiter (``{{-``, ``-}}``, ``{%-``, ``-%}``) is recorded
on the delimiter token and strips all whitespace from the adjoining text on
that side. The bodies of ``raw`` and ``comment`` are never tokenised: each is
emitted as a single RAW token followed by its end tag. ``comment`` nesting is
counted, so ``{% comment %}{% comment %}{% endcomment %}{% endcomment %}`` is
one comment. ``{% # note %}`` is an inline comment: BLOCK_BEGIN, NAME ``#``,
RAW, BLOCK_END.

Example:
    >>> [t.type.name for t in Lexer("Hi {{ name }}").tokenize()]
    ['DATA', 'VARIABLE_BEGIN', 'NAME', 'VARIABLE_END', 'EOF']

"""

from __future__ import annotations

import re
from bisect import bisect_right

from liquor._types import Token, TokenType
from liquor.environment.exceptions import ErrorCode
from liquor.parser.errors import ParseError

_BEGIN_RE = re.compile(r"\{\{-?|\{%-?")
_VARIABLE_END_RE = re.compile(r"-?\}\}")
_BLOCK_END_RE = re.compile(r"-?%\}")
_WHITESPACE_RE = re.compile(r"\s+")
_NAME_RE = re.compile(r"[a-zA-Z_](?:[\w-]*\w)?\??")
_NUMBER_RE = re.compile(r"-?\d+(\.\d+)?")
_INTEGER_RE = re.compile(r"\d+")
_OPERATOR_RE = re.compile(r"==|!=|<>|<=|>=|\.\.|[<>=|:,.\[\]()]")

_ENDRAW_RE = re.compile(r"\{%(-?)\s*endraw\s*(-?)%\}")
_COMMENT_TAG_RE = re.compile(r"\{%(-?)\s*(endcomment|comment)\b.*?(-?)%\}", re.DOTALL)

# O(1) operator → token type lookup
_OPERATORS: dict[str, TokenType] = {
    "==": TokenType.EQ,
    "!=": TokenType.NE,
    "<>": TokenType.NE,
    "<=": TokenType.LTEQ,
    ">=": TokenType.GTEQ,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "..": TokenType.RANGE,
    ".": TokenType.DOT,
    "|": TokenType.PIPE,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    "=": TokenType.ASSIGN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


class Lexer:
    """Tokenise one template source.

    Args:
        source: Template source text
        name: Template name or filename, used in error messages

    Raises:
        ParseError: On an unterminated ``{{``/``{%``, an unterminated string
            literal, an unclosed ``raw``/``comment`` body, or a character
            that cannot start any token.
    """

    __slots__ = ("_line_starts", "_name", "_source", "_tokens", "_trim_next")

    def __init__(self, source: str, name: str | None = None):
        self._source = source
        self._name = name
        self._tokens: list[Token] = []
        self._trim_next = False
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", source)]

    def tokenize(self) -> list[Token]:
        """Return the complete token list, terminated by an EOF token."""
        source = self._source
        pos = 0
        while pos < len(source):
            match = _BEGIN_RE.search(source, pos)
            if match is None:
                self._data(source[pos:], pos)
                pos = len(source)
                break

            self._data(source[pos : match.start()], pos)
            opener = match.group()
            trim = opener.endswith("-")
            if trim:
                self._trim_previous()

            if opener.startswith("{{"):
                self._emit(TokenType.VARIABLE_BEGIN, "{{", match.start(), trim)
                pos = self._lex_inside(match.end(), _VARIABLE_END_RE, TokenType.VARIABLE_END)
            else:
                begin = self._emit(TokenType.BLOCK_BEGIN, "{%", match.start(), trim)
                pos = self._lex_block(match.end(), begin)

        self._tokens.append(Token(TokenType.EOF, "", *self._position(len(source))))
        return [t for t in self._tokens if not (t.type is TokenType.DATA and not t.value)]

    # ------------------------------------------------------------------
    # Regions
    # ------------------------------------------------------------------

    def _lex_block(self, pos: int, begin: Token) -> int:
        source = self._source
        ws = _WHITESPACE_RE.match(source, pos)
        if ws:
            pos = ws.end()

        if source.startswith("#", pos):
            end = _BLOCK_END_RE.search(source, pos)
            if end is None:
                self._unclosed_tag(begin, "%}")
            self._emit(TokenType.NAME, "#", pos)
            self._emit(TokenType.RAW, source[pos + 1 : end.start()].strip(), pos + 1)
            return self._close(end, TokenType.BLOCK_END)

        start = len(self._tokens)
        pos = self._lex_inside(pos, _BLOCK_END_RE, TokenType.BLOCK_END)
        tag = self._tokens[start : len(self._tokens) - 1]
        if tag and tag[0].type is TokenType.NAME:
            if tag[0].value == "raw" and len(tag) == 1:
                return self._lex_raw(pos, begin)
            if tag[0].value == "comment":
                return self._lex_comment(pos, begin)
        return pos

    def _lex_raw(self, pos: int, begin: Token) -> int:
        end = _ENDRAW_RE.search(self._source, pos)
        if end is None:
            raise self._error(
                "Unclosed 'raw' block",
                begin,
                suggestion="Add {% endraw %} after the raw text",
                code=ErrorCode.UNCLOSED_BLOCK,
            )
        self._body(pos, end.start(), bool(end.group(1)))
        self._end_tag("endraw", end)
        return end.end()

    def _lex_comment(self, pos: int, begin: Token) -> int:
        depth = 1
        for match in _COMMENT_TAG_RE.finditer(self._source, pos):
            depth += 1 if match.group(2) == "comment" else -1
            if depth == 0:
                self._body(pos, match.start(), bool(match.group(1)))
                self._end_tag("endcomment", match, trim_right=bool(match.group(3)))
                return match.end()
        raise self._error(
            "Unclosed 'comment' block",
            begin,
            suggestion="Add {% endcomment %} after the commented text",
            code=ErrorCode.UNCLOSED_BLOCK,
        )

    def _lex_inside(self, pos: int, end_re: re.Pattern[str], end_type: TokenType) -> int:
        """Lex expression tokens until the closing delimiter."""
        source = self._source
        begin = self._tokens[-1]
        while True:
            ws = _WHITESPACE_RE.match(source, pos)
            if ws:
                pos = ws.end()
            if pos >= len(source):
                self._unclosed_tag(begin, "}}" if end_type is TokenType.VARIABLE_END else "%}")

            end = end_re.match(source, pos)
            if end:
                return self._close(end, end_type)

            char = source[pos]
            if char in "\"'":
                close = source.find(char, pos + 1)
                if close == -1:
                    raise self._error(
                        "Unterminated string literal",
                        Token(TokenType.STRING, char, *self._position(pos)),
                        suggestion=f"Close the string with {char}",
                        code=ErrorCode.UNCLOSED_STRING,
                    )
                self._emit(TokenType.STRING, source[pos + 1 : close], pos)
                pos = close + 1
                continue

            after_dot = self._tokens[-1].type is TokenType.DOT
            number = (_INTEGER_RE if after_dot else _NUMBER_RE).match(source, pos)
            if number:
                is_float = not after_dot and number.group(1) is not None
                self._emit(TokenType.FLOAT if is_float else TokenType.INTEGER, number.group(), pos)
                pos = number.end()
                continue

            name = _NAME_RE.match(source, pos)
            if name:
                self._emit(TokenType.NAME, name.group(), pos)
                pos = name.end()
                continue

            op = _OPERATOR_RE.match(source, pos)
            if op:
                self._emit(_OPERATORS[op.group()], op.group(), pos)
                pos = op.end()
                continue

            raise self._error(
                f"Unexpected character {char!r}",
                Token(TokenType.DATA, char, *self._position(pos)),
                code=ErrorCode.UNEXPECTED_CHARACTER,
            )

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def _position(self, offset: int) -> tuple[int, int]:
        line = bisect_right(self._line_starts, offset)
        return line, offset - self._line_starts[line - 1]

    def _emit(self, type_: TokenType, value: str, offset: int, trim: bool = False) -> Token:
        token = Token(type_, value, *self._position(offset), trim=trim)
        self._tokens.append(token)
        return token

    def _data(self, text: str, offset: int) -> None:
        if self._trim_next:
            text = text.lstrip()
            self._trim_next = False
        self._emit(TokenType.DATA, text, offset)

    def _body(self, start: int, end: int, trim_right: bool) -> None:
        text = self._source[start:end]
        if self._trim_next:
            text = text.lstrip()
            self._trim_next = False
        if trim_right:
            text = text.rstrip()
        self._emit(TokenType.RAW, text, start)

    def _trim_previous(self) -> None:
        for i in range(len(self._tokens) - 1, -1, -1):
            token = self._tokens[i]
            if token.type not in (TokenType.DATA, TokenType.RAW):
                return
            stripped = token.value.rstrip()
            self._tokens[i] = Token(token.type, stripped, token.lineno, token.col_offset)
            if stripped or token.type is TokenType.RAW:
                return

    def _close(self, end: re.Match[str], end_type: TokenType) -> int:
        trim = end.group().startswith("-")
        value = "}}" if end_type is TokenType.VARIABLE_END else "%}"
        self._emit(end_type, value, end.start(), trim)
        self._trim_next = trim
        return end.end()

    def _end_tag(self, name: str, match: re.Match[str], trim_right: bool | None = None) -> None:
        if trim_right is None:
            trim_right = bool(match.group(2))
        self._emit(TokenType.BLOCK_BEGIN, "{%", match.start(), bool(match.group(1)))
        self._emit(TokenType.NAME, name, self._source.index(name, match.start()))
        self._emit(TokenType.BLOCK_END, "%}", match.end() - 2, trim_right)
        self._trim_next = trim_right

    def _unclosed_tag(self, begin: Token, closer: str) -> None:
        raise self._error(
            f"Unclosed '{begin.value}' (expected '{closer}')",
            begin,
            suggestion=f"Close the tag with {closer}",
            code=ErrorCode.UNCLOSED_TAG,
        )

    def _error(
        self,
        message: str,
        token: Token,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ) -> ParseError:
        return ParseError(
            message,
            token,
            source=self._source,
            filename=self._name,
            suggestion=suggestion,
            code=code,
        )


def tokenize(source: str, name: str | None = None) -> list[Token]:
    """Convenience wrapper: ``Lexer(source, name).tokenize()``."""
    return Lexer(source, name).tokenize()
