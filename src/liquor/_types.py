"""Token types shared by the Liquor lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of token produced by the lexer."""

    # Template structure
    DATA = "data"
    RAW = "raw"
    VARIABLE_BEGIN = "variable_begin"
    VARIABLE_END = "variable_end"
    BLOCK_BEGIN = "block_begin"
    BLOCK_END = "block_end"

    # Literals and names
    NAME = "name"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"

    # Punctuation
    DOT = "dot"
    RANGE = "range"
    PIPE = "pipe"
    COLON = "colon"
    COMMA = "comma"
    ASSIGN = "assign"
    LBRACKET = "lbracket"
    RBRACKET = "rbracket"
    LPAREN = "lparen"
    RPAREN = "rparen"

    # Comparison operators
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    GT = "gt"
    LTEQ = "lteq"
    GTEQ = "gteq"

    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token.

    Attributes:
        type: Token kind
        value: Source text (or decoded value for strings)
        lineno: 1-based line number
        col_offset: 0-based column offset
        trim: True when a ``-`` whitespace-trim marker is attached
              (only meaningful for BEGIN/END delimiters)
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int
    trim: bool = False

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
