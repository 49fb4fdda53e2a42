"""Liquor parser: tokens to immutable AST.

Example:
    >>> from liquor.lexer import Lexer
    >>> from liquor.parser import Parser
    >>> ast = Parser(Lexer("Hello {{ name }}").tokenize()).parse()

"""

from liquor.parser.core import Parser
from liquor.parser.errors import ParseError

__all__ = ["ParseError", "Parser"]
