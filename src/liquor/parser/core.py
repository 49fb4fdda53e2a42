"""Liquor Parser core: token list to immutable AST.

The Parser is assembled from mixins, one per grammar area:

- TokenNavigationMixin: cursor over the token list
- ExpressionParsingMixin: literals, paths, ranges, comparisons, filters
- StatementParsingMixin: bodies, output and tag dispatch
- BlockStackMixin: matching blocks against end tags
- ControlFlow / Variable / TemplateStructure block mixins: one method per tag

Every failure raises ParseError with the line, column and source line of
the offending token.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from liquor._types import Token
from liquor.environment.registry import CustomTag
from liquor.nodes import Template
from liquor.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from liquor.parser.blocks.template_structure import TemplateStructureBlockParsingMixin
from liquor.parser.blocks.variables import VariableBlockParsingMixin
from liquor.parser.expressions import ExpressionParsingMixin
from liquor.parser.statements import StatementParsingMixin

logger = logging.getLogger(__name__)

_NO_TAGS: Mapping[str, CustomTag] = MappingProxyType({})


class Parser(
    StatementParsingMixin,
    ControlFlowBlockParsingMixin,
    VariableBlockParsingMixin,
    TemplateStructureBlockParsingMixin,
    ExpressionParsingMixin,
):
    """Recursive descent parser for Liquor templates.

    Args:
        tokens: Token list from the Lexer (EOF-terminated)
        name: Template name for error messages
        filename: Source file path for error messages
        source: Original source, for error snippets and tag markup
        tags: Host-registered tags, checked before built-ins

    Example:
        >>> tokens = Lexer("{% if x %}yes{% endif %}").tokenize()
        >>> Parser(tokens).parse()
        Template(lineno=1, col_offset=0, body=(If(...),))
    """

    def __init__(
        self,
        tokens: list[Token],
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        tags: Mapping[str, CustomTag] | None = None,
    ):
        self._tokens = tokens
        self._pos = 0
        self._name = name
        self._filename = filename or name
        self._source = source
        self._tags = tags if tags is not None else _NO_TAGS
        self._block_stack: list[tuple[str, Token]] = []
        self._loop_depth = 0
        self._line_starts: list[int] | None = None

    def parse(self) -> Template:
        """Parse the whole token list into a Template root node."""
        body = self._parse_body()
        self._check_stray_tag()
        logger.debug("Parsed %s: %d top-level nodes", self._name or "<template>", len(body))
        return Template(lineno=1, col_offset=0, body=tuple(body))

    def _markup(self, start: Token, end: Token) -> str:
        """Source text from ``start`` up to (not including) ``end``."""
        if self._source is None:
            return ""
        if self._line_starts is None:
            self._line_starts = [0] + [
                i + 1 for i, char in enumerate(self._source) if char == "\n"
            ]
        begin = self._line_starts[start.lineno - 1] + start.col_offset
        stop = self._line_starts[end.lineno - 1] + end.col_offset
        return self._source[begin:stop].strip().removesuffix("-").rstrip()
