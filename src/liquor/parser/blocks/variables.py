"""Variable binding block parsing for the Liquor parser.

Provides mixin for parsing assign and capture.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from liquor._types import TokenType
from liquor.nodes import Assign, Capture, Expr, FilterCall, Node
from liquor.parser.blocks.core import BlockStackMixin


class VariableBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing variable bindings.

    Required Host Attributes:
        - All from BlockStackMixin
        - _parse_body, _parse_primary, _parse_filters: methods
    """

    if TYPE_CHECKING:

        def _parse_body(self) -> list[Node]: ...
        def _parse_primary(self) -> Expr: ...
        def _parse_filters(self, end: TokenType) -> tuple[FilterCall, ...]: ...

    def _parse_assign(self) -> Assign:
        """Parse {% assign name = value | filter: arg %}."""
        start = self._advance()  # consume 'assign'
        name = self._expect_name("Expected variable name after 'assign'")
        self._expect(TokenType.ASSIGN, f"Expected '=' after '{name}' in assign")
        value = self._parse_primary()
        filters = self._parse_filters(TokenType.BLOCK_END)
        self._expect(TokenType.BLOCK_END)

        return Assign(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=name,
            value=value,
            filters=filters,
        )

    def _parse_capture(self) -> Capture:
        """Parse {% capture name %}...{% endcapture %}."""
        start = self._advance()  # consume 'capture'
        self._push_block("capture", start)

        if self._match(TokenType.STRING):
            name = self._advance().value
        else:
            name = self._expect_name("Expected variable name after 'capture'")
        self._expect(TokenType.BLOCK_END)

        body = self._parse_body()
        self._consume_end_tag("capture")

        return Capture(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=name,
            body=tuple(body),
        )
