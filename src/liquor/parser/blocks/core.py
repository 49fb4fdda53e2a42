"""Block stack management for the Liquor parser.

Every block tag pushes itself on entry and is popped by its end tag, so
an unclosed or mismatched block is reported against the tag that opened
it, not just the place parsing gave up.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from liquor._types import Token, TokenType
from liquor.environment.exceptions import ErrorCode
from liquor.parser.tokens import TokenNavigationMixin


class BlockStackMixin(TokenNavigationMixin):
    """Mixin for matching block tags against their terminators.

    Required Host Attributes:
        - _block_stack: list[tuple[str, Token]]
        - _tags: custom tag table (for end-keyword detection)
        - All from TokenNavigationMixin
    """

    if TYPE_CHECKING:
        _block_stack: list[tuple[str, Token]]

        def _is_end_keyword(self, name: str) -> bool: ...

    def _push_block(self, name: str, token: Token) -> None:
        self._block_stack.append((name, token))

    def _pop_block(self, name: str) -> None:
        if self._block_stack and self._block_stack[-1][0] == name:
            self._block_stack.pop()

    def _at_tag(self, *keywords: str) -> str | None:
        """Return the keyword if the cursor sits on ``{% keyword``."""
        if self._current.type is not TokenType.BLOCK_BEGIN:
            return None
        following = self._peek()
        if following.type is TokenType.NAME and following.value in keywords:
            return following.value
        return None

    def _enter_continuation(self, keyword: str) -> Token:
        """Consume ``{% keyword`` of an elsif/else/when branch."""
        self._expect(TokenType.BLOCK_BEGIN)
        return self._expect(TokenType.NAME, f"Expected '{keyword}'")

    def _consume_end_tag(self, name: str) -> None:
        """Consume ``{% end<name> %}`` or raise a positioned ParseError.

        Raises:
            ParseError: On EOF (unclosed block), a different end tag
                (mismatch), or a branch keyword this block does not accept.
        """
        end_name = f"end{name}"
        opener = self._block_stack[-1][1] if self._block_stack else self._current

        if self._current.type is TokenType.EOF:
            raise self._error(
                f"Unclosed '{name}' block",
                token=opener,
                suggestion=f"Add {{% {end_name} %}} to close the '{name}' block",
                code=ErrorCode.UNCLOSED_BLOCK,
            )

        keyword = self._peek()
        if self._current.type is not TokenType.BLOCK_BEGIN or keyword.type is not TokenType.NAME:
            raise self._error(f"Expected {{% {end_name} %}}", code=ErrorCode.UNEXPECTED_TOKEN)

        if keyword.value != end_name:
            if self._is_end_keyword(keyword.value):
                raise self._error(
                    f"Mismatched end tag: expected '{end_name}', got '{keyword.value}'",
                    token=keyword,
                    suggestion=(
                        f"The '{name}' block opened at line {opener.lineno} "
                        f"must be closed with {{% {end_name} %}} first"
                    ),
                    code=ErrorCode.UNEXPECTED_TOKEN,
                )
            raise self._error(
                f"Unexpected '{keyword.value}' inside '{name}' block",
                token=keyword,
                code=ErrorCode.UNEXPECTED_TOKEN,
            )

        self._advance()  # {%
        self._advance()  # end<name>
        self._expect(TokenType.BLOCK_END, f"Expected '%}}' after '{end_name}'")
        self._pop_block(name)
