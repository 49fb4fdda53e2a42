"""Parser error handling for Liquor.

Provides ParseError with source context and suggestions.
"""

from __future__ import annotations

from liquor._types import Token
from liquor.environment.exceptions import ErrorCode, TemplateSyntaxError


class ParseError(TemplateSyntaxError):
    """Syntax error raised while lexing or parsing, anchored to a token.

    Displays the offending source line with a caret under the token, in
    the same layout as every other Liquor diagnostic.
    """

    def __init__(
        self,
        message: str,
        token: Token,
        source: str | None = None,
        filename: str | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.token = token
        if code is not None:
            self.code = code
        super().__init__(
            message,
            lineno=token.lineno,
            filename=filename,
            source=source,
            col_offset=token.col_offset,
            suggestion=suggestion,
        )

    def _format_message(self) -> str:
        return "Parse " + super()._format_message().removeprefix("Syntax ")
