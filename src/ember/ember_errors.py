"""
Diagnostics raised by the Ember lexer and parser.

Every failure is fatal: the first diagnostic aborts the whole parse and no
partial tree is returned. All classes derive from the built-in
``SyntaxError`` so callers that only care about "the source is bad" can
catch that, while tests and tools can match the precise subclass.

Hierarchy:
    EmberError
        LexError
        ParseError
            UnexpectedToken
            MissingPunctuation
            MissingKeyword
            MissingOperator
            InvalidName
            InvalidNumericLiteral
            UnexpectedEndOfInput
            RecursionLimitError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ember.ember_lexer import Token


class EmberError(SyntaxError):
    """Base class for all Ember diagnostics.

    Attributes:
        message (str): The bare diagnostic text, without position.
        line (int): 1-based source line, or 0 when unknown.
        col (int): 1-based source column, or 0 when unknown.
        token (Token | None): The offending token, when there is one.
    """

    def __init__(
        self,
        message: str,
        line: int = 0,
        col: int = 0,
        token: Token | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.col = col
        self.token = token

    def __str__(self) -> str:
        if self.line:
            return f"{self.message} at line {self.line}, col {self.col}"
        return self.message


class LexError(EmberError):
    """Raised for malformed source text (e.g. an unterminated string)."""


class ParseError(EmberError):
    """Raised when the token stream does not match the grammar."""


class UnexpectedToken(ParseError):
    pass


class MissingPunctuation(ParseError):
    pass


class MissingKeyword(ParseError):
    pass


class MissingOperator(ParseError):
    pass


class InvalidName(ParseError):
    """A type, variable or function name was not an identifier token."""


class InvalidNumericLiteral(ParseError):
    pass


class UnexpectedEndOfInput(ParseError):
    """The token stream ended inside an unfinished construct."""


class RecursionLimitError(ParseError):
    """Expression nesting exceeded the parser's configured depth."""


__all__ = [
    "EmberError",
    "InvalidName",
    "InvalidNumericLiteral",
    "LexError",
    "MissingKeyword",
    "MissingOperator",
    "MissingPunctuation",
    "ParseError",
    "RecursionLimitError",
    "UnexpectedEndOfInput",
    "UnexpectedToken",
]
