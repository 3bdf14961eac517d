"""
Lexical analyzer for the Ember language.

This module turns raw source text into the token stream the parser reads:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: A single token with kind, literal text and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.
    TokenSource: Protocol the parser consumes (peek/next/at_end/fail).
    TokenStream: TokenSource that pulls tokens lazily from a Lexer.
    ListTokenSource: TokenSource over an already built list of tokens.

Features:
    - Skips whitespace and single-line comments (`#`)
    - Longest-match recognition of operators from the precedence table
    - Recognizes identifiers, keywords, numbers, 'c' characters and
      "..." strings (with escape sequences)

Raises:
    LexError: If a string or character literal is unterminated.

Example:
    >>> stream = TokenStream(Lexer(CharacterStream("x = 42")))
    >>> stream.next()
    Token(IDENT, x)
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, NoReturn, Protocol

from ember.ember_constants import (
    CHAR,
    EOF,
    ERROR,
    IDENT,
    KEYWORD,
    KEYWORDS,
    NUMBER,
    OP_PRECEDENCE,
    OPERATOR,
    OPERATOR_CHARS,
    PUNC,
    PUNCTUATION,
    STRING,
    STRING_ESCAPES,
)
from ember.ember_errors import LexError, ParseError


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            LexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise LexError(
                "Attempted to read past end of source", self.line, self.column
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at ``offset`` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the Ember language.

    Attributes:
        kind (str): The token kind (e.g. 'IDENT', 'NUMBER', 'PUNC', 'EOF').
        value (str): The literal text of the token.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("kind", "value", "line", "col")

    def __init__(self, kind: str, value: str, line: int = 0, col: int = 0):
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Token is immutable")

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.line, self.col))


class Lexer:
    """Lexical analyzer for the Ember language.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest known operator from the current position.

        Returns:
            Token | None: An operator Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(2):  # longest operator is two characters
            ch = self.stream.peek(i)
            if ch == "" or ch not in OPERATOR_CHARS:
                break
            candidate += ch
            if candidate in OP_PRECEDENCE:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(OPERATOR, max_token, line, col)

        return None

    def read_escaped(self, quote: str, line: int, col: int) -> str:
        """Reads a quoted literal body up to ``quote``, decoding escapes."""
        self.advance()
        val = ""
        while not self.stream.end_of_file():
            ch = self.advance()
            if ch == "\\":
                if self.stream.end_of_file():
                    break
                esc = self.advance()
                val += STRING_ESCAPES.get(esc, esc)
            elif ch == quote:
                return val
            else:
                val += ch
        kind = "string" if quote == '"' else "character"
        raise LexError(f"Unterminated {kind} literal", line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token; an ``EOF`` token once the source is exhausted.

        Raises:
            LexError: If a string or character literal is unterminated.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(EOF, "EOF", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isalpha() or ch == "_":
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            return Token(KEYWORD if ident in KEYWORDS else IDENT, ident, line, col)

        # 2. Number; validated by the parser
        if ch.isdigit():
            num = ""
            while not self.stream.end_of_file() and (
                self.peek().isdigit() or self.peek() == "."
            ):
                num += self.advance()
            return Token(NUMBER, num, line, col)

        # 3. String or character
        if ch == '"':
            return Token(STRING, self.read_escaped('"', line, col), line, col)
        if ch == "'":
            return Token(CHAR, self.read_escaped("'", line, col), line, col)

        # 4. Punctuation
        if ch in PUNCTUATION:
            return Token(PUNC, self.advance(), line, col)

        # 5. Operator
        token = self.match_operator()
        if token:
            return token

        # 6. Unknown character; the parser reports it
        return Token(ERROR, self.advance(), line, col)

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            if tok.kind == EOF:
                return
            yield tok


def tokenize(source: str) -> list[Token]:
    """Lex ``source`` completely and return its tokens, excluding EOF."""
    return list(Lexer(CharacterStream(source, 0, 1, 1)))


class TokenSource(Protocol):
    """The interface the parser consumes tokens through."""

    def peek(self) -> Token: ...

    def next(self) -> Token: ...

    def at_end(self) -> bool: ...

    def fail(self, message: str, error: type[ParseError] = ParseError) -> NoReturn: ...


class TokenStream:
    """A TokenSource that lexes lazily, one token of lookahead at a time.

    Attributes:
        lexer (Lexer): The lexer producing tokens.
        current (Token | None): The buffered lookahead token, if any.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.current: Token | None = None

    @classmethod
    def from_source(cls, source: str) -> TokenStream:
        return cls(Lexer(CharacterStream(source, 0, 1, 1)))

    def peek(self) -> Token:
        if self.current is None:
            self.current = self.lexer.next_token()
        return self.current

    def next(self) -> Token:
        tok = self.peek()
        if tok.kind != EOF:
            self.current = None
        return tok

    def at_end(self) -> bool:
        return self.peek().kind == EOF

    def fail(self, message: str, error: type[ParseError] = ParseError) -> NoReturn:
        """Raise ``error`` positioned at the current lookahead token."""
        tok = self.peek()
        raise error(message, tok.line, tok.col, tok)


class ListTokenSource:
    """A TokenSource over a pre-built list of tokens.

    Trailing ``EOF`` tokens in the list are ignored; end of stream is the
    end of the list.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens: list[Token] = [t for t in tokens if t.kind != EOF]
        self.position: int = 0

    def peek(self) -> Token:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        if self.tokens:
            last = self.tokens[-1]
            return Token(EOF, "EOF", last.line, last.col + len(last.value))
        return Token(EOF, "EOF")

    def next(self) -> Token:
        tok = self.peek()
        if self.position < len(self.tokens):
            self.position += 1
        return tok

    def at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def fail(self, message: str, error: type[ParseError] = ParseError) -> NoReturn:
        tok = self.peek()
        raise error(message, tok.line, tok.col, tok)


__all__ = [
    "CharacterStream",
    "Lexer",
    "ListTokenSource",
    "Token",
    "TokenSource",
    "TokenStream",
    "tokenize",
]
