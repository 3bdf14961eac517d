"""
Ember Language Parser

Parses Ember tokens into an abstract syntax tree (AST).

The parser is a set of mutually recursive methods on one ``Parser`` object
that owns its token source. Binary and assignment expressions are built by
precedence climbing over a fixed operator table; everything else is plain
recursive descent with a single token of lookahead.

Supported Constructs
--------------------
- Literals: numbers, `true`/`false`, 'c' characters, "strings"
- Identifiers and grouped `( expr )` expressions
- Binary operators and `=` assignment (see ``OP_PRECEDENCE``)
- Conditionals: `if cond then [else other]`
- Closures: `cls(a, b) { ... }`
- Functions: `def name(type arg, ...) body`
- Extern declarations: `ext name(type [arg], ...)`
- Calls: `f(a, b)` with a tolerated trailing comma
- Blocks: `{ a; b; c }`

Parser Behavior
---------------
- Fail-fast: the first diagnostic aborts the parse, no partial AST.
- Trailing separators are accepted in every delimited list.
- Nesting deeper than ``max_depth`` raises ``RecursionLimitError``.

Entry Points
------------
- ``Parser(tokens).parse()``: parse a whole program into an ``AST``.
- ``parse_source(source)``: lex and parse source text.
- ``try_parse(source)``: like ``parse_source`` but returns a ``ParseResult``.

Raises
------
ParseError
    Any subclass from ``ember.ember_errors`` on malformed input.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import NoReturn, TypeVar

from ember.ember_ast import (
    AST,
    Assign,
    ASTNode,
    Binary,
    Block,
    Boolean,
    Call,
    Character,
    Closure,
    Function,
    Identifier,
    If,
    Number,
    Parameter,
    Program,
    String,
)
from ember.ember_constants import (
    CHAR,
    DEFAULT_MAX_DEPTH,
    IDENT,
    KEYWORD,
    NUMBER,
    OP_PRECEDENCE,
    OPERATOR,
    PUNC,
    STRING,
)
from ember.ember_errors import (
    EmberError,
    InvalidName,
    InvalidNumericLiteral,
    MissingKeyword,
    MissingOperator,
    MissingPunctuation,
    ParseError,
    RecursionLimitError,
    UnexpectedEndOfInput,
    UnexpectedToken,
)
from ember.ember_lexer import ListTokenSource, Token, TokenSource, TokenStream

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Parser:
    """
    Ember Parser Class

    Transforms a token source into an ``AST``. Each parser owns exactly one
    token source; parsers share no state, so independent parses may run
    side by side.

    Attributes
    ----------
    input : TokenSource
        Where tokens are read from. A plain list is wrapped in a
        ``ListTokenSource``.
    max_depth : int
        Maximum expression nesting before ``RecursionLimitError``.
    depth : int
        Current expression nesting.
    """

    def __init__(
        self,
        tokens: TokenSource | list[Token],
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if isinstance(tokens, list):
            tokens = ListTokenSource(tokens)
        self.input: TokenSource = tokens
        self.max_depth: int = max_depth
        self.depth: int = 0

    # Lookahead predicates

    def is_punc(self, ch: str | None = None) -> bool:
        tok = self.input.peek()
        return tok.kind == PUNC and (ch is None or tok.value == ch)

    def is_kw(self, kw: str | None = None) -> bool:
        tok = self.input.peek()
        return tok.kind == KEYWORD and (kw is None or tok.value == kw)

    def is_op(self, op: str | None = None) -> bool:
        tok = self.input.peek()
        return tok.kind == OPERATOR and (op is None or tok.value == op)

    # Consumption helpers

    def expected(self, message: str, error: type[ParseError]) -> NoReturn:
        """Fail with ``error``, or with ``UnexpectedEndOfInput`` if the stream is exhausted."""
        if self.input.at_end():
            self.input.fail(f"{message}, got end of input", UnexpectedEndOfInput)
        self.input.fail(message, error)

    def skip_punc(self, ch: str) -> Token:
        if not self.is_punc(ch):
            self.expected(f"Token '{ch}' expected", MissingPunctuation)
        return self.input.next()

    def skip_kw(self, kw: str) -> Token:
        if not self.is_kw(kw):
            self.expected(f'Keyword "{kw}" expected', MissingKeyword)
        return self.input.next()

    def skip_op(self, op: str) -> Token:
        if not self.is_op(op):
            self.expected(f"Operator '{op}' expected", MissingOperator)
        return self.input.next()

    def unexpected(self) -> NoReturn:
        if self.input.at_end():
            self.input.fail("Unexpected end of input", UnexpectedEndOfInput)
        self.input.fail(f'Unexpected token "{self.input.peek().value}"', UnexpectedToken)

    def expect_name(self, message: str) -> Token:
        """Consume an identifier token or fail with ``InvalidName``."""
        if self.input.peek().kind != IDENT:
            self.expected(message, InvalidName)
        return self.input.next()

    # Generic list parsing

    def delimited(
        self, start: str, end: str, separator: str, parse_item: Callable[[], T]
    ) -> list[T]:
        """Parse ``start item (separator item)* [separator] end``.

        The closing delimiter is checked both before and after each
        separator, which is what lets a trailing separator through.
        """
        items: list[T] = []
        first = True
        self.skip_punc(start)
        while not self.input.at_end():
            if self.is_punc(end):
                break
            if first:
                first = False
            else:
                self.skip_punc(separator)
            if self.is_punc(end):
                break
            items.append(parse_item())
        self.skip_punc(end)
        return items

    # Operators and calls

    def precedence(self, tok: Token) -> int:
        prec = OP_PRECEDENCE.get(tok.value)
        if prec is None:
            self.input.fail(f'Unknown operator "{tok.value}"', UnexpectedToken)
        return prec

    def maybe_binary(self, left: ASTNode | None, prec: int) -> ASTNode | None:
        """Absorb operators binding tighter than ``prec`` onto ``left``.

        The right operand climbs from the consumed operator's own
        precedence; the loop then continues at the original floor, so
        operators of equal precedence (``=`` included) group to the left.
        """
        while self.is_op():
            tok = self.input.peek()
            tok_prec = self.precedence(tok)
            if tok_prec <= prec:
                break
            self.input.next()
            right = self.maybe_binary(self.parse_atom(), tok_prec)
            if tok.value == "=":
                left = Assign(tok.value, left, right)
            else:
                left = Binary(tok.value, left, right)
        return left

    def parse_call(self, func: ASTNode | None) -> Call:
        return Call(func, self.delimited("(", ")", ",", self.parse_expression))

    def maybe_call(self, parse: Callable[[], ASTNode | None]) -> ASTNode | None:
        """Run ``parse`` and wrap the result in one ``Call`` if ``(`` follows."""
        result = parse()
        return self.parse_call(result) if self.is_punc("(") else result

    # Atoms

    def parse_bool(self) -> Boolean:
        return Boolean(self.input.next().value == "true")

    def parse_varname(self) -> str:
        return self.expect_name("Variable name expected").value

    def parse_param(self) -> Parameter:
        type_name = self.expect_name("Type name expected").value
        name = None
        if self.input.peek().kind == IDENT:
            name = self.input.next().value
        return Parameter(type_name, name)

    def parse_closure(self) -> Closure:
        self.skip_kw("cls")
        params = self.delimited("(", ")", ",", self.parse_varname)
        if self.is_punc("{"):
            return Closure(params, self.parse_program())
        return Closure(params, Program(Block([self.parse_expression()])))

    def parse_if(self) -> If:
        self.skip_kw("if")
        cond = self.parse_expression()
        then = self.parse_expression()
        els = None
        if self.is_kw("else"):
            self.input.next()
            els = self.parse_expression()
        return If(cond, then, els)

    def parse_ext(self) -> Function:
        self.skip_kw("ext")
        name = self.expect_name("Function name expected").value
        return Function(name, self.delimited("(", ")", ",", self.parse_param), None)

    def parse_func(self) -> Function:
        self.skip_kw("def")
        # Unlike ext, any token kind is accepted as the name here.
        if self.input.at_end():
            self.input.fail("Function name expected", UnexpectedEndOfInput)
        name = self.input.next().value
        params: list[Parameter] = []
        if self.is_punc("("):
            params = self.delimited("(", ")", ",", self.parse_param)
        body = self.parse_expression()
        return Function(name, params, body)

    def parse_literal(self) -> ASTNode:
        tok = self.input.peek()
        if tok.kind == IDENT:
            self.input.next()
            return Identifier(tok.value)
        if tok.kind == NUMBER:
            if not (tok.value.isascii() and tok.value.isdigit()):
                self.input.fail(
                    f'Invalid number literal "{tok.value}"', InvalidNumericLiteral
                )
            self.input.next()
            return Number(int(tok.value))
        if tok.kind == CHAR:
            if not tok.value:
                self.input.fail("Empty character literal", UnexpectedToken)
            self.input.next()
            return Character(ord(tok.value[0]))
        if tok.kind == STRING:
            self.input.next()
            return String(tok.value)
        self.unexpected()

    def parse_atom_body(self) -> ASTNode | None:
        if self.is_kw("ext"):
            return self.parse_ext()
        if self.is_kw("def"):
            return self.parse_func()
        if self.is_punc("("):
            self.input.next()
            expr = self.parse_expression()
            self.skip_punc(")")
            return expr
        if self.is_punc("{"):
            return self.parse_program()
        if self.is_kw("if"):
            return self.parse_if()
        if self.is_kw("true") or self.is_kw("false"):
            return self.parse_bool()
        if self.is_kw("cls"):
            return self.parse_closure()
        return self.parse_literal()

    def parse_atom(self) -> ASTNode | None:
        return self.maybe_call(self.parse_atom_body)

    # Expressions and blocks

    def parse_expression(self) -> ASTNode | None:
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                self.input.fail(
                    f"Expression nested deeper than {self.max_depth} levels",
                    RecursionLimitError,
                )
            return self.maybe_call(lambda: self.maybe_binary(self.parse_atom(), 0))
        finally:
            self.depth -= 1

    def parse_program(self) -> Program | None:
        """Parse ``{ expr; ... }``. An empty block yields None, not an empty Program."""
        body = self.delimited("{", "}", ";", self.parse_expression)
        if not body:
            return None
        return Program(Block(body))

    def parse(self) -> AST:
        """Parse a full Ember program and return its top-level AST."""
        body: list[ASTNode | None] = []
        while not self.input.at_end():
            node = self.parse_expression()
            body.append(node)
            logger.debug(
                "parsed top-level expression %d: %s", len(body), type(node).__name__
            )
            if not self.input.at_end():
                self.skip_punc(";")
        return AST(body)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of ``try_parse``: exactly one of ``ast`` and ``error`` is set."""

    ast: AST | None = None
    error: EmberError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_source(source: str, max_depth: int = DEFAULT_MAX_DEPTH) -> AST:
    """Lex and parse ``source`` into an AST.

    Raises:
        EmberError: On the first lexical or syntactic error.
    """
    return Parser(TokenStream.from_source(source), max_depth=max_depth).parse()


def try_parse(
    source: str | TokenSource | list[Token], max_depth: int = DEFAULT_MAX_DEPTH
) -> ParseResult:
    """Parse without raising: failures come back as ``ParseResult.error``."""
    tokens = TokenStream.from_source(source) if isinstance(source, str) else source
    try:
        ast = Parser(tokens, max_depth=max_depth).parse()
    except EmberError as err:
        logger.debug("parse failed: %s", err)
        return ParseResult(error=err)
    return ParseResult(ast=ast)


__all__ = ["ParseResult", "Parser", "parse_source", "try_parse"]
