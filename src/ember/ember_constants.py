"""
Shared constants for the Ember lexer and parser.

Token kinds, the keyword table, punctuation and operator character sets,
and the binary operator precedence table live here so the lexer, parser,
CLI and tests agree on a single source of truth.
"""

# Token kinds
PUNC = "PUNC"
KEYWORD = "KW"
OPERATOR = "OP"
IDENT = "IDENT"
NUMBER = "NUMBER"
CHAR = "CHAR"
STRING = "STRING"
EOF = "EOF"
ERROR = "ERROR"

KEYWORDS: frozenset[str] = frozenset(
    {"ext", "def", "if", "else", "true", "false", "cls"}
)

PUNCTUATION = ",;(){}[]"

# Higher binds tighter.
OP_PRECEDENCE: dict[str, int] = {
    "=": 1,
    "||": 2,
    "&&": 3,
    "<": 7,
    ">": 7,
    "<=": 7,
    ">=": 7,
    "==": 7,
    "!=": 7,
    "+": 10,
    "-": 10,
    "*": 20,
    "/": 20,
    "%": 20,
}

OPERATOR_CHARS: frozenset[str] = frozenset("".join(OP_PRECEDENCE))

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

# Each nesting level costs several Python frames; stay well clear of the
# interpreter's own recursion limit.
DEFAULT_MAX_DEPTH = 64

MAX_DEPTH_ENV = "EMBER_MAX_DEPTH"

SOURCE_SUFFIX = ".em"

__all__ = [
    "CHAR",
    "DEFAULT_MAX_DEPTH",
    "EOF",
    "ERROR",
    "IDENT",
    "KEYWORD",
    "KEYWORDS",
    "MAX_DEPTH_ENV",
    "NUMBER",
    "OPERATOR",
    "OPERATOR_CHARS",
    "OP_PRECEDENCE",
    "PUNC",
    "PUNCTUATION",
    "SOURCE_SUFFIX",
    "STRING",
    "STRING_ESCAPES",
]
