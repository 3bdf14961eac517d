"""
Abstract syntax tree (AST) node definitions for the Ember language.

The parser builds these nodes bottom-up and never mutates them afterwards;
every node is a frozen dataclass that exclusively owns its children.

Classes:
    ASTNode:
        Common base. Provides ``kind`` and ``to_dict()`` for JSON output.

    Number, Boolean, Character, String, Identifier:
        Leaf values. ``Character`` stores a code point, not a string.

    Assign, Binary:
        Operator applications built by the precedence climber.

    If, Closure, Function, Call:
        Compound expressions. A ``Function`` with ``body=None`` is an
        extern (foreign) declaration.

    Block, Program, AST:
        Sequences. ``Program`` wraps the ``Block`` of a ``{ ... }``
        expression; ``AST`` is the top-level sequence handed to callers.

    Parameter:
        A ``(type_name, name)`` pair used by ``Function``.

Example:
    Binary("+", Number(1), Binary("*", Number(2), Number(3)))
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

ASTDict = dict[str, Any]


def _serialize(value: Any) -> Any:
    if isinstance(value, (ASTNode, Parameter)):
        return value.to_dict()
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    return value


class ASTNode:
    """Base class for every Ember AST node.

    Subclasses are frozen dataclasses; ``kind`` is a short lowercase tag
    identifying the variant in serialized output.
    """

    kind: ClassVar[str] = "node"

    def to_dict(self) -> ASTDict:
        """Convert the node and all descendants into nested dictionaries.

        Returns:
            ASTDict: ``{"kind": ..., <field>: ...}`` with child nodes
            serialized recursively and absent children as ``None``.
        """
        out: ASTDict = {"kind": self.kind}
        for f in fields(self):  # type: ignore[arg-type]
            out[f.name.rstrip("_")] = _serialize(getattr(self, f.name))
        return out


@dataclass(frozen=True)
class Parameter:
    """A function parameter: a type name and an optional variable name."""

    type_name: str
    name: str | None = None

    def to_dict(self) -> ASTDict:
        return {"type": self.type_name, "name": self.name}


@dataclass(frozen=True)
class Number(ASTNode):
    kind: ClassVar[str] = "number"
    value: int


@dataclass(frozen=True)
class Boolean(ASTNode):
    kind: ClassVar[str] = "boolean"
    value: bool


@dataclass(frozen=True)
class Character(ASTNode):
    kind: ClassVar[str] = "character"
    value: int


@dataclass(frozen=True)
class String(ASTNode):
    kind: ClassVar[str] = "string"
    value: str


@dataclass(frozen=True)
class Identifier(ASTNode):
    kind: ClassVar[str] = "identifier"
    name: str


@dataclass(frozen=True)
class Assign(ASTNode):
    kind: ClassVar[str] = "assign"
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class Binary(ASTNode):
    kind: ClassVar[str] = "binary"
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class If(ASTNode):
    kind: ClassVar[str] = "if"
    condition: ASTNode
    then: ASTNode
    else_: ASTNode | None = None


@dataclass(frozen=True)
class Block(ASTNode):
    """A non-empty, ordered sequence of expressions."""

    kind: ClassVar[str] = "block"
    body: list[ASTNode] = field(default_factory=list)

    def __iter__(self) -> Iterator[ASTNode]:
        return iter(self.body)

    def __len__(self) -> int:
        return len(self.body)


@dataclass(frozen=True)
class Program(ASTNode):
    """A ``{ ... }`` expression; evaluates its block in order."""

    kind: ClassVar[str] = "program"
    block: Block


@dataclass(frozen=True)
class Closure(ASTNode):
    kind: ClassVar[str] = "closure"
    params: list[str]
    body: Program | None


@dataclass(frozen=True)
class Function(ASTNode):
    """A named function definition, or an extern declaration when ``body`` is None."""

    kind: ClassVar[str] = "function"
    name: str
    params: list[Parameter] = field(default_factory=list)
    body: ASTNode | None = None

    @property
    def is_extern(self) -> bool:
        return self.body is None


@dataclass(frozen=True)
class Call(ASTNode):
    kind: ClassVar[str] = "call"
    callee: ASTNode
    args: list[ASTNode] = field(default_factory=list)


@dataclass(frozen=True)
class AST(ASTNode):
    """The top-level sequence of expressions produced by the parser."""

    kind: ClassVar[str] = "ast"
    body: list[ASTNode] = field(default_factory=list)

    def __iter__(self) -> Iterator[ASTNode]:
        return iter(self.body)

    def __len__(self) -> int:
        return len(self.body)


__all__ = [
    "AST",
    "ASTDict",
    "ASTNode",
    "Assign",
    "Binary",
    "Block",
    "Boolean",
    "Call",
    "Character",
    "Closure",
    "Function",
    "Identifier",
    "If",
    "Number",
    "Parameter",
    "Program",
    "String",
]
