"""tinyc/target.py – target abstract syntax tree.

Shaped like the C-like output syntax.  Built fresh by the transformer
(never aliasing source nodes) and printed by :mod:`tinyc.codegen`.
Child sequences are plain lists because the transformer fills them in
while it walks the source tree; after ``transform`` returns they are
treated as read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, FrozenSet, List, Union

from tinyc.ast import NodeKind

__all__ = [
    "TARGET_KINDS",
    "Program",
    "ExpressionStatement",
    "CallExpression",
    "Identifier",
    "NumberLiteral",
    "StringLiteral",
    "Argument",
    "Statement",
    "Node",
]


@dataclass
class Identifier:
    name: str

    kind: ClassVar[NodeKind] = NodeKind.IDENTIFIER


@dataclass
class NumberLiteral:
    value: str

    kind: ClassVar[NodeKind] = NodeKind.NUMBER_LITERAL


@dataclass
class StringLiteral:
    value: str

    kind: ClassVar[NodeKind] = NodeKind.STRING_LITERAL


@dataclass
class CallExpression:
    callee: Identifier
    arguments: List["Argument"] = field(default_factory=list)

    kind: ClassVar[NodeKind] = NodeKind.CALL_EXPRESSION


@dataclass
class ExpressionStatement:
    """A top-level call, printed with a trailing ``;``."""

    expression: CallExpression

    kind: ClassVar[NodeKind] = NodeKind.EXPRESSION_STATEMENT


@dataclass
class Program:
    body: List["Statement"] = field(default_factory=list)

    kind: ClassVar[NodeKind] = NodeKind.PROGRAM


Argument = Union[CallExpression, NumberLiteral, StringLiteral]
# Top-level literals pass through unwrapped.
Statement = Union[ExpressionStatement, NumberLiteral, StringLiteral]
Node = Union[
    Program, ExpressionStatement, CallExpression,
    Identifier, NumberLiteral, StringLiteral,
]

TARGET_KINDS: FrozenSet[NodeKind] = frozenset(NodeKind)
