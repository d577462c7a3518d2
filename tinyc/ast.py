"""tinyc/ast.py – source abstract syntax tree.

The parser produces this tree; the transformer consumes it.  It mirrors
the Lisp-like input syntax one to one.

Design invariants
-----------------
* Every node is a frozen dataclass; children live in tuples, so the tree
  is immutable after construction and strictly nested (no cycles).
* Nodes compare by value.  Two front ends that read the same program
  (the token parser, the S-expression reader, the output reader) build
  equal trees.
* Every node exposes ``kind``, the tag the traversal engine dispatches
  on.  Number values stay text; no numeric conversion happens anywhere.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar, FrozenSet, Iterator, Tuple, Union

__all__ = [
    "NodeKind",
    "SOURCE_KINDS",
    "Program",
    "CallExpression",
    "NumberLiteral",
    "StringLiteral",
    "Expression",
    "Node",
    "depth",
]


class NodeKind(enum.Enum):
    """Tags for source- and target-AST nodes."""

    PROGRAM = "Program"
    CALL_EXPRESSION = "CallExpression"
    NUMBER_LITERAL = "NumberLiteral"
    STRING_LITERAL = "StringLiteral"
    # target-only
    EXPRESSION_STATEMENT = "ExpressionStatement"
    IDENTIFIER = "Identifier"

    @property
    def snake_name(self) -> str:
        """``CallExpression`` → ``call_expression``."""
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    value: str

    kind: ClassVar[NodeKind] = NodeKind.NUMBER_LITERAL


@dataclass(frozen=True, slots=True)
class StringLiteral:
    value: str

    kind: ClassVar[NodeKind] = NodeKind.STRING_LITERAL


@dataclass(frozen=True, slots=True)
class CallExpression:
    """``(name param ...)``."""

    name: str
    params: Tuple["Expression", ...] = field(default_factory=tuple)

    kind: ClassVar[NodeKind] = NodeKind.CALL_EXPRESSION

    def children(self) -> Iterator["Expression"]:
        return iter(self.params)


@dataclass(frozen=True, slots=True)
class Program:
    """Root node: top-level expressions in encounter order."""

    body: Tuple["Expression", ...] = field(default_factory=tuple)

    kind: ClassVar[NodeKind] = NodeKind.PROGRAM

    def children(self) -> Iterator["Expression"]:
        return iter(self.body)


Expression = Union[CallExpression, NumberLiteral, StringLiteral]
Node = Union[Program, CallExpression, NumberLiteral, StringLiteral]

SOURCE_KINDS: FrozenSet[NodeKind] = frozenset({
    NodeKind.PROGRAM,
    NodeKind.CALL_EXPRESSION,
    NodeKind.NUMBER_LITERAL,
    NodeKind.STRING_LITERAL,
})


def depth(node: Node) -> int:
    """Deepest chain of nested CallExpressions below and including *node*."""
    if isinstance(node, Program):
        return max((depth(child) for child in node.body), default=0)
    if isinstance(node, CallExpression):
        return 1 + max((depth(child) for child in node.params), default=0)
    return 0
