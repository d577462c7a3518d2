#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
tinyc/visitor.py
================

Generic traversal engine for the source AST.

Provides:
- ``Visit`` — an optional ``enter`` / ``exit`` callback pair
- ``VisitorTable`` — mapping from node kind to its ``Visit``
- ``traverse`` — depth-first pre/post-order walk driven by a table
- ``visitor_table`` — builds a table from ``enter_X`` / ``exit_X`` methods
- ``Visitor`` — convenience base class over ``visitor_table``

The engine only decides *when* callbacks run.  It never inspects what
they do and never builds nodes of its own; everything tree-shaped that
happens during a walk belongs to the callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from tinyc import ast as A
from tinyc.errors import ErrorPhase, MaxDepthExceededError, UnknownNodeKindError

__all__ = [
    "Callback",
    "Visit",
    "VisitorTable",
    "traverse",
    "visitor_table",
    "Visitor",
]

#: ``callback(node, parent)``; ``parent`` is ``None`` for the root.
Callback = Callable[[Any, Optional[Any]], None]


@dataclass(frozen=True)
class Visit:
    """Callbacks registered for one node kind; either may be omitted."""

    enter: Optional[Callback] = None
    exit: Optional[Callback] = None


VisitorTable = Mapping[A.NodeKind, Visit]


def _kind_of(node: Any) -> Any:
    kind = getattr(node, "kind", None)
    if kind not in A.SOURCE_KINDS:
        raise UnknownNodeKindError(
            kind if kind is not None else type(node).__name__,
            ErrorPhase.TRANSFORM,
        )
    return kind


def traverse(
    tree: A.Node,
    visitor: VisitorTable,
    *,
    max_depth: Optional[int] = None,
) -> None:
    """Walk *tree* depth first, firing the callbacks in *visitor*.

    For each node: its ``enter`` callback (if any) runs before its
    children are visited left to right, its ``exit`` callback (if any)
    after.  Program children are its body, CallExpression children its
    params; literals have none.

    Raises
    ------
    UnknownNodeKindError
        A node outside the source-AST kind set was reached.  The check
        happens before any callback for that node runs.
    MaxDepthExceededError
        ``max_depth`` is set and calls nest deeper than it.
    """

    def walk(node: Any, parent: Optional[Any], depth: int) -> None:
        kind = _kind_of(node)
        if kind is A.NodeKind.CALL_EXPRESSION:
            depth += 1
            if max_depth is not None and depth > max_depth:
                raise MaxDepthExceededError(max_depth, phase=ErrorPhase.TRANSFORM)

        methods = visitor.get(kind)
        if methods is not None and methods.enter is not None:
            methods.enter(node, parent)

        if kind is A.NodeKind.PROGRAM:
            for child in node.body:
                walk(child, node, depth)
        elif kind is A.NodeKind.CALL_EXPRESSION:
            for child in node.params:
                walk(child, node, depth)
        # NumberLiteral / StringLiteral: leaves

        if methods is not None and methods.exit is not None:
            methods.exit(node, parent)

    walk(tree, None, 0)


# ---------------------------------------------------------------------------
# Method-based tables
# ---------------------------------------------------------------------------

def visitor_table(obj: Any) -> Dict[A.NodeKind, Visit]:
    """Collect ``enter_<kind>`` / ``exit_<kind>`` methods of *obj*.

    Kind names are snake case: ``enter_program``,
    ``exit_call_expression``, ``enter_number_literal``, ...
    Kinds with neither method are left out of the table.
    """
    table: Dict[A.NodeKind, Visit] = {}
    for kind in A.SOURCE_KINDS:
        enter = getattr(obj, f"enter_{kind.snake_name}", None)
        exit_ = getattr(obj, f"exit_{kind.snake_name}", None)
        if enter is not None or exit_ is not None:
            table[kind] = Visit(enter=enter, exit=exit_)
    return table


class Visitor:
    """Base class for method-based visitors.

    Subclasses define any of the ``enter_X`` / ``exit_X`` hooks, each
    taking ``(node, parent)``::

        class NameCollector(Visitor):
            def __init__(self):
                self.names = []

            def enter_call_expression(self, node, parent):
                self.names.append(node.name)
    """

    def table(self) -> Dict[A.NodeKind, Visit]:
        return visitor_table(self)

    def traverse(self, tree: A.Node, *, max_depth: Optional[int] = None) -> None:
        traverse(tree, self.table(), max_depth=max_depth)
