"""tinyc/transformer.py – source AST → target AST.

The rewrite is expressed purely as a visitor table handed to
:func:`tinyc.visitor.traverse`.  Each rule appends the node it builds
to its parent's *attachment point*: the target list that children of
that parent belong in.  Attachment points live in a side table keyed by
source-node identity and exist only for the duration of one
``transform`` call; the source tree is never touched.

An attachment point is registered for the root Program before the walk
starts and for every CallExpression inside its own ``enter`` callback,
so it is always in place before any descendant's callback looks it up.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from tinyc import ast as A
from tinyc import target as T
from tinyc.errors import InternalError
from tinyc.visitor import Visit, VisitorTable, traverse

__all__ = ["Transformer", "transform"]

_log = logging.getLogger("tinyc.transformer")


class Transformer:
    """One-shot source → target rewrite.  Use :func:`transform`."""

    def __init__(self) -> None:
        self._attachments: Dict[int, List[Any]] = {}

    def rules(self) -> VisitorTable:
        return {
            A.NodeKind.NUMBER_LITERAL: Visit(enter=self._enter_number),
            A.NodeKind.STRING_LITERAL: Visit(enter=self._enter_string),
            A.NodeKind.CALL_EXPRESSION: Visit(enter=self._enter_call),
        }

    def run(self, program: A.Program, max_depth: Optional[int] = None) -> T.Program:
        result = T.Program()
        self._attachments = {id(program): result.body}
        try:
            traverse(program, self.rules(), max_depth=max_depth)
        finally:
            self._attachments = {}
        _log.debug("transformed %d top-level statements", len(result.body))
        return result

    # ─────────────────────────────────────────────────────────────
    # Attachment points
    # ─────────────────────────────────────────────────────────────

    def _attachment(self, parent: Optional[Any]) -> List[Any]:
        try:
            return self._attachments[id(parent)]
        except KeyError:
            raise InternalError(
                f"No attachment point registered for parent {parent!r}"
            ) from None

    # ─────────────────────────────────────────────────────────────
    # Rewrite rules
    # ─────────────────────────────────────────────────────────────

    def _enter_number(self, node: A.NumberLiteral, parent: Any) -> None:
        self._attachment(parent).append(T.NumberLiteral(value=node.value))

    def _enter_string(self, node: A.StringLiteral, parent: Any) -> None:
        self._attachment(parent).append(T.StringLiteral(value=node.value))

    def _enter_call(self, node: A.CallExpression, parent: Any) -> None:
        expression = T.CallExpression(callee=T.Identifier(name=node.name))
        self._attachments[id(node)] = expression.arguments

        if getattr(parent, "kind", None) is A.NodeKind.CALL_EXPRESSION:
            self._attachment(parent).append(expression)
        else:
            self._attachment(parent).append(T.ExpressionStatement(expression=expression))


def transform(program: A.Program, *, max_depth: Optional[int] = None) -> T.Program:
    """Rewrite a source Program into a fresh target Program."""
    return Transformer().run(program, max_depth=max_depth)
