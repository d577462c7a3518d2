#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
tinyc/codegen.py
================

Code generator: target AST → C-like source text.

Pure recursive structural printing, one rule per node kind:

    Program              statements joined by "\\n"
    ExpressionStatement  <expression>;
    CallExpression       <callee>(<arg>, <arg>, ...)
    Identifier           name, verbatim
    NumberLiteral        value, verbatim
    StringLiteral        "value"  (no escaping, matching the lexer)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from tinyc import target as T
from tinyc.ast import NodeKind
from tinyc.errors import ErrorPhase, MaxDepthExceededError, UnknownNodeKindError

__all__ = ["generate", "CodeGenerator"]

_log = logging.getLogger("tinyc.codegen")


class CodeGenerator:
    """Prints a target AST.  Stateless apart from the depth limit."""

    def __init__(self, max_depth: Optional[int] = None) -> None:
        self.max_depth = max_depth

    def generate(self, node: T.Node) -> str:
        return self._emit(node, 0)

    def _emit(self, node: Any, depth: int) -> str:
        kind = getattr(node, "kind", None)

        if kind is NodeKind.PROGRAM:
            return "\n".join(self._emit(stmt, depth) for stmt in node.body)

        if kind is NodeKind.EXPRESSION_STATEMENT:
            return self._emit(node.expression, depth) + ";"

        if kind is NodeKind.CALL_EXPRESSION:
            depth += 1
            if self.max_depth is not None and depth > self.max_depth:
                raise MaxDepthExceededError(self.max_depth, phase=ErrorPhase.CODEGEN)
            args = ", ".join(self._emit(arg, depth) for arg in node.arguments)
            return f"{self._emit(node.callee, depth)}({args})"

        if kind is NodeKind.IDENTIFIER:
            return node.name

        if kind is NodeKind.NUMBER_LITERAL:
            return node.value

        if kind is NodeKind.STRING_LITERAL:
            return '"' + node.value + '"'

        raise UnknownNodeKindError(
            kind if kind is not None else type(node).__name__,
            ErrorPhase.CODEGEN,
        )


def generate(node: T.Node, *, max_depth: Optional[int] = None) -> str:
    """Render a target-AST node (usually a Program) as text."""
    text = CodeGenerator(max_depth=max_depth).generate(node)
    _log.debug("generated %d characters", len(text))
    return text
